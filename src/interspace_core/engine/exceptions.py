"""
Exception and Error Definitions Module

Defines the exception hierarchy for the chain-abstracted transaction pipeline.
Every failure mode is a distinct, inspectable type so callers can choose
differentiated messaging (retry on transport errors, quiet dismissal on user
rejection, "still unknown" on polling timeout).

Exception Hierarchy:
    InterspaceError (root)
    ├── ApiError
    │   └── TransportError
    ├── IntentExpiredError
    ├── UserRejectedError
    ├── RequestCancelledError
    ├── OperationTimeoutError
    ├── SigningError
    └── ConfigurationError
"""

from typing import Any, Dict, Optional


class InterspaceError(Exception):
    """
    Root exception class for all project-specific exceptions.

    All custom exceptions inherit from this class to enable unified
    exception handling at the UI boundary.
    """
    pass


class ApiError(InterspaceError):
    """
    Raised when the backend abstraction service answers with a non-2xx status.

    Carries the shared API error shape ``{code, message, statusCode, details?}``.
    The core never interprets the code; it only unifies the shape.

    Attributes:
        code: Machine-readable error code (e.g. ``"INSUFFICIENT_FUNDS"``)
        message: Human-readable message from the backend
        status_code: HTTP status, or ``0`` when no response reached the client
        details: Optional structured details supplied by the backend
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details

    @property
    def is_transport(self) -> bool:
        """True when the request never reached the server."""
        return self.status_code == 0

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire-shaped error payload."""
        payload: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "statusCode": self.status_code,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status_code={self.status_code})"


class TransportError(ApiError):
    """
    Raised when no response reached the client (DNS, connect, read timeout).

    Always retryable by the caller; the core itself does not auto-retry.
    The status code is pinned to ``0``.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("NETWORK_ERROR", message, 0, details)


class IntentExpiredError(InterspaceError):
    """
    Raised when signing or submitting against operations past ``expiresAt``.

    Attributes:
        operation_set_id: Operation set whose bundle expired
        expires_at: The expiry timestamp carried by the intent response
    """

    def __init__(self, operation_set_id: str, expires_at):
        super().__init__(
            f"Operations for {operation_set_id} expired at {expires_at.isoformat()}"
        )
        self.operation_set_id = operation_set_id
        self.expires_at = expires_at


class UserRejectedError(InterspaceError):
    """
    Raised when the user declines a pending signing request.

    UI layers should treat this as a quiet outcome rather than a failure.
    """

    def __init__(self, request_id: Optional[str] = None, message: str = "User rejected request"):
        super().__init__(message)
        self.request_id = request_id


class RequestCancelledError(InterspaceError):
    """
    Raised when a caller abandons a pending request or poll through a cancel token,
    or when the signing queue is reset on logout.
    """
    pass


class OperationTimeoutError(InterspaceError):
    """
    Raised when status polling exhausts ``max_attempts`` without a terminal status.

    A timeout means "still unknown", never "failed".

    Attributes:
        operation_set_id: Operation set that was being polled
        attempts: Number of status requests issued
        last_status: Last status received, if any
    """

    def __init__(self, operation_set_id: str, attempts: int, last_status=None):
        super().__init__(
            f"Operation polling timeout for {operation_set_id} after {attempts} attempts"
        )
        self.operation_set_id = operation_set_id
        self.attempts = attempts
        self.last_status = last_status


class SigningError(InterspaceError):
    """
    Raised when a signing capability fails for a reason other than user rejection.

    This includes scenarios such as:
    - Key-share signing service unavailable
    - Call data that cannot be decoded as hex
    - Empty signature returned by the capability
    """
    pass


class ConfigurationError(InterspaceError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Non-numeric polling settings
    - Test signer requested without a signing queue
    - Session signer requested without a signing coroutine
    """
    pass
