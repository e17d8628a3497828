from .cancellation import CancelToken
from .events import BaseEvent, EventBus, RequestEnqueuedEvent, RequestSettledEvent, StatusUpdateEvent
from .exceptions import (
    InterspaceError,
    ApiError,
    TransportError,
    IntentExpiredError,
    UserRejectedError,
    RequestCancelledError,
    OperationTimeoutError,
    SigningError,
    ConfigurationError,
)
from .queue import PendingRequest, SigningRequestQueue, synthesize_approval

__all__ = [
    "CancelToken",
    "BaseEvent",
    "EventBus",
    "RequestEnqueuedEvent",
    "RequestSettledEvent",
    "StatusUpdateEvent",
    "InterspaceError",
    "ApiError",
    "TransportError",
    "IntentExpiredError",
    "UserRejectedError",
    "RequestCancelledError",
    "OperationTimeoutError",
    "SigningError",
    "ConfigurationError",
    "PendingRequest",
    "SigningRequestQueue",
    "synthesize_approval",
]
