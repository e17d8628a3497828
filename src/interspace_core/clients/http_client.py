"""
Backend HTTP Transport

Extended ``httpx.AsyncClient`` that speaks the backend's JSON conventions:
bearer authentication, the ``{success, data, message}`` response envelope
and the shared ``{code, message, statusCode, details?}`` error shape.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from ..config import Settings
from ..constants import DEFAULT_API_BASE_URL
from ..engine.exceptions import ApiError, TransportError
from ..schemas.bases import ApiEnvelope, ClientRequestHeader

logger = logging.getLogger(__name__)

TokenRefresher = Callable[[], Awaitable[Optional[str]]]


class InterspaceHttpClient(httpx.AsyncClient):
    """
    Extended httpx.AsyncClient for the backend abstraction service.

    Failures surface as typed errors:
    1. Non-2xx responses raise ``ApiError`` with the backend's code and message
    2. Requests that never got a response raise ``TransportError`` (status 0)
    3. A 401 triggers one token refresh and one retry when a refresher is set

    Fully compatible with httpx.AsyncClient and usable as an async context manager.

    Usage:
        ```python
        async with InterspaceHttpClient(base_url="https://api.example.com/api/v1") as http:
            balance = await http.request_json("GET", "/profiles/p1/balance")
        ```
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        access_token: Optional[str] = None,
        token_refresher: Optional[TokenRefresher] = None,
        **kwargs
    ):
        """
        Initialize client.

        Args:
            base_url: Versioned API root; endpoint paths are joined onto it
            access_token: Optional bearer token
            token_refresher: Optional coroutine returning a fresh token after a 401
            **kwargs: All standard httpx.AsyncClient arguments (timeout, transport, etc.)
        """
        super().__init__(base_url=base_url, **kwargs)
        self._access_token = access_token
        self._token_refresher = token_refresher

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "InterspaceHttpClient":
        kwargs.setdefault("timeout", settings.request_timeout)
        return cls(
            base_url=settings.api_base_url,
            access_token=settings.access_token,
            **kwargs
        )

    def set_access_token(self, token: Optional[str]) -> None:
        self._access_token = token

    # =========================================================================
    # JSON request / response handling
    # =========================================================================

    async def request_json(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a JSON request and return the unwrapped response data.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Endpoint path relative to the API root
            json: Optional JSON body

        Returns:
            The envelope's ``data`` member, the raw JSON body when no envelope
            is present, or ``None`` for an empty body.

        Raises:
            ApiError: On any non-2xx response.
            TransportError: When no response was received.
        """
        response = await self._send(method, path, json)

        if response.status_code == 401 and self._token_refresher is not None:
            logger.info("Access token rejected for %s %s, refreshing", method, path)
            token = await self._token_refresher()
            if token:
                self._access_token = token
                response = await self._send(method, path, json)

        return self._unwrap(response)

    async def _send(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]],
    ) -> httpx.Response:
        try:
            return await self.request(method, path, json=json, headers=self._build_headers())
        except httpx.TransportError as e:
            logger.warning("Transport failure on %s %s: %s", method, path, e)
            raise TransportError(str(e) or type(e).__name__) from e

    def _build_headers(self) -> Dict[str, str]:
        authorization = f"Bearer {self._access_token}" if self._access_token else None
        header_model = ClientRequestHeader(authorization=authorization)
        return header_model.model_dump(by_alias=True, exclude_none=True)

    def _unwrap(self, response: httpx.Response) -> Any:
        if not response.is_success:
            raise self._to_api_error(response)

        if not response.content:
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(
                "INVALID_RESPONSE",
                "Response body is not valid JSON",
                response.status_code,
            ) from e

        if isinstance(body, dict) and "success" in body and "data" in body:
            return ApiEnvelope(**body).data
        return body

    @staticmethod
    def _to_api_error(response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        return ApiError(
            code=body.get("code") or "API_ERROR",
            message=body.get("message") or "An error occurred",
            status_code=response.status_code,
            details=body.get("details"),
        )
