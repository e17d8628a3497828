"""
Intent Service Client

Thin request/response calls to the backend abstraction service. Route
finding, gas pricing and chain submission all happen server-side; this
client only submits requests and validates the responses.

Endpoints (relative to the versioned API root):
    GET  /profiles/{id}/balance
    POST /profiles/{id}/intent
    POST /operations/{operationSetId}/submit
    GET  /operations/{operationSetId}/status
"""

import logging
from typing import Any, Dict, List, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from ..engine.exceptions import ApiError
from ..schemas.intents import IntentResponse, SignedOperation, SubmitOperationsRequest, TransactionIntent
from ..schemas.operations import OperationStatus
from .http_client import InterspaceHttpClient

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class IntentServiceClient:
    """Typed wrapper over the backend abstraction service endpoints."""

    def __init__(self, http: InterspaceHttpClient):
        self._http = http

    async def get_balance_payload(self, profile_id: str) -> Dict[str, Any]:
        """Fetch the raw unified-balance payload for ``profile_id``."""
        data = await self._http.request_json("GET", f"/profiles/{_segment(profile_id)}/balance")
        if not isinstance(data, dict):
            raise ApiError("INVALID_RESPONSE", "Balance payload is not an object", 200)
        return data

    async def create_transaction_intent(self, profile_id: str, intent: TransactionIntent) -> IntentResponse:
        """
        Submit an intent and receive the unsigned operation bundle.

        The returned ``operation_set_id`` must be used verbatim for submission
        and for every status poll of this attempt.

        Raises:
            ApiError: Backend rejected the intent or answered with an invalid body.
            TransportError: No response reached the client.
        """
        logger.info("Creating %s intent for profile %s", intent.type, profile_id)
        data = await self._http.request_json(
            "POST",
            f"/profiles/{_segment(profile_id)}/intent",
            json=intent.to_wire(),
        )
        response = self._parse(IntentResponse, data)
        logger.info(
            "Intent %s produced operation set %s with %d operation(s)",
            response.intent_id,
            response.operation_set_id,
            len(response.unsigned_operations.operations),
        )
        return response

    async def submit_signed_operations(
        self,
        operation_set_id: str,
        signed_operations: List[SignedOperation],
    ) -> None:
        """Hand the complete signed bundle to the backend."""
        request = SubmitOperationsRequest(signed_operations=signed_operations)
        await self._http.request_json(
            "POST",
            f"/operations/{_segment(operation_set_id)}/submit",
            json=request.to_wire(),
        )
        logger.info("Submitted %d signed operation(s) for %s", len(signed_operations), operation_set_id)

    async def get_operation_status(self, operation_set_id: str) -> OperationStatus:
        data = await self._http.request_json("GET", f"/operations/{_segment(operation_set_id)}/status")
        return self._parse(OperationStatus, data)

    @staticmethod
    def _parse(model: Type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ApiError(
                "INVALID_RESPONSE",
                f"Unexpected {model.__name__} payload: {e.error_count()} validation error(s)",
                200,
                details={"errors": e.errors(include_url=False)},
            ) from e
