"""
Transaction Flow

The orchestrator a UI calls to move value across chains:

    1. create_intent    -> IntentBuilder + POST /profiles/{id}/intent
    2. sign_and_submit  -> OperationSigner + POST /operations/{id}/submit
    3. track_operation  -> GET /operations/{id}/status until terminal

Each ``IntentResponse`` belongs to one attempt; the flow keeps no per-attempt
state, so one instance may serve several attempts concurrently.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..clients.http_client import InterspaceHttpClient
from ..clients.intent_service import IntentServiceClient
from ..config import Settings
from ..engine.cancellation import CancelToken
from ..engine.events import EventBus
from ..schemas.balances import UnifiedToken
from ..schemas.intents import GasTokenSelection, IntentResponse, IntentType, TransactionIntent
from ..schemas.operations import OperationStatus
from ..signers.bases import SigningCapability
from .builder import IntentBuilder
from .signer import OperationSigner
from .tracker import StatusCallback, StatusTracker

logger = logging.getLogger(__name__)


class FlowResult(BaseModel):
    """Outcome of one complete attempt."""
    model_config = ConfigDict(frozen=True)

    intent: IntentResponse
    status: OperationStatus

    @property
    def operation_set_id(self) -> str:
        return self.intent.operation_set_id


class TransactionFlow:
    """
    Intent -> sign -> submit -> track, in the order the backend requires.

    Errors from every step propagate unchanged; a rejected or expired bundle
    is never submitted.

    Usage:
        ```python
        flow = TransactionFlow.from_settings(settings, http, signer)
        intent = await flow.create_intent(profile_id, "transfer", usdc, "100", recipient="alice.eth")
        operation_set_id = await flow.sign_and_submit(intent)
        status = await flow.track_operation(operation_set_id)
        ```
    """

    def __init__(
        self,
        service: IntentServiceClient,
        signer: SigningCapability,
        tracker: Optional[StatusTracker] = None,
        builder: Optional[IntentBuilder] = None,
    ):
        self.service = service
        self.operation_signer = OperationSigner(signer)
        self.tracker = tracker or StatusTracker(service)
        self.builder = builder or IntentBuilder()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http: InterspaceHttpClient,
        signer: SigningCapability,
        event_bus: Optional[EventBus] = None,
    ) -> "TransactionFlow":
        service = IntentServiceClient(http)
        tracker = StatusTracker(
            service,
            poll_interval=settings.poll_interval,
            max_attempts=settings.poll_max_attempts,
            partial_is_terminal=settings.partial_is_terminal,
            event_bus=event_bus,
        )
        return cls(service, signer, tracker=tracker)

    async def create_intent(
        self,
        profile_id: str,
        intent_type: IntentType,
        token: UnifiedToken,
        amount: Union[str, int, Decimal],
        *,
        recipient: Optional[str] = None,
        to_token: Optional[str] = None,
        to_chain_id: Optional[int] = None,
        gas_token: Optional[GasTokenSelection] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> IntentResponse:
        intent = self.builder.build(
            intent_type, token, amount,
            recipient=recipient,
            to_token=to_token,
            to_chain_id=to_chain_id,
            gas_token=gas_token,
            metadata=metadata,
        )
        return await self.service.create_transaction_intent(profile_id, intent)

    async def sign_and_submit(
        self,
        intent: IntentResponse,
        cancel_token: Optional[CancelToken] = None,
    ) -> str:
        """
        Sign every operation, then submit the complete bundle.

        Returns:
            The operation set id to track.
        """
        signed = await self.operation_signer.sign_operations(intent, cancel_token=cancel_token)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        await self.tracker.submit_signed_operations(intent.operation_set_id, signed, intent=intent)
        return intent.operation_set_id

    async def track_operation(
        self,
        operation_set_id: str,
        on_update: Optional[StatusCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> OperationStatus:
        return await self.tracker.poll_operation_status(
            operation_set_id,
            on_update=on_update,
            cancel_token=cancel_token,
        )

    async def execute(
        self,
        profile_id: str,
        intent: TransactionIntent,
        on_update: Optional[StatusCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> FlowResult:
        """Run a prebuilt intent through creation, signing, submission and tracking."""
        response = await self.service.create_transaction_intent(profile_id, intent)
        operation_set_id = await self.sign_and_submit(response, cancel_token=cancel_token)
        status = await self.track_operation(operation_set_id, on_update=on_update, cancel_token=cancel_token)
        logger.info("Attempt %s ended as %s", operation_set_id, status.status.value)
        return FlowResult(intent=response, status=status)
