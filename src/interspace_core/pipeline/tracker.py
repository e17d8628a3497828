"""
Submission & Status Tracker

Hands the signed bundle to the backend and polls the operation set until it
reaches a terminal status.

Polling contract:
    - exactly one status request in flight at a time
    - a fixed interval between attempts (no sleep after the last attempt)
    - ``successful`` / ``failed`` always end polling; ``partial`` ends it only
      when ``partial_is_terminal`` is set
    - after ``max_attempts`` non-terminal answers ``OperationTimeoutError`` is
      raised; a timeout means "still unknown", never "failed"
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Union

from ..constants import DEFAULT_POLL_INTERVAL_MS, DEFAULT_POLL_MAX_ATTEMPTS
from ..clients.intent_service import IntentServiceClient
from ..engine.cancellation import CancelToken
from ..engine.events import EventBus, StatusUpdateEvent
from ..engine.exceptions import IntentExpiredError, OperationTimeoutError
from ..schemas.intents import IntentResponse, SignedOperation
from ..schemas.operations import OperationStatus

logger = logging.getLogger(__name__)

StatusCallback = Callable[[OperationStatus], Union[None, Awaitable[None]]]


class StatusTracker:
    """
    Submits signed bundles and polls their status.

    Args:
        service: Backend client
        poll_interval: Seconds between attempts
        max_attempts: Status requests issued before giving up
        partial_is_terminal: Stop polling on ``partial`` status
        event_bus: Optional bus receiving a ``StatusUpdateEvent`` per attempt
    """

    def __init__(
        self,
        service: IntentServiceClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL_MS / 1000,
        max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS,
        partial_is_terminal: bool = False,
        event_bus: Optional[EventBus] = None,
    ):
        self._service = service
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.partial_is_terminal = partial_is_terminal
        self._event_bus = event_bus

    async def submit_signed_operations(
        self,
        operation_set_id: str,
        signed_operations: List[SignedOperation],
        intent: Optional[IntentResponse] = None,
    ) -> None:
        """
        Submit the complete signed bundle.

        Raises:
            IntentExpiredError: If ``intent`` is given and has already expired.
        """
        if intent is not None and intent.is_expired():
            raise IntentExpiredError(operation_set_id, intent.unsigned_operations.expires_at)
        await self._service.submit_signed_operations(operation_set_id, signed_operations)

    async def poll_operation_status(
        self,
        operation_set_id: str,
        on_update: Optional[StatusCallback] = None,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> OperationStatus:
        """
        Poll until the operation set reaches a terminal status.

        Args:
            operation_set_id: Id returned by intent creation, used verbatim
            on_update: Sync or async callback invoked with every status received
            poll_interval: Override of the interval in seconds
            max_attempts: Override of the attempt budget
            cancel_token: Stops polling before the next attempt when fired

        Returns:
            The terminal status.

        Raises:
            OperationTimeoutError: After ``max_attempts`` non-terminal answers.
            RequestCancelledError: If ``cancel_token`` fires.
            ApiError: If a status request fails; polling is not retried.
        """
        interval = self.poll_interval if poll_interval is None else poll_interval
        attempts_allowed = self.max_attempts if max_attempts is None else max_attempts
        last_status: Optional[OperationStatus] = None

        for attempt in range(1, attempts_allowed + 1):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            status = await self._service.get_operation_status(operation_set_id)
            last_status = status
            logger.debug("Status of %s (attempt %d): %s", operation_set_id, attempt, status.status.value)

            if on_update is not None:
                result = on_update(status)
                if inspect.isawaitable(result):
                    await result
            if self._event_bus is not None:
                await self._event_bus.publish(StatusUpdateEvent(attempt=attempt, status=status))

            if status.is_terminal(self.partial_is_terminal):
                logger.info("Operation set %s finished as %s", operation_set_id, status.status.value)
                return status

            if attempt < attempts_allowed:
                if cancel_token is not None:
                    await cancel_token.sleep(interval)
                else:
                    await asyncio.sleep(interval)

        logger.warning("Gave up polling %s after %d attempts", operation_set_id, attempts_allowed)
        raise OperationTimeoutError(operation_set_id, attempts_allowed, last_status)
