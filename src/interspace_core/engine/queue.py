"""
Signing Request Queue

FIFO queue of pending approval requests (transaction or SIWE message), each
backed by an ``asyncio.Future`` owned by the caller that is waiting on it.

Lifecycle of one request::

    created ──approve_request──▶ approved   (future resolved with a result)
       │
       ├─────reject_request───▶ rejected   (future rejected with UserRejectedError)
       │
       └─────cancel / reset───▶ cancelled  (future rejected with RequestCancelledError)

Every terminal transition happens exactly once. The entry is removed from
the queue only after its future has been settled, so a reader of
``pending_requests`` never sees an entry whose future is already done
unless a settlement is in progress on the same tick.

All mutation happens on the event loop thread; callers on other threads
must hop onto the loop (``loop.call_soon_threadsafe``) before touching the queue.
"""

import asyncio
import inspect
import itertools
import logging
import secrets
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..schemas.requests import RequestKind
from .cancellation import CancelToken
from .events import EventBus, RequestEnqueuedEvent, RequestSettledEvent
from .exceptions import RequestCancelledError, UserRejectedError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PendingRequest:
    """
    One queued signing request.

    Attributes:
        id: Unique id, never reused within the queue's lifetime
        kind: ``"transaction"`` or ``"siwe"``
        payload: Opaque data shown to the approver
        future: Continuation of the caller's in-flight ``enqueue_and_wait``
    """
    id: str
    kind: RequestKind
    payload: Any
    future: asyncio.Future = field(repr=False)
    settling: bool = field(default=False, repr=False)

    @property
    def settled(self) -> bool:
        return self.future.done()

    def resolve(self, result: Any) -> bool:
        if self.future.done():
            return False
        self.future.set_result(result)
        return True

    def reject(self, error: BaseException) -> bool:
        if self.future.done():
            return False
        self.future.set_exception(error)
        return True


ApprovalResolver = Callable[[PendingRequest], Union[Any, Awaitable[Any]]]


def synthesize_approval(request: PendingRequest) -> str:
    """
    Default approval result used by the development signer.

    Transactions resolve with a confirmed transaction hash, SIWE requests
    with a 65-byte signature. Neither is cryptographically meaningful.
    """
    if request.kind == "transaction":
        return "0x" + secrets.token_hex(32)
    return "0x" + secrets.token_hex(65)


class SigningRequestQueue:
    """
    Producer/consumer queue pairing each signing request with one resolution.

    Producers call ``enqueue_and_wait``; the approver (UI or harness) calls
    ``approve_request`` / ``reject_request``. Approval may happen in any
    order while ``pending_requests`` keeps arrival order for display.

    Usage:
        ```python
        queue = SigningRequestQueue()
        waiter = asyncio.create_task(queue.enqueue_and_wait("siwe", payload))
        await asyncio.sleep(0)
        await queue.approve_request(queue.pending_requests[0].id)
        signature = await waiter
        ```
    """

    def __init__(
        self,
        resolver: Optional[ApprovalResolver] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Args:
            resolver: Produces the approval result for a request; defaults to
                      ``synthesize_approval``. May be sync or async.
            event_bus: Optional bus receiving enqueue/settle notifications.
        """
        self._resolver = resolver or synthesize_approval
        self._event_bus = event_bus
        self._requests: "OrderedDict[str, PendingRequest]" = OrderedDict()
        self._ids = itertools.count(1)

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def pending_requests(self) -> List[PendingRequest]:
        """Snapshot of pending requests in arrival order."""
        return list(self._requests.values())

    @property
    def pending_count(self) -> int:
        return len(self._requests)

    def get(self, request_id: str) -> Optional[PendingRequest]:
        return self._requests.get(request_id)

    def __len__(self) -> int:
        return len(self._requests)

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._requests

    # =========================================================================
    # Producer side
    # =========================================================================

    async def enqueue_and_wait(
        self,
        kind: RequestKind,
        payload: Any,
        cancel_token: Optional[CancelToken] = None,
    ) -> Any:
        """
        Append a request and wait until it is approved, rejected or cancelled.

        The queue never times requests out; wrap this call (or pass a
        ``cancel_token``) when a deadline is needed.

        Returns:
            The approval result (transaction hash or signature).

        Raises:
            UserRejectedError: If the approver rejects the request.
            RequestCancelledError: If ``cancel_token`` fires or the queue is reset.
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        request = PendingRequest(
            id=str(next(self._ids)),
            kind=kind,
            payload=payload,
            future=asyncio.get_running_loop().create_future(),
        )
        self._requests[request.id] = request
        logger.debug("Enqueued %s request %s", kind, request.id)

        try:
            await self._publish(RequestEnqueuedEvent(request_id=request.id, kind=kind, payload=payload))
        except BaseException:
            self._abandon(request)
            raise

        try:
            if cancel_token is None:
                return await asyncio.shield(request.future)
            return await self._wait_or_cancel(request, cancel_token)
        except asyncio.CancelledError:
            self._abandon(request)
            raise

    async def _wait_or_cancel(self, request: PendingRequest, cancel_token: CancelToken) -> Any:
        cancel_waiter = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait(
                {request.future, cancel_waiter},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancel_waiter.cancel()

        if not request.future.done():
            await self._settle(
                request,
                "cancelled",
                error=RequestCancelledError(cancel_token.reason or "Cancelled by caller"),
            )
        return request.future.result()

    def _abandon(self, request: PendingRequest) -> None:
        """Drop the entry of a waiter that stopped waiting without a settlement."""
        if not request.future.done():
            request.future.cancel()
        if self._requests.get(request.id) is request:
            del self._requests[request.id]
            logger.info("Abandoned %s request %s", request.kind, request.id)

    # =========================================================================
    # Consumer side
    # =========================================================================

    async def approve_request(self, request_id: str) -> bool:
        """
        Approve a pending request and resolve its caller with the result.

        Unknown or already-settling ids are a no-op, which makes repeated
        taps on a stale approval button harmless.

        Returns:
            True if this call settled the request.
        """
        request = self._requests.get(request_id)
        if request is None or request.settling:
            logger.debug("Ignoring approval for unknown request %s", request_id)
            return False

        request.settling = True
        try:
            result = self._resolver(request)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.warning("Approval of %s request %s failed: %s", request.kind, request_id, e)
            return await self._settle(request, "rejected", error=e)

        return await self._settle(request, "approved", result=result)

    async def reject_request(self, request_id: str, reason: str = "User rejected request") -> bool:
        """
        Reject a pending request; its caller receives ``UserRejectedError``.

        Returns:
            True if this call settled the request.
        """
        request = self._requests.get(request_id)
        if request is None or request.settling:
            logger.debug("Ignoring rejection for unknown request %s", request_id)
            return False

        request.settling = True
        return await self._settle(request, "rejected", error=UserRejectedError(request_id, reason))

    async def reset(self) -> int:
        """
        Cancel every pending request (logout). Ids keep increasing afterwards.

        Returns:
            Number of requests cancelled.
        """
        cancelled = 0
        for request in list(self._requests.values()):
            request.settling = True
            if await self._settle(request, "cancelled", error=RequestCancelledError("Signing session reset")):
                cancelled += 1
        return cancelled

    # =========================================================================
    # Internals
    # =========================================================================

    async def _settle(
        self,
        request: PendingRequest,
        outcome: str,
        result: Any = None,
        error: Optional[BaseException] = None,
    ) -> bool:
        settled = request.reject(error) if error is not None else request.resolve(result)

        # removal strictly after settlement
        if self._requests.get(request.id) is request:
            del self._requests[request.id]

        if settled:
            logger.info("Signing request %s %s", request.id, outcome)
            await self._publish(RequestSettledEvent(request_id=request.id, kind=request.kind, outcome=outcome))
        return settled

    async def _publish(self, event) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(event)
