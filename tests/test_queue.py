"""
Test suite for the signing request queue.
Tests: 1) exactly-once settlement 2) out-of-order approval 3) rejection and cancellation 4) notifications
"""
import asyncio

import pytest

from interspace_core.engine.cancellation import CancelToken
from interspace_core.engine.events import EventBus, RequestEnqueuedEvent, RequestSettledEvent
from interspace_core.engine.exceptions import RequestCancelledError, UserRejectedError
from interspace_core.engine.queue import SigningRequestQueue
from interspace_core.schemas.requests import SiweRequest, TransactionRequest
from tests.conftest import RECIPIENT, SENDER, wait_for_pending


def _tx(value: str = "1000") -> TransactionRequest:
    return TransactionRequest(to=RECIPIENT, from_=SENDER, value=value)


@pytest.mark.asyncio
async def test_approve_resolves_transaction_with_hash(queue):
    waiter = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx()))
    await wait_for_pending(queue, 1)

    request = queue.pending_requests[0]
    assert request.kind == "transaction"
    assert await queue.approve_request(request.id) is True

    tx_hash = await waiter
    assert tx_hash.startswith("0x") and len(tx_hash) == 66
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_approve_resolves_siwe_with_signature(queue):
    payload = SiweRequest(domain="app.interspace.test", address=SENDER, nonce="abc123")
    waiter = asyncio.create_task(queue.enqueue_and_wait("siwe", payload))
    await wait_for_pending(queue, 1)

    await queue.approve_request(queue.pending_requests[0].id)

    signature = await waiter
    assert signature.startswith("0x") and len(signature) == 132


@pytest.mark.asyncio
async def test_out_of_order_approval_resolves_each_caller():
    """Scenario C: enqueue A then B, approve B first, then A."""
    seen = []

    def resolver(request):
        seen.append(request.id)
        return f"result-{request.payload.value}"

    queue = SigningRequestQueue(resolver=resolver)
    waiter_a = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx("1")))
    waiter_b = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx("2")))
    await wait_for_pending(queue, 2)

    request_a, request_b = queue.pending_requests
    assert [request_a.payload.value, request_b.payload.value] == ["1", "2"]

    await queue.approve_request(request_b.id)
    assert await waiter_b == "result-2"
    assert not waiter_a.done()
    assert [r.id for r in queue.pending_requests] == [request_a.id]

    await queue.approve_request(request_a.id)
    assert await waiter_a == "result-1"
    assert seen == [request_b.id, request_a.id]
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_reject_raises_user_rejection_and_empties_queue(queue):
    """Scenario D: the caller sees a user-rejection error and no entry remains."""
    waiter = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx()))
    await wait_for_pending(queue, 1)

    request_id = queue.pending_requests[0].id
    assert await queue.reject_request(request_id) is True

    with pytest.raises(UserRejectedError, match="User rejected"):
        await waiter
    assert request_id not in queue
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_repeated_and_unknown_ids_are_noops(queue):
    waiter = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx()))
    await wait_for_pending(queue, 1)
    request_id = queue.pending_requests[0].id

    assert await queue.approve_request(request_id) is True
    assert await queue.approve_request(request_id) is False
    assert await queue.reject_request(request_id) is False
    assert await queue.approve_request("does-not-exist") is False

    assert (await waiter).startswith("0x")


@pytest.mark.asyncio
async def test_ids_are_unique_and_arrival_order_is_kept(queue):
    waiters = [
        asyncio.create_task(queue.enqueue_and_wait("transaction", _tx(str(i))))
        for i in range(3)
    ]
    await wait_for_pending(queue, 3)

    ids = [r.id for r in queue.pending_requests]
    assert len(set(ids)) == 3
    assert [r.payload.value for r in queue.pending_requests] == ["0", "1", "2"]

    for request_id in ids:
        await queue.approve_request(request_id)
    await asyncio.gather(*waiters)

    late = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx()))
    await wait_for_pending(queue, 1)
    assert queue.pending_requests[0].id not in ids
    await queue.reject_request(queue.pending_requests[0].id)
    with pytest.raises(UserRejectedError):
        await late


@pytest.mark.asyncio
async def test_entry_is_removed_only_after_settlement():
    observed = {}

    def resolver(request):
        observed["present_while_resolving"] = request.id in queue
        return "0xsig"

    queue = SigningRequestQueue(resolver=resolver)
    waiter = asyncio.create_task(queue.enqueue_and_wait("siwe", {"nonce": "n"}))
    await wait_for_pending(queue, 1)
    request = queue.pending_requests[0]

    await queue.approve_request(request.id)

    assert observed["present_while_resolving"] is True
    assert request.settled
    assert request.id not in queue
    assert await waiter == "0xsig"


@pytest.mark.asyncio
async def test_resolver_failure_rejects_caller():
    def resolver(request):
        raise RuntimeError("signing backend down")

    queue = SigningRequestQueue(resolver=resolver)
    waiter = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx()))
    await wait_for_pending(queue, 1)

    await queue.approve_request(queue.pending_requests[0].id)

    with pytest.raises(RuntimeError, match="signing backend down"):
        await waiter
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_async_resolver_is_awaited():
    async def resolver(request):
        await asyncio.sleep(0)
        return "0xasync"

    queue = SigningRequestQueue(resolver=resolver)
    waiter = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx()))
    await wait_for_pending(queue, 1)

    await queue.approve_request(queue.pending_requests[0].id)
    assert await waiter == "0xasync"


@pytest.mark.asyncio
async def test_cancel_token_abandons_pending_request(queue):
    token = CancelToken()
    waiter = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx(), cancel_token=token))
    await wait_for_pending(queue, 1)
    request_id = queue.pending_requests[0].id

    token.cancel("sheet closed")

    with pytest.raises(RequestCancelledError, match="sheet closed"):
        await waiter
    assert len(queue) == 0
    assert await queue.approve_request(request_id) is False


@pytest.mark.asyncio
async def test_cancelled_token_refuses_new_requests(queue):
    token = CancelToken()
    token.cancel()

    with pytest.raises(RequestCancelledError):
        await queue.enqueue_and_wait("transaction", _tx(), cancel_token=token)
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_approval_wins_over_later_cancel(queue):
    token = CancelToken()
    waiter = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx(), cancel_token=token))
    await wait_for_pending(queue, 1)

    await queue.approve_request(queue.pending_requests[0].id)
    token.cancel()

    assert (await waiter).startswith("0x")


@pytest.mark.asyncio
async def test_task_cancellation_removes_entry(queue):
    waiter = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx()))
    await wait_for_pending(queue, 1)

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_reset_cancels_everything(queue):
    waiters = [asyncio.create_task(queue.enqueue_and_wait("transaction", _tx())) for _ in range(2)]
    await wait_for_pending(queue, 2)

    assert await queue.reset() == 2

    for waiter in waiters:
        with pytest.raises(RequestCancelledError, match="reset"):
            await waiter
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_enqueue_and_settle_events_are_published():
    events = []

    async def record(event):
        events.append(event)

    bus = EventBus()
    bus.subscribe(RequestEnqueuedEvent, record)
    bus.subscribe(RequestSettledEvent, record)
    queue = SigningRequestQueue(event_bus=bus)

    approved = asyncio.create_task(queue.enqueue_and_wait("transaction", _tx()))
    rejected = asyncio.create_task(queue.enqueue_and_wait("siwe", {"nonce": "n"}))
    await wait_for_pending(queue, 2)
    first, second = queue.pending_requests

    await queue.approve_request(first.id)
    await queue.reject_request(second.id)
    await approved
    with pytest.raises(UserRejectedError):
        await rejected

    enqueued = [e for e in events if isinstance(e, RequestEnqueuedEvent)]
    settled = [e for e in events if isinstance(e, RequestSettledEvent)]
    assert [e.request_id for e in enqueued] == [first.id, second.id]
    assert [(e.request_id, e.outcome) for e in settled] == [(first.id, "approved"), (second.id, "rejected")]


@pytest.mark.asyncio
async def test_failing_enqueue_subscriber_leaves_no_orphaned_entry():
    async def broken_listener(event):
        raise RuntimeError("listener crashed")

    bus = EventBus()
    bus.subscribe(RequestEnqueuedEvent, broken_listener)
    queue = SigningRequestQueue(event_bus=bus)

    with pytest.raises(RuntimeError, match="listener crashed"):
        await queue.enqueue_and_wait("transaction", _tx())

    assert len(queue) == 0
    assert queue.pending_requests == []
