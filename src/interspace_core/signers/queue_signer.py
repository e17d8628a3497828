"""Development signer that waits for approval in the signing request queue."""

import logging
from typing import Optional

from ..constants import get_chain_name
from ..engine.cancellation import CancelToken
from ..engine.queue import SigningRequestQueue
from ..schemas.intents import UnsignedOperation
from ..schemas.requests import DEFAULT_GAS_LIMIT, DEFAULT_GAS_PRICE, TransactionRequest
from .bases import SigningCapability

logger = logging.getLogger(__name__)


class QueueSigner(SigningCapability):
    """
    Enqueues every operation as a ``transaction`` request and returns the
    approval result as the signature.

    Approval is given by whoever consumes the queue: the test wallet sheet
    in the app, or the harness in automated tests.
    """

    kind = "test"

    def __init__(self, queue: SigningRequestQueue, address: Optional[str] = None):
        self.queue = queue
        self.address = address

    async def sign(
        self,
        data: str,
        *,
        operation: Optional[UnsignedOperation] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> str:
        if operation is not None:
            request = TransactionRequest(
                to=operation.to,
                from_=operation.from_,
                value=operation.value,
                data=data,
                gas_limit=operation.gas_limit or DEFAULT_GAS_LIMIT,
                gas_price=operation.gas_price or operation.max_fee_per_gas or DEFAULT_GAS_PRICE,
                network=get_chain_name(operation.chain_id),
                chain_id=operation.chain_id,
                operation_index=operation.index,
            )
        else:
            request = TransactionRequest(to="", from_=self.address or "", data=data)

        logger.debug("Waiting for approval of operation %s", request.operation_index)
        return await self.queue.enqueue_and_wait("transaction", request, cancel_token=cancel_token)
