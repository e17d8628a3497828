"""
Operation Signer

Walks an unsigned operation bundle in ascending ``index`` order and collects
one signature per operation from the active signing capability.

Each signature is awaited before the next is requested: operations on the
same chain may be nonce-dependent, and a later operation must not be signed
before the user has decided on an earlier one. A rejection of any operation
abandons the whole bundle; a partially signed bundle is never returned.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from ..engine.cancellation import CancelToken
from ..engine.exceptions import IntentExpiredError
from ..schemas.intents import IntentResponse, SignedOperation
from ..signers.bases import SigningCapability

logger = logging.getLogger(__name__)


class OperationSigner:
    """Sequential signer over ``IntentResponse.unsigned_operations``."""

    def __init__(self, signer: SigningCapability):
        self.signer = signer

    async def sign_operations(
        self,
        intent: IntentResponse,
        cancel_token: Optional[CancelToken] = None,
    ) -> List[SignedOperation]:
        """
        Sign every operation of ``intent``.

        Returns:
            Signed operations in ascending index order, one per input operation.

        Raises:
            IntentExpiredError: If the bundle expires before an operation is signed.
            UserRejectedError: If any signature is rejected.
            RequestCancelledError: If ``cancel_token`` fires.
            SigningError: If the capability fails otherwise.
        """
        operations = intent.unsigned_operations.ordered()
        expires_at = intent.unsigned_operations.expires_at
        signed: List[SignedOperation] = []

        for operation in operations:
            if intent.is_expired(datetime.now(timezone.utc)):
                raise IntentExpiredError(intent.operation_set_id, expires_at)
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            try:
                signature = await self.signer.sign(
                    operation.data,
                    operation=operation,
                    cancel_token=cancel_token,
                )
            except Exception:
                logger.warning(
                    "Abandoning bundle %s at operation %d of %d",
                    intent.operation_set_id, operation.index, len(operations),
                )
                raise

            signed.append(SignedOperation(index=operation.index, signature=signature))
            logger.debug("Signed operation %d of %s", operation.index, intent.operation_set_id)

        logger.info(
            "Signed %d operation(s) for %s with %s signer",
            len(signed), intent.operation_set_id, self.signer.kind,
        )
        return signed
