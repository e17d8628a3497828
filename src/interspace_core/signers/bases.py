"""
Abstract Base Class for Signing Capabilities

The operation signer never inspects wallet objects at call time. Instead it
is handed one ``SigningCapability`` chosen at construction time:

    - SessionWalletSigner: key-share signing service of the session wallet
    - ExternalWalletSigner: locally held ``eth_account`` key of a linked wallet
    - QueueSigner: development double that routes through the approval queue

All variants expose the same coroutine ``sign(data) -> signature``.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Literal, Optional

from ..engine.cancellation import CancelToken
from ..schemas.intents import UnsignedOperation

SignerKind = Literal["session", "external", "test"]


class SigningCapability(ABC):
    """
    Abstract signing capability.

    Implementations must:
    1. Return a 0x-prefixed hex signature over ``data``
    2. Raise ``UserRejectedError`` when a user declines, never a generic error
    3. Raise ``SigningError`` for every other signing failure
    """

    kind: ClassVar[SignerKind]

    @abstractmethod
    async def sign(
        self,
        data: str,
        *,
        operation: Optional[UnsignedOperation] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> str:
        """
        Sign hex-encoded ``data``.

        Args:
            data: 0x-prefixed call data of the operation being signed
            operation: The unsigned operation ``data`` belongs to, when known
            cancel_token: Optional signal to abandon a pending approval

        Returns:
            str: 0x-prefixed signature.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r})"
