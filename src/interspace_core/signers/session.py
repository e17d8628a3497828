"""Session-wallet signing through the key-management module."""

import inspect
import logging
from typing import Awaitable, Callable, Optional

from ..engine.cancellation import CancelToken
from ..engine.exceptions import ConfigurationError, InterspaceError, SigningError
from ..schemas.intents import UnsignedOperation
from .bases import SigningCapability

logger = logging.getLogger(__name__)

KeyShareSignFunc = Callable[[str], Awaitable[str]]


class SessionWalletSigner(SigningCapability):
    """
    Signs with the session wallet's key share.

    The key-management module is supplied as a coroutine function taking hex
    data and returning a hex signature; raw key material never reaches this
    process.
    """

    kind = "session"

    def __init__(self, sign_func: KeyShareSignFunc):
        if not inspect.iscoroutinefunction(sign_func):
            raise ConfigurationError(
                f"Session signer requires a coroutine function, got {type(sign_func).__name__}"
            )
        self._sign_func = sign_func

    async def sign(
        self,
        data: str,
        *,
        operation: Optional[UnsignedOperation] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> str:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        try:
            signature = await self._sign_func(data)
        except InterspaceError:
            raise
        except Exception as e:
            raise SigningError(f"Session wallet signing failed: {e}") from e

        if not signature:
            raise SigningError("Session wallet returned an empty signature")
        return signature
