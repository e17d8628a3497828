"""
Signing capability selection.

The variant is chosen once, from settings, when the flow is constructed;
the operation signer never branches on wallet type afterwards.
"""

from typing import Optional, Union

from eth_account.signers.local import LocalAccount

from ..config import Settings
from ..engine.exceptions import ConfigurationError
from ..engine.queue import SigningRequestQueue
from .bases import SigningCapability
from .external import ExternalWalletSigner
from .queue_signer import QueueSigner
from .session import KeyShareSignFunc, SessionWalletSigner


def build_signer(
    settings: Settings,
    *,
    session_sign: Optional[KeyShareSignFunc] = None,
    external_account: Optional[Union[LocalAccount, str]] = None,
    queue: Optional[SigningRequestQueue] = None,
) -> SigningCapability:
    """
    Select the signing capability.

    Precedence:
        1. ``settings.use_test_signer`` -> ``QueueSigner`` over ``queue``
        2. ``session_sign`` -> ``SessionWalletSigner``
        3. ``external_account`` -> ``ExternalWalletSigner``

    Raises:
        ConfigurationError: If the selected variant is missing its collaborator,
                            or if nothing to sign with was supplied.
    """
    if settings.use_test_signer:
        if queue is None:
            raise ConfigurationError("Test signer enabled but no signing request queue was supplied")
        return QueueSigner(queue)

    if session_sign is not None:
        return SessionWalletSigner(session_sign)

    if external_account is not None:
        return ExternalWalletSigner(external_account)

    raise ConfigurationError("No signing capability configured: pass session_sign or external_account")
