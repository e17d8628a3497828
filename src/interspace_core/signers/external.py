"""External (linked) wallet signing with a local ``eth_account`` key."""

import logging
from typing import Optional, Union

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from eth_utils import is_0x_prefixed, is_hex, to_hex
from web3 import Web3

from ..engine.cancellation import CancelToken
from ..engine.exceptions import SigningError
from ..schemas.intents import UnsignedOperation
from .bases import SigningCapability

logger = logging.getLogger(__name__)


class ExternalWalletSigner(SigningCapability):
    """
    EIP-191 ``personal_sign`` over the raw call-data bytes.

    Args:
        account: A ``LocalAccount`` or a 0x-prefixed private key.
    """

    kind = "external"

    def __init__(self, account: Union[LocalAccount, str]):
        self.account = Account.from_key(account) if isinstance(account, str) else account
        self.address = Web3.to_checksum_address(self.account.address)

    async def sign(
        self,
        data: str,
        *,
        operation: Optional[UnsignedOperation] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> str:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        if not is_0x_prefixed(data) or not (data == "0x" or is_hex(data)):
            raise SigningError(f"Cannot sign data that is not 0x-prefixed hex: {data[:12]!r}")

        if operation is not None and operation.from_.lower() != self.address.lower():
            logger.warning(
                "Operation %s is from %s but external wallet is %s",
                operation.index, operation.from_, self.address,
            )

        signed = self.account.sign_message(encode_defunct(hexstr=data))
        return to_hex(signed.signature)
