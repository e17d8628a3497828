"""
Signing Request Payload Models

Payloads carried by entries of the signing request queue. The approval UI
(or an automated harness) renders these before approving or rejecting.
"""

import time
from typing import Literal, Optional

from pydantic import Field

from .bases import CanonicalModel

RequestKind = Literal["transaction", "siwe"]

DEFAULT_TEST_NETWORK = "Base Sepolia"
DEFAULT_TEST_CHAIN_ID = 84532
DEFAULT_GAS_LIMIT = "21000"
DEFAULT_GAS_PRICE = "20000000000"  # 20 gwei


def _now_ms() -> int:
    return int(time.time() * 1000)


class TransactionRequest(CanonicalModel):
    """
    A transaction awaiting approval.

    When raised by the operation signer, ``operation_index`` and ``chain_id``
    identify the unsigned operation being approved.
    """
    to: str
    from_: str = Field(..., alias="from")
    value: str = "0"
    data: Optional[str] = None
    gas_limit: str = DEFAULT_GAS_LIMIT
    gas_price: str = DEFAULT_GAS_PRICE
    network: str = DEFAULT_TEST_NETWORK
    chain_id: Optional[int] = None
    operation_index: Optional[int] = None
    status: Literal["pending", "confirmed", "failed"] = "pending"
    timestamp: int = Field(default_factory=_now_ms)
    hash: Optional[str] = None


class SiweRequest(CanonicalModel):
    """A Sign-In With Ethereum message awaiting approval."""
    domain: str
    address: str
    statement: Optional[str] = None
    nonce: str
    chain_id: int = DEFAULT_TEST_CHAIN_ID
    timestamp: int = Field(default_factory=_now_ms)

    def to_message(self) -> str:
        """Render the EIP-4361 plain-text message that gets signed."""
        lines = [
            f"{self.domain} wants you to sign in with your Ethereum account:",
            self.address,
            "",
        ]
        if self.statement:
            lines.extend([self.statement, ""])
        lines.extend([
            f"URI: https://{self.domain}",
            "Version: 1",
            f"Chain ID: {self.chain_id}",
            f"Nonce: {self.nonce}",
            f"Issued At: {time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(self.timestamp / 1000))}",
        ])
        return "\n".join(lines)
