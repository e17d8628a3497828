"""
Transaction Intent Schema Models

This module defines the models exchanged with the backend abstraction service
while turning one user action into signed on-chain operations.

The intent flow consists of:
1. Client submits a ``TransactionIntent`` (POST /profiles/{id}/intent)
2. Backend answers with an ``IntentResponse`` holding ``UnsignedOperations``
3. Client signs every operation and posts a ``SubmitOperationsRequest``
   (POST /operations/{operationSetId}/submit)

Intents are frozen once built and responses are frozen once received.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from eth_utils import is_0x_prefixed, is_hex
from pydantic import ConfigDict, Field, field_validator, model_validator

from .bases import CanonicalModel

IntentType = Literal["transfer", "swap", "bridge", "app_interaction"]
OperationType = Literal["legacy", "eip1559", "eip2930"]


# ============================================================================
# Step 1: Client's Transaction Intent
# ============================================================================

class IntentSource(CanonicalModel):
    """Token, chain and atomic amount the user is spending from.

    Attributes:
        token: Token contract address, omitted for the native token
        chain_id: Source chain ID
        amount: Atomic integer amount as a decimal string
    """
    model_config = ConfigDict(frozen=True)

    token: Optional[str] = None
    chain_id: int
    amount: str


class IntentDestination(CanonicalModel):
    """Recipient for transfers, or target token/chain for swaps and bridges."""
    model_config = ConfigDict(frozen=True)

    address: Optional[str] = None
    token: Optional[str] = None
    chain_id: Optional[int] = None


class GasTokenSelection(CanonicalModel):
    """Explicit gas-token override; ``token`` omitted means the chain's native token."""
    model_config = ConfigDict(frozen=True)

    token: Optional[str] = None
    chain_id: int


class TransactionIntent(CanonicalModel):
    """Declarative request the backend turns into concrete operations.

    Created fresh per user action and never mutated after submission.
    """
    model_config = ConfigDict(frozen=True)

    type: IntentType
    from_: IntentSource = Field(..., alias="from")
    to: IntentDestination = Field(default_factory=IntentDestination)
    gas_token: Optional[GasTokenSelection] = None
    metadata: Optional[Dict[str, Any]] = None


# ============================================================================
# Step 2: Backend's Intent Response
# ============================================================================

class UnsignedOperation(CanonicalModel):
    """One chain-specific operation awaiting a signature.

    ``index`` is the ordering key: operations are signed index-ascending
    because later operations on the same chain may depend on the nonce or
    state established by earlier ones.
    """
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)
    chain_id: int
    from_: str = Field(..., alias="from")
    to: str
    value: str = "0"
    data: str = "0x"
    type: OperationType = "eip1559"
    gas_limit: Optional[str] = None
    nonce: Optional[int] = None
    max_fee_per_gas: Optional[str] = None
    max_priority_fee_per_gas: Optional[str] = None
    gas_price: Optional[str] = None

    @field_validator("data")
    @classmethod
    def validate_data(cls, value: str) -> str:
        if not is_0x_prefixed(value) or not (value == "0x" or is_hex(value)):
            raise ValueError(f"call data must be 0x-prefixed hex, got {value[:12]!r}")
        return value


class UnsignedOperations(CanonicalModel):
    """Ordered operation bundle plus the instant after which it must not be signed."""
    model_config = ConfigDict(frozen=True)

    operations: List[UnsignedOperation]
    expires_at: datetime

    @model_validator(mode="after")
    def validate_unique_indices(self) -> "UnsignedOperations":
        seen = set()
        for op in self.operations:
            if op.index in seen:
                raise ValueError(f"duplicate operation index {op.index}")
            seen.add(op.index)
        return self

    def ordered(self) -> List[UnsignedOperation]:
        """Return operations sorted by ascending ``index``."""
        return sorted(self.operations, key=lambda op: op.index)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at


class SummarySide(CanonicalModel):
    model_config = ConfigDict(frozen=True)

    token: Optional[str] = None
    amount: Optional[str] = None
    chain_name: Optional[str] = None
    token_address: Optional[str] = None
    address: Optional[str] = None


class RouteStep(CanonicalModel):
    model_config = ConfigDict(frozen=True)

    action: Literal["transfer", "bridge", "swap", "approve"]
    from_chain: str
    to_chain: Optional[str] = None
    token: str
    amount: str
    protocol: Optional[str] = None


class TransactionSummary(CanonicalModel):
    """Human-readable description of what the operation set will do."""
    model_config = ConfigDict(frozen=True)

    from_: SummarySide = Field(..., alias="from")
    to: SummarySide
    gas_token: str
    route: Optional[List[RouteStep]] = None


class GasBreakdown(CanonicalModel):
    model_config = ConfigDict(frozen=True)

    chain_id: int
    chain_name: str
    gas_limit: str
    gas_price: str
    total_cost: str
    total_cost_usd: str


class GasPaymentToken(CanonicalModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    amount: str
    chain_id: int


class GasEstimate(CanonicalModel):
    model_config = ConfigDict(frozen=True)

    total_usd: str
    breakdown: List[GasBreakdown] = Field(default_factory=list)
    payment_token: GasPaymentToken


class IntentResponse(CanonicalModel):
    """Backend answer to an intent.

    ``operation_set_id`` is used verbatim for submission and every status poll.
    """
    model_config = ConfigDict(frozen=True)

    intent_id: str
    operation_set_id: str
    estimated_time_ms: int = Field(default=0, ge=0)
    unsigned_operations: UnsignedOperations
    summary: TransactionSummary
    gas_estimate: GasEstimate

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.unsigned_operations.is_expired(now)


# ============================================================================
# Step 3: Client's Signed Operations
# ============================================================================

class SignedOperation(CanonicalModel):
    """Signature for the unsigned operation with the same ``index``."""
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)
    signature: str
    signed_data: Optional[str] = Field(None, description="Signed EIP-712 typed-data payload")


class SubmitOperationsRequest(CanonicalModel):
    signed_operations: List[SignedOperation]
