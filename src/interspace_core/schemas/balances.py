"""
Unified Balance Schema Models

Per-token, per-chain view of a profile's holdings plus the gas analysis used
to pick a gas-payment token. Atomic amounts are arbitrary-precision integers
carried as decimal strings; USD values are decimal strings.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from .bases import CanonicalModel


def _check_integer_string(value: str) -> str:
    if not value.isdigit():
        raise ValueError(f"expected a non-negative integer string, got {value!r}")
    return value


class ChainBalance(CanonicalModel):
    """Balance of one token on one chain.

    Attributes:
        chain_id: EVM network ID
        chain_name: Display name for the chain
        amount: Raw integer amount in the token's smallest unit
        token_address: Contract address, ``None`` for the native token
        native_token: True when this is the chain's native currency
    """
    chain_id: int
    chain_name: str = ""
    amount: str = "0"
    token_address: Optional[str] = None
    native_token: bool = False

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: str) -> str:
        return _check_integer_string(value)


class UnifiedToken(CanonicalModel):
    """A token aggregated across every chain it is held on.

    ``total_amount`` always equals the sum of ``balances_per_chain`` amounts.
    """
    symbol: str
    name: str = ""
    decimals: int = Field(..., ge=0)
    total_amount: str = "0"
    total_usd_value: str = "0"
    balances_per_chain: List[ChainBalance] = Field(default_factory=list)

    @field_validator("total_amount")
    @classmethod
    def validate_total(cls, value: str) -> str:
        return _check_integer_string(value)

    def chain_balance(self, chain_id: int) -> Optional[ChainBalance]:
        for balance in self.balances_per_chain:
            if balance.chain_id == chain_id:
                return balance
        return None


class SuggestedGasToken(CanonicalModel):
    """Gas token the aggregator recommends; ``score`` ranges 0-100, higher is better."""
    symbol: str
    chain_id: int
    score: int = Field(..., ge=0, le=100)
    estimated_cost: str = Field(..., description="Estimated USD cost of one transaction")


class NativeGasBalance(CanonicalModel):
    chain_id: int
    chain_name: str
    amount: str
    symbol: str
    is_enough_for_tx: bool


class GasToken(CanonicalModel):
    """Alternative gas-payment token considered by the gas analysis."""
    symbol: str
    chain_id: int
    available: bool
    estimated_cost: str
    score: int = Field(default=0, ge=0, le=100)


class GasAnalysis(CanonicalModel):
    suggested_gas_token: SuggestedGasToken
    native_gas_available: List[NativeGasBalance] = Field(default_factory=list)
    alternative_gas_tokens: Optional[List[GasToken]] = None


class UnifiedBalance(CanonicalModel):
    """Aggregate balance of a profile: total USD, token list and gas analysis."""
    total_usd_value: str
    tokens: List[UnifiedToken]
    gas_analysis: GasAnalysis

    def token(self, symbol: str) -> Optional[UnifiedToken]:
        """Return the aggregated token with ``symbol``, or ``None``."""
        for token in self.tokens:
            if token.symbol == symbol:
                return token
        return None

    def chain_usd_value(self, chain_id: int) -> str:
        """
        Estimate the USD value held on one chain.

        Each token's USD value is apportioned by the chain's share of the
        token's total amount. Returned with two decimals.
        """
        total = Decimal(0)
        for token in self.tokens:
            chain_balance = token.chain_balance(chain_id)
            token_total = int(token.total_amount)
            if chain_balance is None or token_total == 0:
                continue
            share = Decimal(int(chain_balance.amount)) / Decimal(token_total)
            total += share * Decimal(token.total_usd_value)
        return str(total.quantize(Decimal("0.01")))


class GasTokenOption(CanonicalModel):
    symbol: str
    chain_id: int
    balance: str
    estimated_cost: str


class GasTokenOptions(CanonicalModel):
    """Gas tokens a user may pay with, suggested token first."""
    suggested_token: str
    available_tokens: List[GasTokenOption]


class BalanceCheck(CanonicalModel):
    """Outcome of comparing a required atomic amount against the unified balance."""
    sufficient: bool
    available: str
    required: str
    deficit: Optional[str] = None
