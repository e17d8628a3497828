"""
Intent Builder

Turns a user action (send, swap, bridge or contract call of a specific token
and amount) into the ``TransactionIntent`` the backend plans against.

Amounts are entered in human units and converted to atomic units by
truncation: any remainder below one atomic unit is dropped, never rounded
up, so an intent never moves more than the user typed.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Any, Dict, Optional, Union

from web3 import Web3

from ..schemas.balances import ChainBalance, UnifiedToken
from ..schemas.intents import (
    GasTokenSelection,
    IntentDestination,
    IntentSource,
    IntentType,
    TransactionIntent,
)

logger = logging.getLogger(__name__)

AmountLike = Union[str, int, Decimal]


def amount_to_atomic(amount: AmountLike, decimals: int) -> str:
    """Convert a human-readable ``amount`` into a smallest-unit integer string.

    Args:
        amount: Human-readable amount (e.g. "1.5" for USDC). Floats are rejected.
        decimals: Token decimals (e.g. 6 for USDC).

    Returns:
        str: Atomic amount, truncated toward zero.

    Raises:
        ValueError: If inputs are invalid or the amount truncates to zero.
    """
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError("decimals must be a non-negative int")
    if isinstance(amount, float):
        raise ValueError("amount must be a str, int or Decimal, not float")

    try:
        dec_amount = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e

    if not dec_amount.is_finite() or dec_amount <= 0:
        raise ValueError(f"amount must be a positive number, got {amount!r}")

    scaled = (dec_amount * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN)
    if scaled == 0:
        raise ValueError(f"amount {amount!r} is below one atomic unit at decimals={decimals}")
    return str(int(scaled))


def normalize_recipient(recipient: str) -> str:
    """Checksum hex addresses; pass ENS-style names through unchanged."""
    recipient = recipient.strip()
    if Web3.is_address(recipient):
        return Web3.to_checksum_address(recipient)
    if "." in recipient and not recipient.startswith("0x"):
        return recipient
    raise ValueError(f"Invalid recipient: {recipient!r}")


class IntentBuilder:
    """
    Builds normalized ``TransactionIntent`` objects from user actions.

    The source chain is the token's first chain balance. This is a known
    simplification: a token held on several chains is always spent from the
    chain the backend listed first.

    Usage:
        ```python
        builder = IntentBuilder()
        intent = builder.build_transfer(usdc, "100", "alice.eth")
        response = await service.create_transaction_intent(profile_id, intent)
        ```
    """

    def build(
        self,
        intent_type: IntentType,
        token: UnifiedToken,
        amount: AmountLike,
        *,
        recipient: Optional[str] = None,
        to_token: Optional[str] = None,
        to_chain_id: Optional[int] = None,
        gas_token: Optional[GasTokenSelection] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> TransactionIntent:
        """
        Build an intent of any type.

        Raises:
            ValueError: On an invalid amount, a missing destination or a token
                        without chain balances.
        """
        source = self._source_of(token, amount)

        if intent_type in ("transfer", "app_interaction"):
            if not recipient:
                raise ValueError(f"{intent_type} intent requires a recipient address")
            destination = IntentDestination(address=normalize_recipient(recipient))
        else:
            if to_token is None and to_chain_id is None:
                raise ValueError(f"{intent_type} intent requires a destination token or chain")
            destination = IntentDestination(
                address=normalize_recipient(recipient) if recipient else None,
                token=to_token,
                chain_id=to_chain_id if to_chain_id is not None else source.chain_id,
            )

        intent = TransactionIntent(
            type=intent_type,
            from_=source,
            to=destination,
            gas_token=gas_token,
            metadata=metadata,
        )
        logger.debug(
            "Built %s intent: %s atomic %s on chain %s",
            intent_type, source.amount, token.symbol, source.chain_id,
        )
        return intent

    def build_transfer(
        self,
        token: UnifiedToken,
        amount: AmountLike,
        recipient: str,
        gas_token: Optional[GasTokenSelection] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> TransactionIntent:
        return self.build(
            "transfer", token, amount,
            recipient=recipient, gas_token=gas_token, metadata=metadata,
        )

    def build_swap(
        self,
        token: UnifiedToken,
        amount: AmountLike,
        to_token: str,
        to_chain_id: Optional[int] = None,
        gas_token: Optional[GasTokenSelection] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> TransactionIntent:
        """Swap ``amount`` of ``token`` for ``to_token``; the chain defaults to the source chain."""
        return self.build(
            "swap", token, amount,
            to_token=to_token, to_chain_id=to_chain_id, gas_token=gas_token, metadata=metadata,
        )

    def build_bridge(
        self,
        token: UnifiedToken,
        amount: AmountLike,
        to_chain_id: int,
        to_token: Optional[str] = None,
        recipient: Optional[str] = None,
        gas_token: Optional[GasTokenSelection] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> TransactionIntent:
        return self.build(
            "bridge", token, amount,
            recipient=recipient, to_token=to_token, to_chain_id=to_chain_id,
            gas_token=gas_token, metadata=metadata,
        )

    def build_app_interaction(
        self,
        token: UnifiedToken,
        amount: AmountLike,
        contract_address: str,
        metadata: Optional[Dict[str, Any]] = None,
        gas_token: Optional[GasTokenSelection] = None,
    ) -> TransactionIntent:
        return self.build(
            "app_interaction", token, amount,
            recipient=contract_address, gas_token=gas_token, metadata=metadata,
        )

    @staticmethod
    def _source_of(token: UnifiedToken, amount: AmountLike) -> IntentSource:
        if not token.balances_per_chain:
            raise ValueError(f"Token {token.symbol} has no chain balances to spend from")
        chain: ChainBalance = token.balances_per_chain[0]
        return IntentSource(
            token=None if chain.native_token else chain.token_address,
            chain_id=chain.chain_id,
            amount=amount_to_atomic(amount, token.decimals),
        )
