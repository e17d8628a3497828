"""
Balance Aggregator

Normalizes the backend's unified-balance payload into a per-token,
per-chain view and picks the gas-payment token.

Aggregation:
    1. Group token entries by symbol (one entry per chain or one entry per
       token with ``balancesPerChain``; both shapes are accepted)
    2. Rescale per-chain amounts to the first-seen precision of the symbol,
       then sum atomic amounts as integers and USD values as decimals
    3. Mark each chain's native balance as enough or not for one average transfer
    4. When no native balance is enough, rank the alternative gas tokens by
       the backend's suitability score and pick the highest

Failures propagate as typed errors; no partial aggregate is ever returned.
"""

import logging
from collections import OrderedDict
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Any, Dict, List, Optional

from ..clients.intent_service import IntentServiceClient
from ..constants import (
    DEFAULT_GAS_COST_USD,
    NATIVE_GAS_SCORE,
    NATIVE_GAS_THRESHOLD_WEI,
    STABLECOIN_ATOMIC_FACTOR,
    get_chain_name,
    get_native_symbol,
)
from ..engine.exceptions import ApiError
from ..schemas.balances import (
    BalanceCheck,
    ChainBalance,
    GasAnalysis,
    GasToken,
    GasTokenOption,
    GasTokenOptions,
    NativeGasBalance,
    SuggestedGasToken,
    UnifiedBalance,
    UnifiedToken,
)

logger = logging.getLogger(__name__)


def _decimal(value: Any) -> Decimal:
    if value in (None, ""):
        return Decimal(0)
    try:
        result = Decimal(str(value).replace(",", ""))
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal value: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Invalid decimal value: {value!r}")
    return result


def _rescale(amount: str, from_decimals: int, to_decimals: int) -> str:
    """Convert an atomic amount between precisions, truncating toward zero."""
    value = int(amount)
    if from_decimals == to_decimals:
        return str(value)
    if from_decimals < to_decimals:
        return str(value * 10 ** (to_decimals - from_decimals))
    return str(value // 10 ** (from_decimals - to_decimals))


def _first_chain(entry: Dict[str, Any], default: int = 1) -> int:
    chains = entry.get("availableChains") or []
    if chains:
        return int(chains[0])
    return int(entry.get("chainId") or default)


# ============================================================================
# Token aggregation
# ============================================================================

def _chain_balances_of(entry: Dict[str, Any]) -> List[ChainBalance]:
    if "balancesPerChain" in entry:
        raw_balances = entry.get("balancesPerChain") or []
    else:
        raw_balances = [entry]

    balances = []
    for raw in raw_balances:
        chain_id = int(raw["chainId"])
        balances.append(ChainBalance(
            chain_id=chain_id,
            chain_name=raw.get("chainName") or get_chain_name(chain_id),
            amount=str(raw.get("amount", "0")),
            token_address=raw.get("tokenAddress"),
            native_token=bool(raw.get("nativeToken", False)),
        ))
    return balances


def aggregate_tokens(entries: List[Dict[str, Any]]) -> List[UnifiedToken]:
    """
    Group token entries by symbol and sum their amounts.

    ``total_amount`` of every returned token equals the sum of its per-chain
    amounts regardless of the total the backend reported.
    """
    grouped: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    for entry in entries:
        symbol = entry["symbol"]
        group = grouped.get(symbol)
        if group is None:
            group = grouped[symbol] = {
                "name": entry.get("name", ""),
                "decimals": int(entry.get("decimals", 18)),
                "usd": Decimal(0),
                "balances": [],
            }
        group["name"] = group["name"] or entry.get("name", "")
        group["usd"] += _decimal(entry.get("totalUsdValue", entry.get("usdValue")))

        balances = _chain_balances_of(entry)
        entry_decimals = int(entry["decimals"]) if entry.get("decimals") is not None else group["decimals"]
        if entry_decimals != group["decimals"]:
            logger.debug(
                "Rescaling %s from %s to %s decimals on chains %s",
                symbol, entry_decimals, group["decimals"], [b.chain_id for b in balances],
            )
            balances = [
                b.model_copy(update={"amount": _rescale(b.amount, entry_decimals, group["decimals"])})
                for b in balances
            ]
        group["balances"].extend(balances)

    return [
        UnifiedToken(
            symbol=symbol,
            name=group["name"],
            decimals=group["decimals"],
            total_amount=str(sum(int(b.amount) for b in group["balances"])),
            total_usd_value=str(group["usd"]),
            balances_per_chain=group["balances"],
        )
        for symbol, group in grouped.items()
    ]


# ============================================================================
# Gas analysis
# ============================================================================

def _native_balances(
    gas_payload: Dict[str, Any],
    tokens: List[UnifiedToken],
    threshold_wei: int,
) -> List[NativeGasBalance]:
    raw_natives = gas_payload.get("nativeGasAvailable")
    if raw_natives is None:
        # derive from native chain balances when the backend omits the list
        raw_natives = [
            {"chainId": b.chain_id, "amount": b.amount, "symbol": token.symbol}
            for token in tokens
            for b in token.balances_per_chain
            if b.native_token
        ]

    natives = []
    for raw in raw_natives:
        chain_id = int(raw["chainId"])
        amount = str(raw.get("amount", "0"))
        natives.append(NativeGasBalance(
            chain_id=chain_id,
            chain_name=raw.get("chainName") or get_chain_name(chain_id),
            amount=amount,
            symbol=raw.get("symbol") or get_native_symbol(chain_id),
            is_enough_for_tx=int(amount) >= threshold_wei,
        ))
    return natives


def _alternative_tokens(gas_payload: Dict[str, Any]) -> Optional[List[GasToken]]:
    raw_tokens = gas_payload.get("availableGasTokens", gas_payload.get("alternativeGasTokens"))
    if raw_tokens is None:
        return None

    alternatives = []
    for raw in raw_tokens:
        if "available" in raw:
            available = bool(raw["available"])
        else:
            available = _decimal(raw.get("totalBalance")) > 0
        alternatives.append(GasToken(
            symbol=raw["symbol"],
            chain_id=_first_chain(raw),
            available=available,
            estimated_cost=str(_decimal(raw.get("estimatedCost") or DEFAULT_GAS_COST_USD)),
            score=int(raw.get("score") or 0),
        ))
    return alternatives


def select_gas_token(
    natives: List[NativeGasBalance],
    alternatives: List[GasToken],
    backend_suggestion: Optional[Dict[str, Any]] = None,
) -> SuggestedGasToken:
    """
    Pick the gas token to suggest.

    A native balance that covers one transfer scores ``NATIVE_GAS_SCORE`` and
    wins outright (the largest such balance is chosen). Otherwise the available
    alternatives, together with the backend's own suggestion, are ranked by
    score; ties keep backend order. The result is always the highest-scoring
    entry among the tokens considered.
    """
    backend_cost = str((backend_suggestion or {}).get("estimatedCost") or DEFAULT_GAS_COST_USD)

    enough = [n for n in natives if n.is_enough_for_tx]
    if enough:
        best_native = max(enough, key=lambda n: int(n.amount))
        return SuggestedGasToken(
            symbol=best_native.symbol,
            chain_id=best_native.chain_id,
            score=NATIVE_GAS_SCORE,
            estimated_cost=backend_cost,
        )

    candidates: List[GasToken] = []
    if backend_suggestion:
        candidates.append(GasToken(
            symbol=backend_suggestion["symbol"],
            chain_id=_first_chain(backend_suggestion),
            available=True,
            estimated_cost=backend_cost,
            score=int(backend_suggestion.get("score") or 0),
        ))
    candidates.extend(token for token in alternatives if token.available)

    if not candidates:
        chain_id = natives[0].chain_id if natives else 1
        symbol = natives[0].symbol if natives else get_native_symbol(chain_id)
        logger.warning("No gas token available; defaulting to %s on chain %s", symbol, chain_id)
        return SuggestedGasToken(symbol=symbol, chain_id=chain_id, score=0, estimated_cost=backend_cost)

    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.score > best.score:
            best = candidate
    return SuggestedGasToken(
        symbol=best.symbol,
        chain_id=best.chain_id,
        score=best.score,
        estimated_cost=best.estimated_cost,
    )


def build_gas_analysis(
    gas_payload: Dict[str, Any],
    tokens: List[UnifiedToken],
    threshold_wei: int = NATIVE_GAS_THRESHOLD_WEI,
) -> GasAnalysis:
    natives = _native_balances(gas_payload, tokens, threshold_wei)
    alternatives = _alternative_tokens(gas_payload)
    suggested = select_gas_token(natives, alternatives or [], gas_payload.get("suggestedGasToken"))
    return GasAnalysis(
        suggested_gas_token=suggested,
        native_gas_available=natives,
        alternative_gas_tokens=alternatives,
    )


def aggregate_balance(payload: Dict[str, Any], threshold_wei: int = NATIVE_GAS_THRESHOLD_WEI) -> UnifiedBalance:
    """
    Map a backend balance payload into a ``UnifiedBalance``.

    Raises:
        ApiError: If the payload is missing required fields.
    """
    unified = payload.get("unifiedBalance", payload)
    try:
        tokens = aggregate_tokens(unified.get("tokens") or [])
        gas_analysis = build_gas_analysis(payload.get("gasAnalysis") or {}, tokens, threshold_wei)
    except (KeyError, TypeError, ValueError) as e:
        raise ApiError("INVALID_RESPONSE", f"Malformed balance payload: {e}", 200) from e

    total_usd = sum((_decimal(token.total_usd_value) for token in tokens), Decimal(0))
    return UnifiedBalance(
        total_usd_value=str(total_usd),
        tokens=tokens,
        gas_analysis=gas_analysis,
    )


# ============================================================================
# Aggregator service
# ============================================================================

class BalanceAggregator:
    """Fetches and aggregates a profile's balance, and answers gas/balance questions."""

    def __init__(self, service: IntentServiceClient, native_gas_threshold_wei: int = NATIVE_GAS_THRESHOLD_WEI):
        self._service = service
        self._threshold_wei = native_gas_threshold_wei

    async def get_unified_balance(self, profile_id: str) -> UnifiedBalance:
        payload = await self._service.get_balance_payload(profile_id)
        balance = aggregate_balance(payload, self._threshold_wei)
        logger.debug(
            "Aggregated %d token(s) for profile %s, suggested gas %s",
            len(balance.tokens),
            profile_id,
            balance.gas_analysis.suggested_gas_token.symbol,
        )
        return balance

    async def get_gas_token_options(self, profile_id: str) -> GasTokenOptions:
        """List the suggested gas token followed by every available alternative."""
        balance = await self.get_unified_balance(profile_id)
        gas = balance.gas_analysis
        suggested = gas.suggested_gas_token

        options = [GasTokenOption(
            symbol=suggested.symbol,
            chain_id=suggested.chain_id,
            balance=self._token_amount(balance, suggested.symbol),
            estimated_cost=suggested.estimated_cost,
        )]
        for token in gas.alternative_gas_tokens or []:
            if not token.available:
                continue
            options.append(GasTokenOption(
                symbol=token.symbol,
                chain_id=token.chain_id,
                balance=self._token_amount(balance, token.symbol),
                estimated_cost=token.estimated_cost,
            ))

        return GasTokenOptions(suggested_token=suggested.symbol, available_tokens=options)

    async def check_sufficient_balance(
        self,
        profile_id: str,
        token_symbol: str,
        amount: str,
        include_gas: bool = True,
    ) -> BalanceCheck:
        """
        Compare an atomic ``amount`` of ``token_symbol`` with the unified balance.

        When gas is paid in the same token, its USD estimate is added after
        conversion at the stablecoin factor (truncated to whole atomic units).
        """
        balance = await self.get_unified_balance(profile_id)
        token = balance.token(token_symbol)
        if token is None:
            return BalanceCheck(sufficient=False, available="0", required=amount, deficit=amount)

        available = int(token.total_amount)
        required = int(amount)

        suggested = balance.gas_analysis.suggested_gas_token
        if include_gas and suggested.symbol == token_symbol:
            gas_usd = _decimal(suggested.estimated_cost)
            required += int((gas_usd * STABLECOIN_ATOMIC_FACTOR).to_integral_value(rounding=ROUND_DOWN))

        sufficient = available >= required
        return BalanceCheck(
            sufficient=sufficient,
            available=str(available),
            required=str(required),
            deficit=None if sufficient else str(required - available),
        )

    @staticmethod
    def _token_amount(balance: UnifiedBalance, symbol: str) -> str:
        token = balance.token(symbol)
        return token.total_amount if token else "0"
