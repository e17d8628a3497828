"""
Chain Metadata and Pipeline Constants

Display names and native gas symbols for the chains the wallet shows,
plus the fixed defaults used by the balance aggregator and status tracker.
"""

from typing import Dict

from pydantic import BaseModel, Field


class ChainInfo(BaseModel):
    """Display metadata for one EVM chain."""
    chain_id: int
    name: str
    native_symbol: str = Field(default="ETH", description="Symbol of the native gas currency")


_CHAINS_DATA: Dict[int, Dict[str, str]] = {
    1: {"name": "Ethereum", "native_symbol": "ETH"},
    10: {"name": "Optimism", "native_symbol": "ETH"},
    56: {"name": "BNB Chain", "native_symbol": "BNB"},
    137: {"name": "Polygon", "native_symbol": "MATIC"},
    146: {"name": "Sonic", "native_symbol": "S"},
    8453: {"name": "Base", "native_symbol": "ETH"},
    42161: {"name": "Arbitrum", "native_symbol": "ETH"},
    84532: {"name": "Base Sepolia", "native_symbol": "ETH"},
}

CHAINS: Dict[int, ChainInfo] = {
    chain_id: ChainInfo(chain_id=chain_id, **data) for chain_id, data in _CHAINS_DATA.items()
}

DEFAULT_API_BASE_URL = "http://localhost:3000/api/v1"

# 21000 gas at 20 gwei: one plain transfer
NATIVE_GAS_THRESHOLD_WEI = 21_000 * 20_000_000_000

# Score given to a native gas balance that covers one transfer
NATIVE_GAS_SCORE = 100

DEFAULT_GAS_COST_USD = "0.50"

# USD -> atomic units for gas paid in a 6-decimal stablecoin
STABLECOIN_ATOMIC_FACTOR = 10 ** 6

DEFAULT_POLL_INTERVAL_MS = 2000
DEFAULT_POLL_MAX_ATTEMPTS = 60


def get_chain_name(chain_id: int) -> str:
    """Return the display name for ``chain_id``, or ``"Chain <id>"`` when unknown."""
    info = CHAINS.get(chain_id)
    return info.name if info else f"Chain {chain_id}"


def get_native_symbol(chain_id: int) -> str:
    info = CHAINS.get(chain_id)
    return info.native_symbol if info else "ETH"
