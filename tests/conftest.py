"""
Shared fixtures and canned backend payloads.

Payloads mirror what the backend abstraction service returns inside its
``{success, data}`` envelope; helpers build fresh copies so tests can tweak
fields without leaking into each other.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

from interspace_core.clients import InterspaceHttpClient, IntentServiceClient
from interspace_core.config import Settings
from interspace_core.engine.queue import SigningRequestQueue

BASE_URL = "https://api.interspace.test/api/v1"
PROFILE_ID = "profile-1"
OPERATION_SET_ID = "opset-1"

SENDER = "0x" + "11" * 20
RECIPIENT = "0x" + "22" * 20
USDC_ETHEREUM = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
USDC_POLYGON = "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359"

# transfer(RECIPIENT, 100 USDC)
ERC20_TRANSFER_DATA = (
    "0xa9059cbb"
    + ("22" * 20).rjust(64, "0")
    + format(100_000_000, "064x")
)


def envelope(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}


def make_operation(index: int = 0, chain_id: int = 1, **overrides) -> Dict[str, Any]:
    operation = {
        "index": index,
        "chainId": chain_id,
        "from": SENDER,
        "to": USDC_ETHEREUM,
        "value": "0",
        "data": ERC20_TRANSFER_DATA,
        "type": "eip1559",
        "gasLimit": "65000",
        "maxFeePerGas": "30000000000",
        "maxPriorityFeePerGas": "1000000000",
    }
    operation.update(overrides)
    return operation


def make_intent_response(
    operation_set_id: str = OPERATION_SET_ID,
    operations: Optional[List[Dict[str, Any]]] = None,
    expires_at: Optional[datetime] = None,
    summary: Optional[Dict[str, Any]] = None,
    payment_symbol: str = "USDC",
    estimated_time_ms: int = 60_000,
) -> Dict[str, Any]:
    """Scenario A by default: send 100 USDC to alice.eth on Ethereum."""
    expires_at = expires_at or datetime.now(timezone.utc) + timedelta(minutes=5)
    return {
        "intentId": "intent-1",
        "operationSetId": operation_set_id,
        "estimatedTimeMs": estimated_time_ms,
        "unsignedOperations": {
            "operations": operations if operations is not None else [make_operation()],
            "expiresAt": expires_at.isoformat(),
        },
        "summary": summary or {
            "from": {"token": "USDC", "amount": "100", "chainName": "Ethereum", "tokenAddress": USDC_ETHEREUM},
            "to": {"address": "alice.eth", "chainName": "Ethereum"},
            "gasToken": payment_symbol,
        },
        "gasEstimate": {
            "totalUsd": "1.25",
            "breakdown": [{
                "chainId": 1,
                "chainName": "Ethereum",
                "gasLimit": "65000",
                "gasPrice": "20000000000",
                "totalCost": "1300000000000000",
                "totalCostUsd": "1.25",
            }],
            "paymentToken": {"symbol": payment_symbol, "amount": "1250000", "chainId": 1},
        },
    }


def make_swap_response() -> Dict[str, Any]:
    """Scenario B: swap 0.1 ETH for USDC on Polygon."""
    return make_intent_response(
        operations=[make_operation(chain_id=137, to=USDC_POLYGON, value="100000000000000000", data="0x")],
        summary={
            "from": {"token": "ETH", "amount": "0.1", "chainName": "Polygon"},
            "to": {"token": "USDC", "amount": "250.12", "chainName": "Polygon", "tokenAddress": USDC_POLYGON},
            "gasToken": "ETH",
        },
        payment_symbol="ETH",
    )


def make_status(status: str, operation_set_id: str = OPERATION_SET_ID, **extra) -> Dict[str, Any]:
    payload = {"operationSetId": operation_set_id, "status": status, "transactions": []}
    payload.update(extra)
    return payload


def make_balance_payload() -> Dict[str, Any]:
    """USDC on Ethereum and Polygon, a little ETH, no native gas to speak of."""
    return {
        "unifiedBalance": {
            "totalUsdValue": "150.00",
            "tokens": [
                {
                    "symbol": "USDC",
                    "name": "USD Coin",
                    "decimals": 6,
                    "totalAmount": "100000000",
                    "totalUsdValue": "100.00",
                    "balancesPerChain": [
                        {"chainId": 1, "amount": "60000000", "tokenAddress": USDC_ETHEREUM},
                        {"chainId": 137, "amount": "40000000", "tokenAddress": USDC_POLYGON},
                    ],
                },
                {
                    "symbol": "ETH",
                    "name": "Ether",
                    "decimals": 18,
                    "totalAmount": "20000000000000000",
                    "totalUsdValue": "50.00",
                    "balancesPerChain": [
                        {"chainId": 1, "amount": "20000000000000000", "nativeToken": True},
                    ],
                },
            ],
        },
        "gasAnalysis": {
            "suggestedGasToken": {"symbol": "USDC", "availableChains": [137], "score": 70, "estimatedCost": "0.40"},
            "nativeGasAvailable": [{"chainId": 1, "amount": "100000000000000", "symbol": "ETH"}],
            "availableGasTokens": [
                {"symbol": "USDC", "totalBalance": "100", "availableChains": [137], "score": 70},
                {"symbol": "DAI", "totalBalance": "0", "availableChains": [1], "score": 95},
                {"symbol": "USDT", "totalBalance": "25", "availableChains": [42161], "score": 85, "estimatedCost": "0.30"},
            ],
        },
    }


async def wait_for_pending(queue: SigningRequestQueue, count: int, rounds: int = 50) -> None:
    """Yield to the loop until ``queue`` holds ``count`` requests."""
    for _ in range(rounds):
        if len(queue) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {count} pending request(s), found {len(queue)}")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_base_url=BASE_URL,
        access_token="test-token",
        poll_interval_ms=0,
        poll_max_attempts=3,
    )


@pytest_asyncio.fixture
async def http():
    client = InterspaceHttpClient(base_url=BASE_URL, access_token="test-token")
    yield client
    await client.aclose()


@pytest.fixture
def service(http) -> IntentServiceClient:
    return IntentServiceClient(http)


@pytest.fixture
def queue() -> SigningRequestQueue:
    return SigningRequestQueue()
