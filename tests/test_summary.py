from interspace_core.pipeline.summary import format_address, format_transaction_summary
from interspace_core.schemas.intents import IntentResponse
from tests.conftest import RECIPIENT, make_intent_response, make_swap_response


def test_send_summary_keeps_ens_name():
    intent = IntentResponse.model_validate(make_intent_response())

    display = format_transaction_summary(intent)

    assert display.title == "Send"
    assert display.subtitle == "To alice.eth"
    assert display.amount == "100"
    assert display.token == "USDC"
    assert display.recipient == "alice.eth"
    assert display.estimated_time == "~1 min"
    assert display.gas_info == "Gas: ~$1.25 (paid in USDC)"


def test_swap_summary():
    """Scenario B: swap 0.1 ETH for USDC on Polygon, gas in ETH."""
    intent = IntentResponse.model_validate(make_swap_response())

    display = format_transaction_summary(intent)

    assert intent.summary.from_.token == "ETH"
    assert intent.summary.to.token == "USDC"
    assert intent.summary.to.chain_name == "Polygon"
    assert intent.gas_estimate.payment_token.symbol == "ETH"
    assert display.title == "Swap"
    assert display.subtitle == "ETH → USDC"
    assert display.recipient is None


def test_generic_summary_and_plural_minutes():
    payload = make_intent_response(estimated_time_ms=150_000)
    payload["summary"]["to"] = {"chainName": "Base"}
    intent = IntentResponse.model_validate(payload)

    display = format_transaction_summary(intent)

    assert display.title == "Transaction"
    assert display.subtitle == ""
    assert display.estimated_time == "~3 mins"


def test_hex_addresses_are_shortened():
    assert format_address(RECIPIENT) == "0x2222...2222"
    assert format_address("vitalik.eth") == "vitalik.eth"
