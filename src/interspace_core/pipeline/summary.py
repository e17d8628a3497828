"""Display formatting of an intent response for the confirmation sheet."""

import math
from typing import Optional

from pydantic import BaseModel

from ..schemas.intents import IntentResponse


class DisplaySummary(BaseModel):
    title: str
    subtitle: str
    amount: Optional[str] = None
    token: Optional[str] = None
    recipient: Optional[str] = None
    estimated_time: str
    gas_info: str


def format_address(address: str) -> str:
    """Shorten hex addresses to ``0x1234...abcd``; ENS names are shown whole."""
    if address.endswith(".eth"):
        return address
    return f"{address[:6]}...{address[-4:]}"


def format_estimated_time(estimated_time_ms: int) -> str:
    minutes = math.ceil(estimated_time_ms / 60000)
    return "~1 min" if minutes == 1 else f"~{minutes} mins"


def format_transaction_summary(intent: IntentResponse) -> DisplaySummary:
    """
    Build the confirmation-sheet text for ``intent``.

    A destination address makes it a "Send", a destination token a "Swap";
    anything else is shown as a generic "Transaction".
    """
    summary = intent.summary
    gas = intent.gas_estimate

    title, subtitle = "Transaction", ""
    if summary.to.address:
        title = "Send"
        subtitle = f"To {format_address(summary.to.address)}"
    elif summary.to.token:
        title = "Swap"
        subtitle = f"{summary.from_.token} → {summary.to.token}"

    return DisplaySummary(
        title=title,
        subtitle=subtitle,
        amount=summary.from_.amount,
        token=summary.from_.token,
        recipient=summary.to.address,
        estimated_time=format_estimated_time(intent.estimated_time_ms),
        gas_info=f"Gas: ~${gas.total_usd} (paid in {gas.payment_token.symbol})",
    )
