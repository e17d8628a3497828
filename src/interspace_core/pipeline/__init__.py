"""
Chain-abstracted transaction pipeline.

Balance aggregation feeds the intent builder; the flow then drives the intent
service client, the operation signer and the status tracker in order.
"""

from .balances import BalanceAggregator, aggregate_balance, select_gas_token
from .builder import IntentBuilder, amount_to_atomic, normalize_recipient
from .signer import OperationSigner
from .tracker import StatusTracker
from .summary import DisplaySummary, format_address, format_transaction_summary
from .flow import FlowResult, TransactionFlow

__all__ = [
    "BalanceAggregator",
    "aggregate_balance",
    "select_gas_token",
    "IntentBuilder",
    "amount_to_atomic",
    "normalize_recipient",
    "OperationSigner",
    "StatusTracker",
    "DisplaySummary",
    "format_address",
    "format_transaction_summary",
    "FlowResult",
    "TransactionFlow",
]
