from .bases import CanonicalModel, ClientRequestHeader, ApiEnvelope
from .balances import (
    ChainBalance,
    UnifiedToken,
    SuggestedGasToken,
    NativeGasBalance,
    GasToken,
    GasAnalysis,
    UnifiedBalance,
    GasTokenOption,
    GasTokenOptions,
    BalanceCheck,
)
from .intents import (
    IntentSource,
    IntentDestination,
    GasTokenSelection,
    TransactionIntent,
    UnsignedOperation,
    UnsignedOperations,
    SummarySide,
    RouteStep,
    TransactionSummary,
    GasBreakdown,
    GasPaymentToken,
    GasEstimate,
    IntentResponse,
    SignedOperation,
    SubmitOperationsRequest,
)
from .operations import OperationState, TransactionStatus, OperationStatus
from .requests import RequestKind, TransactionRequest, SiweRequest

__all__ = [
    "CanonicalModel",
    "ClientRequestHeader",
    "ApiEnvelope",
    "ChainBalance",
    "UnifiedToken",
    "SuggestedGasToken",
    "NativeGasBalance",
    "GasToken",
    "GasAnalysis",
    "UnifiedBalance",
    "GasTokenOption",
    "GasTokenOptions",
    "BalanceCheck",
    "IntentSource",
    "IntentDestination",
    "GasTokenSelection",
    "TransactionIntent",
    "UnsignedOperation",
    "UnsignedOperations",
    "SummarySide",
    "RouteStep",
    "TransactionSummary",
    "GasBreakdown",
    "GasPaymentToken",
    "GasEstimate",
    "IntentResponse",
    "SignedOperation",
    "SubmitOperationsRequest",
    "OperationState",
    "TransactionStatus",
    "OperationStatus",
    "RequestKind",
    "TransactionRequest",
    "SiweRequest",
]
