"""
interspace_core: client-side chain-abstracted transaction pipeline.

Aggregates balances across chains, turns user actions into backend intents,
signs the returned operation bundles in order through a pluggable signing
capability, and tracks the operation set to a terminal status.
"""

from .config import Settings, load_settings
from .clients import InterspaceHttpClient, IntentServiceClient
from .engine import (
    CancelToken,
    EventBus,
    SigningRequestQueue,
    InterspaceError,
    ApiError,
    TransportError,
    IntentExpiredError,
    UserRejectedError,
    RequestCancelledError,
    OperationTimeoutError,
    SigningError,
    ConfigurationError,
)
from .pipeline import (
    BalanceAggregator,
    IntentBuilder,
    OperationSigner,
    StatusTracker,
    TransactionFlow,
    format_transaction_summary,
)
from .signers import (
    SigningCapability,
    SessionWalletSigner,
    ExternalWalletSigner,
    QueueSigner,
    TestWallet,
    TestWalletRegistry,
    build_signer,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "load_settings",
    "InterspaceHttpClient",
    "IntentServiceClient",
    "CancelToken",
    "EventBus",
    "SigningRequestQueue",
    "InterspaceError",
    "ApiError",
    "TransportError",
    "IntentExpiredError",
    "UserRejectedError",
    "RequestCancelledError",
    "OperationTimeoutError",
    "SigningError",
    "ConfigurationError",
    "BalanceAggregator",
    "IntentBuilder",
    "OperationSigner",
    "StatusTracker",
    "TransactionFlow",
    "format_transaction_summary",
    "SigningCapability",
    "SessionWalletSigner",
    "ExternalWalletSigner",
    "QueueSigner",
    "TestWallet",
    "TestWalletRegistry",
    "build_signer",
]
