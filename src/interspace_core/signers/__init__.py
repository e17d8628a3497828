from .bases import SignerKind, SigningCapability
from .session import SessionWalletSigner
from .external import ExternalWalletSigner
from .queue_signer import QueueSigner
from .test_wallet import TestWallet, TestWalletRegistry
from .factory import build_signer

__all__ = [
    "SignerKind",
    "SigningCapability",
    "SessionWalletSigner",
    "ExternalWalletSigner",
    "QueueSigner",
    "TestWallet",
    "TestWalletRegistry",
    "build_signer",
]
