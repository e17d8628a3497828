"""
Client module for the backend abstraction service.

Provides the JSON transport and the typed endpoint wrapper consumed by the
balance aggregator, the transaction flow and the status tracker.
"""

from .http_client import InterspaceHttpClient
from .intent_service import IntentServiceClient

__all__ = ["InterspaceHttpClient", "IntentServiceClient"]
