"""
Operation Status Schema Models

Status of a submitted operation set as reported by
GET /operations/{operationSetId}/status.
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import Field

from .bases import CanonicalModel


class OperationState(str, Enum):
    """
    Enumeration of operation-set statuses.

    Attributes:
        PENDING: Accepted, not yet broadcast
        PROCESSING: Broadcast on at least one chain
        SUCCESSFUL: Every chain confirmed
        FAILED: Definite failure
        PARTIAL: Some chains succeeded and some failed
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESSFUL = "successful"
    FAILED = "failed"
    PARTIAL = "partial"


class TransactionStatus(CanonicalModel):
    """Per-chain transaction detail inside an operation status."""
    chain_id: int
    chain_name: str = ""
    hash: str = ""
    status: Literal["pending", "confirmed", "failed"]
    block_number: Optional[int] = None
    block_timestamp: Optional[str] = None
    gas_used: Optional[str] = None
    effective_gas_price: Optional[str] = None
    error: Optional[str] = None


class OperationStatus(CanonicalModel):
    operation_set_id: str
    status: OperationState
    transactions: List[TransactionStatus] = Field(default_factory=list)
    error: Optional[str] = None
    completed_at: Optional[str] = None

    def is_success(self) -> bool:
        return self.status == OperationState.SUCCESSFUL

    def is_partial(self) -> bool:
        return self.status == OperationState.PARTIAL

    def is_terminal(self, partial_is_terminal: bool = False) -> bool:
        """
        Check whether polling may stop on this status.

        ``successful`` and ``failed`` are always terminal. ``partial`` is
        terminal only when ``partial_is_terminal`` is set.
        """
        if self.status in (OperationState.SUCCESSFUL, OperationState.FAILED):
            return True
        return partial_is_terminal and self.status == OperationState.PARTIAL

    def failed_chains(self) -> List[TransactionStatus]:
        return [tx for tx in self.transactions if tx.status == "failed"]
