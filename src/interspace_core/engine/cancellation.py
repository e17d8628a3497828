"""
Explicit cancellation signal for in-flight waits.

A ``CancelToken`` is handed to ``enqueue_and_wait`` and to the status poller
so a caller that gives up (e.g. closes the approval sheet) can abandon a
stale attempt deterministically instead of leaving it pending.
"""

import asyncio
from typing import Optional

from .exceptions import RequestCancelledError


class CancelToken:
    """One-shot cancellation flag backed by ``asyncio.Event``."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "Cancelled by caller") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelledError(self.reason or "Cancelled by caller")

    async def sleep(self, delay: float) -> None:
        """
        Sleep for ``delay`` seconds unless cancelled first.

        Raises:
            RequestCancelledError: If the token fires before the delay elapses.
        """
        self.raise_if_cancelled()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return
        self.raise_if_cancelled()
