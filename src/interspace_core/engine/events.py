"""
Typed notification events and the async bus that delivers them.

The signing request queue and the status tracker publish events here so an
approval UI, a test harness or a logger can follow progress without the
producers knowing who listens.
"""

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict

from ..schemas.operations import OperationStatus
from ..schemas.requests import RequestKind

# ==================== Base Event ====================

class BaseEvent(ABC):
    """Base class for all events in the system."""

    @abstractmethod
    def __repr__(self) -> str:
        """String representation of the event."""
        pass


# ==================== Signing Queue Events ====================

class RequestEnqueuedEvent(BaseModel, BaseEvent):
    """A signing request was appended to the queue and is awaiting a decision."""
    request_id: str
    kind: RequestKind
    payload: Any

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"RequestEnqueuedEvent(id={self.request_id}, kind={self.kind})"


class RequestSettledEvent(BaseModel, BaseEvent):
    """A signing request left the queue."""
    request_id: str
    kind: RequestKind
    outcome: Literal["approved", "rejected", "cancelled"]

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"RequestSettledEvent(id={self.request_id}, outcome={self.outcome})"


# ==================== Status Tracker Events ====================

class StatusUpdateEvent(BaseModel, BaseEvent):
    """One status response observed while polling an operation set."""
    attempt: int
    status: OperationStatus

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        return f"StatusUpdateEvent(attempt={self.attempt}, status={self.status.status.value})"


# ==================== Event Bus ====================

EventHandlerFunc = Callable[[BaseEvent], Awaitable[Optional[Any]]]
EventHookFunc = Callable[[BaseEvent], Awaitable[None]]


class EventBus:
    """Event dispatcher for publishing and subscribing to events."""

    def __init__(self) -> None:
        """Initialize with empty subscribers and hooks."""
        self._subscribers: Dict[type, list[EventHandlerFunc]] = {}
        self._hooks: Dict[type, list[EventHookFunc]] = {}

    def subscribe(self, event_class: type[BaseEvent], handler: EventHandlerFunc) -> None:
        """
        Register an async handler for the given event class.
        Multiple handlers can be subscribed to the same event type and run in parallel.

        Args:
            event_class: The event class to subscribe to.
            handler: The async handler function to call when the event is published.

        Raises:
            TypeError: If handler is not a coroutine function.
        """
        if not inspect.iscoroutinefunction(handler):
            raise TypeError(f"Handler must be a coroutine function, got {type(handler).__name__}")

        self._subscribers.setdefault(event_class, []).append(handler)

    def hook(self, event_class: type[BaseEvent], hook_func: EventHookFunc) -> None:
        """
        Register a hook for the given event class.
        Hooks are executed before subscribers when the event is dispatched.

        Args:
            event_class: The event class to hook into.
            hook_func: The hook function to call when the event is published.
        """
        if not inspect.iscoroutinefunction(hook_func):
            raise TypeError(f"Handler must be a coroutine function, got {type(hook_func).__name__}")

        self._hooks.setdefault(event_class, []).append(hook_func)

    async def dispatch(self, event: BaseEvent) -> AsyncGenerator[Optional[Any], None]:
        """
        Dispatch an event to all registered hooks and subscribers.
        Hooks run first, then all subscribers run in parallel.

        Yields:
            Results from all subscribers as they complete.
        """
        hooks = self._hooks.get(type(event), [])
        await asyncio.gather(*(hook(event) for hook in hooks))

        handlers = self._subscribers.get(type(event), [])
        if not handlers:
            return

        tasks = [handler(event) for handler in handlers]
        for coro in asyncio.as_completed(tasks):
            yield await coro

    async def publish(self, event: BaseEvent) -> None:
        """Dispatch ``event`` and wait for every hook and subscriber to finish."""
        async for _ in self.dispatch(event):
            pass
