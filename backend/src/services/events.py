"""Activity events emitted by store operations.

Stores describe what they did by emitting an :class:`ActivityEvent`; the
activity log subscribes and persists it. Delivery is best effort: handler
failures are logged and never reach the emitting operation, so a broken log
cannot fail or roll back a note mutation.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..models.activity import LogType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityEvent:
    """Something worth recording in the activity log."""

    type: LogType
    operation: str
    user_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    execution_time: Optional[int] = None


EventHandler = Callable[[ActivityEvent], None]


class EventBus:
    """Fan out activity events to subscribers.

    With an ``executor`` handlers run out-of-band on it; without one they run
    inline (used by tests for deterministic ordering).
    """

    def __init__(self, executor: Executor | None = None):
        self._executor = executor
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def emit(self, event: ActivityEvent) -> None:
        for handler in list(self._handlers):
            if self._executor is None:
                self._deliver(handler, event)
                continue
            try:
                future = self._executor.submit(self._deliver, handler, event)
            except RuntimeError as exc:
                # Executor already shut down
                logger.warning("Dropped activity event %s: %s", event.operation, exc)
                continue
            future.add_done_callback(_log_unexpected)

    @staticmethod
    def _deliver(handler: EventHandler, event: ActivityEvent) -> None:
        try:
            handler(event)
        except Exception as exc:
            logger.warning(
                "Activity handler %r failed for %s: %s",
                getattr(handler, "__qualname__", handler),
                event.operation,
                exc,
            )

    def shutdown(self) -> None:
        """Wait for pending deliveries and stop the executor."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)


def _log_unexpected(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Activity event delivery crashed: %s", exc)


__all__ = ["ActivityEvent", "EventBus", "EventHandler"]
