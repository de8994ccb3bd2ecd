from __future__ import annotations
from typing import Callable, Optional
import logging

import config
from .emitter import Emitter

log = logging.getLogger(__name__)

MessageFilter = Callable[[object, str], bool]


class Subscription:
    """
    Cancellable handle for one subscribe() call.

    Carries its topic, an optional message filter and delivery limit, and a
    private emitter with two events:
      - "message": (payload, topic) for every delivered publish
      - "cancel":  (subscription,) exactly once, when cancelled

    The hub that created the handle listens to its "cancel" event to drop it
    from the topic registry, so cancel() works no matter who calls it.
    """

    def __init__(self, sub_id: int, topic: str, listener: Optional[Callable] = None) -> None:
        self.id = sub_id
        self._topic = topic
        self.cancelled: bool = False

        self._events = Emitter()
        self._filter: Optional[MessageFilter] = None
        self._limit: Optional[int] = None
        self.delivered: int = 0

        if listener is not None:
            self._events.on(config.SUB_EVENT_MESSAGE, listener)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "live"
        return f"Subscription(id={self.id}, topic={self._topic!r}, {state})"

    @property
    def topic(self) -> str:
        return self._topic

    def get_topic(self) -> str:
        return self._topic

    # ---- listeners -------------------------------------------------------

    def on(self, event: str, fn: Callable) -> "Subscription":
        self._events.on(event, fn)
        return self

    def off(self, event: str, fn: Callable) -> "Subscription":
        self._events.off(event, fn)
        return self

    # ---- delivery options ------------------------------------------------

    def set_filter(self, fn: Optional[MessageFilter]) -> "Subscription":
        """Only messages for which ``fn(payload, topic)`` is truthy are delivered."""
        self._filter = fn
        return self

    def set_limit(self, limit: Optional[int]) -> "Subscription":
        """Cancel automatically after ``limit`` delivered messages."""
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self._limit = limit
        if limit is not None and self.delivered >= limit:
            self.cancel()
        return self

    def send(self, payload, topic: str) -> bool:
        if self.cancelled:
            return False
        if self._filter is not None and not self._filter(payload, topic):
            return False

        self.delivered += 1
        self._events.emit(config.SUB_EVENT_MESSAGE, payload, topic)

        if self._limit is not None and self.delivered >= self._limit:
            self.cancel()
        return True

    # ---- teardown --------------------------------------------------------

    def cancel(self) -> "Subscription":
        if self.cancelled:
            return self
        self.cancelled = True
        log.debug("cancel subscription %s (%s)", self.id, self._topic)
        self._events.emit(config.SUB_EVENT_CANCEL, self)
        return self
