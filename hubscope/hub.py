from __future__ import annotations
from itertools import count as _counter
from typing import Callable, Dict, List, Optional
import logging

import config
from .census import Census, tally
from .emitter import ANY_OWNER, Emitter
from .scope import Scope
from .subscription import Subscription

log = logging.getLogger(__name__)


class Hub:
    """
    Root of a scope tree: owns the topic registry and the hub-level emitter.

    Every registration lives here, whichever node asked for it. Listener
    registrations are tagged with the node whose on() produced them, and each
    Subscription is adopted by the node whose subscribe() produced it, so a
    Scope can later remove exactly what it created.

    Hub-level events (see config): "message", "new topic", "cancel".
    """

    parent = None

    def __init__(self) -> None:
        self._emitter = Emitter()
        self._topics: Dict[str, List[Subscription]] = {}
        self._own_subscriptions: List[Subscription] = []
        self._ids = _counter(1)
        self.children: List[Scope] = []

    def __repr__(self) -> str:
        return f"Hub(topics={len(self._topics)}, children={len(self.children)})"

    # ---- generic events --------------------------------------------------

    def on(self, event: str, fn: Callable) -> "Hub":
        self._attach(event, fn, self)
        return self

    def off(self, event: str, fn: Callable) -> "Hub":
        self._emitter.off(event, fn, ANY_OWNER)
        return self

    def emit(self, event: str, *args) -> "Hub":
        self._emitter.emit(event, *args)
        return self

    def listeners(self, event: str, owner=None) -> List[Callable]:
        """Listeners currently registered for ``event``, optionally only ``owner``'s."""
        return self._emitter.listeners(event, owner)

    # ---- topics ----------------------------------------------------------

    def subscribe(self, topic: str, listener: Optional[Callable] = None) -> Subscription:
        return self._open(topic, listener, self)

    def unsubscribe(self, topic: str) -> "Hub":
        for sub in list(self._topics.get(topic, [])):
            sub.cancel()
        return self

    def publish(self, topic: str, *args) -> "Hub":
        # raw feed first, full argument list untouched
        self.emit(config.EVENT_MESSAGE, topic, *args)

        payload = args[0] if args else None
        for sub in list(self._topics.get(topic, [])):
            sub.send(payload, topic)
        return self

    def scope(self) -> Scope:
        child = Scope(self)
        self.children.append(child)
        return child

    # ---- census ----------------------------------------------------------

    def count(self) -> Census:
        return tally(sub for subs in self._topics.values() for sub in subs)

    def count_all(self) -> Census:
        return self.count()

    def own_count(self) -> Census:
        return tally(self._own_subscriptions)

    # ---- node protocol (used by scopes) ----------------------------------

    def _attach(self, event: str, fn: Callable, owner) -> None:
        self._emitter.on(event, fn, owner)

    def _detach(self, event: str, fn: Callable, owner) -> bool:
        return self._emitter.off(event, fn, owner)

    def _open(self, topic: str, listener: Optional[Callable], owner) -> Subscription:
        sub = Subscription(next(self._ids), topic, listener)
        sub.on(config.SUB_EVENT_CANCEL, self._cancelled)
        self._topics.setdefault(topic, []).append(sub)
        owner._adopt(sub)

        log.debug("subscription %s opened on %r by %r", sub.id, topic, owner)
        self.emit(config.EVENT_NEW_TOPIC, topic, sub)
        return sub

    def _adopt(self, sub: Subscription) -> None:
        self._own_subscriptions.append(sub)
        sub.on(config.SUB_EVENT_CANCEL, self._forget)

    def _forget(self, sub: Subscription) -> None:
        if sub in self._own_subscriptions:
            self._own_subscriptions.remove(sub)

    def _release(self, child) -> None:
        if child in self.children:
            self.children.remove(child)

    def _cancelled(self, sub: Subscription) -> None:
        subs = self._topics.get(sub.topic)
        if subs is not None and sub in subs:
            subs.remove(sub)
            if not subs:
                del self._topics[sub.topic]
        self.emit(config.EVENT_CANCEL, sub)
