from __future__ import annotations
from itertools import count as _counter
from typing import Callable, List, Optional, Tuple
import logging

import config
from .census import Census, merge, tally
from .errors import ScopeDestroyedError
from .subscription import Subscription

log = logging.getLogger(__name__)

_scope_ids = _counter(1)


class Scope:
    """
    Sandboxed view of a Hub (or of another Scope).

    A scope exposes the same surface as the hub and delegates every call to
    its parent, but remembers what it personally caused:
      - own listeners: (event, listener) pairs registered through on()
      - own subscriptions: handles returned by its subscribe()
      - children: scopes spawned through scope()

    destroy() undoes exactly that and nothing else, in this order:
      1) destroy children
      2) cancel own subscriptions (creation order)
      3) remove own listeners
    so a "cancel" listener registered on the scope still hears its own
    subscriptions go away.
    """

    def __init__(self, parent) -> None:
        self.id = next(_scope_ids)
        self.parent = parent
        self.children: List["Scope"] = []
        self.destroyed: bool = False

        self._own_subscriptions: List[Subscription] = []
        self._own_listeners: List[Tuple[str, Callable]] = []

        log.debug("scope %s created under %r", self.id, parent)

    def __repr__(self) -> str:
        state = " destroyed" if self.destroyed else ""
        return f"Scope#{self.id}{state}"

    def _ensure_alive(self) -> None:
        if self.destroyed:
            raise ScopeDestroyedError(self)

    # ---- generic events --------------------------------------------------

    def on(self, event: str, fn: Callable) -> "Scope":
        self._ensure_alive()
        self.parent._attach(event, fn, self)
        self._own_listeners.append((event, fn))
        return self

    def off(self, event: str, fn: Callable) -> "Scope":
        self.parent._detach(event, fn, self)
        for i, (ev, listener) in enumerate(self._own_listeners):
            if ev == event and listener == fn:
                del self._own_listeners[i]
                break
        return self

    def emit(self, *args) -> "Scope":
        self._ensure_alive()
        self.parent.emit(*args)
        return self

    # ---- topics ----------------------------------------------------------

    def publish(self, *args) -> "Scope":
        self._ensure_alive()
        self.parent.publish(*args)
        return self

    def subscribe(self, topic: str, listener: Optional[Callable] = None) -> Subscription:
        self._ensure_alive()
        return self.parent._open(topic, listener, self)

    def unsubscribe(self, topic: str) -> "Scope":
        for sub in [s for s in self._own_subscriptions if s.topic == topic]:
            sub.cancel()
        return self

    def scope(self) -> "Scope":
        self._ensure_alive()
        child = Scope(self)
        self.children.append(child)
        return child

    # ---- census ----------------------------------------------------------

    def own_count(self) -> Census:
        return tally(self._own_subscriptions)

    def count(self) -> Census:
        """Subscriptions made by this scope and all of its descendants."""
        return merge(self.own_count(), *(child.count() for child in self.children))

    def count_all(self) -> Census:
        """count() plus each ancestor's own subscriptions (never sibling subtrees)."""
        if self.destroyed:
            return {}
        censuses = [self.count()]
        node = self.parent
        while node is not None:
            censuses.append(node.own_count())
            node = node.parent
        return merge(*censuses)

    # ---- teardown --------------------------------------------------------

    def destroy(self) -> None:
        if self.destroyed:
            return

        for child in list(self.children):
            child.destroy()

        for sub in list(self._own_subscriptions):
            sub.cancel()

        for event, fn in self._own_listeners:
            self.parent._detach(event, fn, self)
        self._own_listeners.clear()

        self.destroyed = True
        self.parent._release(self)
        log.debug("scope %s destroyed", self.id)

    # ---- node protocol (forwarded to the hub) ----------------------------

    def _attach(self, event: str, fn: Callable, owner) -> None:
        self._ensure_alive()
        self.parent._attach(event, fn, owner)

    def _detach(self, event: str, fn: Callable, owner) -> bool:
        return self.parent._detach(event, fn, owner)

    def _open(self, topic: str, listener: Optional[Callable], owner) -> Subscription:
        self._ensure_alive()
        return self.parent._open(topic, listener, owner)

    def _adopt(self, sub: Subscription) -> None:
        self._own_subscriptions.append(sub)
        sub.on(config.SUB_EVENT_CANCEL, self._forget)

    def _forget(self, sub: Subscription) -> None:
        if sub in self._own_subscriptions:
            self._own_subscriptions.remove(sub)

    def _release(self, child: "Scope") -> None:
        if child in self.children:
            self.children.remove(child)
