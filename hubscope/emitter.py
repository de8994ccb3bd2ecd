# A tiny named-event emitter whose registrations remember who made them.
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional


# owner wildcard for off(): match a registration whoever made it
ANY_OWNER = object()


@dataclass
class Registration:
    listener: Callable
    owner: Optional[Any] = None     # node whose on() produced this entry


class Emitter:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Registration]] = {}

    def on(self, event: str, fn: Callable, owner=None):
        self._subs.setdefault(event, []).append(Registration(fn, owner))

    def off(self, event: str, fn: Callable, owner=None) -> bool:
        """Drop the first registration of ``fn`` for ``event`` made by ``owner``."""
        regs = self._subs.get(event)
        if not regs:
            return False
        for i, reg in enumerate(regs):
            if reg.listener == fn and (owner is ANY_OWNER or reg.owner is owner):
                del regs[i]
                if not regs:
                    del self._subs[event]
                return True
        return False

    def emit(self, event: str, *args, **kwargs):
        # snapshot: listeners may add/remove registrations while we dispatch
        for reg in list(self._subs.get(event, [])):
            reg.listener(*args, **kwargs)

    def listeners(self, event: str, owner=None) -> List[Callable]:
        regs = self._subs.get(event, [])
        if owner is None:
            return [r.listener for r in regs]
        return [r.listener for r in regs if r.owner is owner]
