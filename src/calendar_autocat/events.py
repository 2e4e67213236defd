from __future__ import annotations
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List
from structlog import get_logger
from .storage.base import CalendarItem

log = get_logger()

Handler = Callable[[CalendarItem], Awaitable[object]]

@dataclass
class _Registration:
    handler: Handler
    return_format: str

@dataclass
class ItemEvent:
    """One notification point (created or updated) with ordered listeners."""
    name: str
    _listeners: List[_Registration] = field(default_factory=list)

    def add_listener(self, handler: Handler, *, return_format: str = "jcal") -> None:
        if self.has_listener(handler):
            return
        self._listeners.append(_Registration(handler, return_format))

    def remove_listener(self, handler: Handler) -> None:
        self._listeners = [r for r in self._listeners if r.handler is not handler]

    def has_listener(self, handler: Handler) -> bool:
        return any(r.handler is handler for r in self._listeners)

    async def emit(self, item: CalendarItem) -> None:
        for reg in list(self._listeners):
            if item.format != reg.return_format:
                log.debug("listener_format_skip", hook=self.name, want=reg.return_format, got=item.format)
                continue
            try:
                await reg.handler(item)
            except Exception as e:
                log.warning("listener_error", hook=self.name, calendar_id=item.calendar_id, item_id=item.id, err=str(e))

class ItemEventHub:
    def __init__(self) -> None:
        self.on_created = ItemEvent("created")
        self.on_updated = ItemEvent("updated")
