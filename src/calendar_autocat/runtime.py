from __future__ import annotations

import functools
import logging
import structlog
from .background.sweep import SweepSummary, sweep_recent
from .config import Settings
from .events import ItemEventHub
from .intelligence.categorize import Classifier, KeywordTable
from .storage.base import CalendarItem
from .storage.sqlite_store import SQLiteCalendarStore
from .tools.categorize_item import Outcome, categorize_item_tool

def configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
    )

def build_classifier(s: Settings) -> Classifier:
    return Classifier(KeywordTable.from_mapping(s.categories), mode=s.match_mode)

class Runtime:
    """Store, hub and classifier wired the same way for every host surface."""

    def __init__(self, s: Settings) -> None:
        self.settings = s
        self.hub = ItemEventHub()
        self.store = SQLiteCalendarStore(s.db_path, hub=self.hub)
        self.classifier = build_classifier(s)
        self.categorize = functools.partial(
            categorize_item_tool,
            store=self.store,
            classifier=self.classifier,
            item_types=tuple(s.item_types),
        )
        self._handler = self._on_item

    async def _on_item(self, item: CalendarItem) -> Outcome:
        return await self.categorize(item=item)

    async def start(self) -> None:
        await self.store.initialize()
        self.hub.on_created.add_listener(self._handler, return_format=self.settings.item_format)
        self.hub.on_updated.add_listener(self._handler, return_format=self.settings.item_format)

    async def stop(self) -> None:
        self.hub.on_created.remove_listener(self._handler)
        self.hub.on_updated.remove_listener(self._handler)
        await self.store.close()

    async def sweep(self, window_days: int | None = None) -> SweepSummary:
        return await sweep_recent(
            store=self.store,
            categorize=self._handler,
            window_days=self.settings.sweep_window_days if window_days is None else window_days,
            return_format=self.settings.item_format,
        )
