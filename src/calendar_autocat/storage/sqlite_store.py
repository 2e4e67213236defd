from __future__ import annotations

import json
import os
import pathlib
from datetime import datetime, timezone
from typing import Callable, List, Optional

import aiosqlite

from ..events import ItemEventHub
from .base import CalendarItem, JCal, compact_timestamp

PRAGMAS: list[str] = [
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA temp_store=MEMORY;",
]

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS calendar_items (
  calendar_id TEXT NOT NULL,
  id TEXT NOT NULL,
  format TEXT NOT NULL DEFAULT 'jcal',
  item TEXT NOT NULL,
  created_at TEXT NOT NULL,
  last_modified TEXT NOT NULL,
  PRIMARY KEY (calendar_id, id)
);

-- Compact UTC timestamps sort lexicographically.
CREATE INDEX IF NOT EXISTS idx_last_modified ON calendar_items(last_modified);
"""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dump(item: JCal) -> str:
    if isinstance(item, str):
        json.loads(item)  # reject non-JSON bodies before they hit the table
        return item
    return json.dumps(item, ensure_ascii=False)


class SQLiteCalendarStore:
    """Calendar item store on SQLite. Fires created/updated on the hub after each write."""

    def __init__(
        self,
        db_path: str,
        *,
        hub: Optional[ItemEventHub] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.db_path = db_path if db_path == ":memory:" else os.path.expanduser(db_path)
        self.hub = hub
        self.clock = clock
        self.conn: Optional[aiosqlite.Connection] = None

    async def initialize(self) -> None:
        if self.db_path != ":memory:":
            pathlib.Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = await aiosqlite.connect(self.db_path)
        self.conn.row_factory = aiosqlite.Row
        for p in PRAGMAS:
            await self.conn.execute(p)
        await self.conn.executescript(SCHEMA_SQL)
        await self.conn.commit()

    async def close(self) -> None:
        if self.conn:
            await self.conn.close()
            self.conn = None

    @staticmethod
    def _row_to_item(r: aiosqlite.Row) -> CalendarItem:
        return CalendarItem(calendar_id=r["calendar_id"], id=r["id"], format=r["format"], item=json.loads(r["item"]))

    # ---------------- Writes ----------------

    async def create(self, item: CalendarItem) -> CalendarItem:
        assert self.conn is not None
        ts = compact_timestamp(self.clock())
        await self.conn.execute(
            """
            INSERT INTO calendar_items (calendar_id, id, format, item, created_at, last_modified)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (item.calendar_id, item.id, item.format, _dump(item.item), ts, ts),
        )
        await self.conn.commit()
        stored = await self.get(item.calendar_id, item.id)
        if self.hub:
            await self.hub.on_created.emit(stored)
        return stored

    async def update(self, calendar_id: str, item_id: str, *, format: str = "jcal", item: JCal) -> None:
        assert self.conn is not None
        cur = await self.conn.execute(
            "UPDATE calendar_items SET format = ?, item = ?, last_modified = ? WHERE calendar_id = ? AND id = ?",
            (format, _dump(item), compact_timestamp(self.clock()), calendar_id, item_id),
        )
        await self.conn.commit()
        if cur.rowcount == 0:
            raise KeyError(f"{calendar_id}/{item_id}")
        if self.hub:
            await self.hub.on_updated.emit(await self.get(calendar_id, item_id))

    # ---------------- Reads ----------------

    async def get(self, calendar_id: str, item_id: str) -> CalendarItem:
        assert self.conn is not None
        cur = await self.conn.execute(
            "SELECT calendar_id, id, format, item FROM calendar_items WHERE calendar_id = ? AND id = ?",
            (calendar_id, item_id),
        )
        r = await cur.fetchone()
        if r is None:
            raise KeyError(f"{calendar_id}/{item_id}")
        return self._row_to_item(r)

    async def query(self, *, range_start: str, range_end: str, return_format: str = "jcal") -> List[CalendarItem]:
        assert self.conn is not None
        cur = await self.conn.execute(
            """
            SELECT calendar_id, id, format, item FROM calendar_items
            WHERE last_modified >= ? AND last_modified <= ? AND format = ?
            ORDER BY last_modified ASC, calendar_id, id
            """,
            (range_start, range_end, return_format),
        )
        rows = await cur.fetchall()
        return [self._row_to_item(r) for r in rows]

    async def count(self) -> int:
        assert self.conn is not None
        cur = await self.conn.execute("SELECT COUNT(*) AS c FROM calendar_items")
        return int((await cur.fetchone())["c"])
