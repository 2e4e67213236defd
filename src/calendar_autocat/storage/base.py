from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, List, Protocol, Union
from pydantic import BaseModel

JCal = Union[list, str]

class CalendarItem(BaseModel):
    """Snapshot of a store item as handed to listeners and query callers."""
    calendar_id: str
    id: str
    format: str = "jcal"
    item: Any

class CalendarStore(Protocol):
    async def update(self, calendar_id: str, item_id: str, *, format: str, item: JCal) -> None: ...

    async def query(self, *, range_start: str, range_end: str, return_format: str = "jcal") -> List[CalendarItem]: ...

def compact_timestamp(dt: datetime) -> str:
    """ISO-8601 UTC with '-' and ':' stripped and no fraction: 20261019T120000Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
