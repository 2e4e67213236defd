from __future__ import annotations
import asyncio
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from calendar_autocat.config import settings
from calendar_autocat.runtime import Runtime, configure_logging
from calendar_autocat.storage.base import CalendarItem

mcp = FastMCP("calendar-autocat")

_rt: Optional[Runtime] = None
_lock = asyncio.Lock()

async def ensure_init() -> Runtime:
    global _rt
    if _rt is not None:
        return _rt
    async with _lock:
        if _rt is None:
            configure_logging(settings.log_level)
            rt = Runtime(settings)
            await rt.start()
            _rt = rt
    return _rt

@mcp.tool()
async def classify_title(title: str) -> dict:
    rt = await ensure_init()
    return {"title": title, "category": rt.classifier.classify(title)}

@mcp.tool()
async def categorize_item(calendar_id: str, item_id: str, item: Any, format: str = "jcal") -> dict:
    rt = await ensure_init()
    outcome = await rt.categorize(item=CalendarItem(calendar_id=calendar_id, id=item_id, format=format, item=item))
    return {"calendar_id": calendar_id, "item_id": item_id, "outcome": outcome.value}

@mcp.tool()
async def sweep_recent(window_days: int | None = None) -> dict:
    rt = await ensure_init()
    res = await rt.sweep(window_days)
    return res.as_dict()

if __name__ == "__main__":
    mcp.run(transport="stdio")
