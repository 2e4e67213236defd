from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional
from structlog import get_logger
from ..obs.metrics import METRICS
from ..storage.base import CalendarItem, CalendarStore, compact_timestamp

log = get_logger()

Categorize = Callable[[CalendarItem], Awaitable[object]]

@dataclass
class SweepSummary:
    range_start: str
    range_end: str
    seen: int = 0
    query_failed: bool = False
    outcomes: Counter = field(default_factory=Counter)

    def as_dict(self) -> dict:
        return {
            "range_start": self.range_start,
            "range_end": self.range_end,
            "seen": self.seen,
            "query_failed": self.query_failed,
            "outcomes": dict(self.outcomes),
        }

def sweep_range(window_days: int, now: Optional[datetime] = None) -> tuple[str, str]:
    if window_days <= 0:
        raise ValueError(f"window_days must be positive, got {window_days}")
    end = now or datetime.now(timezone.utc)
    start = end - timedelta(days=window_days)
    return compact_timestamp(start), compact_timestamp(end)

async def sweep_recent(
    *,
    store: CalendarStore,
    categorize: Categorize,
    window_days: int,
    return_format: str = "jcal",
    now: Optional[datetime] = None,
) -> SweepSummary:
    """Re-categorize items of the last `window_days`, one at a time."""
    range_start, range_end = sweep_range(window_days, now)
    summary = SweepSummary(range_start=range_start, range_end=range_end)
    await METRICS.inc("sweep_runs_total")
    async with METRICS.timed("sweep"):
        await _run(summary, store=store, categorize=categorize, return_format=return_format)
    return summary

async def _run(summary: SweepSummary, *, store: CalendarStore, categorize: Categorize, return_format: str) -> None:
    range_start, range_end = summary.range_start, summary.range_end
    try:
        items = await store.query(range_start=range_start, range_end=range_end, return_format=return_format)
    except Exception as e:
        log.warning("sweep_query_error", range_start=range_start, range_end=range_end, err=str(e))
        summary.query_failed = True
        return

    if not items:
        log.info("sweep_empty", range_start=range_start, range_end=range_end)
        return

    for item in items:
        summary.seen += 1
        try:
            outcome = await categorize(item)
        except Exception as e:
            # categorize has its own boundary; this guards foreign handlers
            log.warning("sweep_item_error", calendar_id=item.calendar_id, item_id=item.id, err=str(e))
            outcome = "failed"
        summary.outcomes[getattr(outcome, "value", str(outcome))] += 1

    log.info("sweep_done", seen=summary.seen, **dict(summary.outcomes))
