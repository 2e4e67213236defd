import asyncio
from typing import List

import pytest

from calendar_autocat.config import DEFAULT_CATEGORIES
from calendar_autocat.intelligence.categorize import Classifier, KeywordTable
from calendar_autocat.obs.metrics import METRICS
from calendar_autocat.storage.base import CalendarItem


def vcalendar(*subs: list) -> list:
    return ["vcalendar", [["version", {}, "text", "2.0"]], list(subs)]


def vevent(summary=None, categories=None, name="vevent") -> list:
    props = [["uid", {}, "text", "uid-1"]]
    if summary is not None:
        props.append(["summary", {}, "text", summary])
    for c in categories or []:
        props.append(["categories", {}, "text", c])
    return [name, props, []]


class FakeStore:
    """In-memory stand-in for the calendar store; records every update."""

    def __init__(self, items: List[CalendarItem] | None = None, fail_ids=(), query_error=None) -> None:
        self.items = list(items or [])
        self.fail_ids = set(fail_ids)
        self.query_error = query_error
        self.updates: list[dict] = []
        self.queries: list[dict] = []

    async def update(self, calendar_id, item_id, *, format, item):
        if item_id in self.fail_ids:
            raise RuntimeError(f"update rejected for {item_id}")
        self.updates.append({"calendar_id": calendar_id, "item_id": item_id, "format": format, "item": item})

    async def query(self, *, range_start, range_end, return_format="jcal"):
        self.queries.append({"range_start": range_start, "range_end": range_end, "return_format": return_format})
        if self.query_error:
            raise self.query_error
        return list(self.items)


@pytest.fixture
def classifier() -> Classifier:
    return Classifier(KeywordTable.from_mapping(DEFAULT_CATEGORIES))


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture(autouse=True)
def fresh_metrics():
    asyncio.run(METRICS.reset())
    yield
