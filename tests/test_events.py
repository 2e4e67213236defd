import pytest

from calendar_autocat.events import ItemEventHub
from calendar_autocat.storage.base import CalendarItem

ITEM = CalendarItem(calendar_id="cal", id="e1", item=["vcalendar", [], []])


@pytest.mark.asyncio
async def test_listeners_run_in_order_and_survive_failures() -> None:
    hub = ItemEventHub()
    seen = []

    async def bad(item):
        seen.append("bad")
        raise RuntimeError("boom")

    async def good(item):
        seen.append("good")

    hub.on_created.add_listener(bad)
    hub.on_created.add_listener(good)
    await hub.on_created.emit(ITEM)
    assert seen == ["bad", "good"]


@pytest.mark.asyncio
async def test_add_is_deduplicated_and_remove_works() -> None:
    hub = ItemEventHub()
    calls = []

    async def handler(item):
        calls.append(item.id)

    hub.on_updated.add_listener(handler)
    hub.on_updated.add_listener(handler)
    await hub.on_updated.emit(ITEM)
    assert calls == ["e1"]

    hub.on_updated.remove_listener(handler)
    assert not hub.on_updated.has_listener(handler)
    await hub.on_updated.emit(ITEM)
    assert calls == ["e1"]
    # created and updated are separate points
    assert not hub.on_created.has_listener(handler)


@pytest.mark.asyncio
async def test_listener_only_receives_its_format() -> None:
    hub = ItemEventHub()
    calls = []

    async def handler(item):
        calls.append(item.format)

    hub.on_created.add_listener(handler, return_format="ical")
    await hub.on_created.emit(ITEM)
    assert calls == []
