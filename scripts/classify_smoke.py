import asyncio, uuid

from calendar_autocat.config import settings
from calendar_autocat.runtime import Runtime
from calendar_autocat.storage.base import CalendarItem

TITLES = ["Laufen am Montag", "ODS Vorlesung", "Random Meeting", "Einmalig"]

def vevent(summary: str) -> list:
    return ["vcalendar", [], [["vevent", [["summary", {}, "text", summary]], []]]]

async def main():
    rt = Runtime(settings)
    # 1) classifier only
    for t in TITLES:
        print(f"{t!r:24} -> {rt.classifier.classify(t)}")

    # 2) through the store: create fires the categorizer
    await rt.start()
    for t in TITLES:
        item = CalendarItem(calendar_id="smoke", id=str(uuid.uuid4()), item=vevent(t))
        await rt.store.create(item)
        stored = await rt.store.get(item.calendar_id, item.id)
        print("stored:", stored.item)
    await rt.stop()

if __name__ == "__main__":
    asyncio.run(main())
