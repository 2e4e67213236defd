import asyncio
from calendar_autocat.config import settings
from calendar_autocat.runtime import Runtime

async def main():
    rt = Runtime(settings)
    await rt.start()
    res = await rt.sweep()
    print("range", res.range_start, "->", res.range_end)
    print("seen", res.seen, "outcomes", dict(res.outcomes))
    await rt.stop()

if __name__ == "__main__":
    asyncio.run(main())
