from __future__ import annotations
import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict

@dataclass
class _TimerAgg:
    sum_ms: float = 0.0
    count: int = 0

class Metrics:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._timers: Dict[str, _TimerAgg] = {}
        self._counters: Dict[str, int] = {}

    async def observe_ms(self, name: str, ms: float) -> None:
        async with self._lock:
            agg = self._timers.setdefault(name, _TimerAgg())
            agg.sum_ms += float(ms)
            agg.count += 1

    async def inc(self, name: str, n: int = 1) -> None:
        async with self._lock:
            self._counters[name] = self._counters.get(name, 0) + int(n)

    async def get(self, name: str) -> int:
        async with self._lock:
            return self._counters.get(name, 0)

    async def reset(self) -> None:
        async with self._lock:
            self._timers.clear()
            self._counters.clear()

    async def record_outcome(self, outcome: str) -> None:
        """One counter per categorize outcome: categorize_updated_total, ..."""
        await self.inc(f"categorize_{outcome}_total")

    @asynccontextmanager
    async def timed(self, name: str) -> AsyncIterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            await self.observe_ms(name, (time.perf_counter() - t0) * 1000.0)

    async def export_prom(self) -> str:
        lines: list[str] = []
        async with self._lock:
            for k, v in sorted(self._counters.items()):
                lines.append(f"# TYPE autocat_{k} counter")
                lines.append(f"autocat_{k} {v}")
            for k, t in sorted(self._timers.items()):
                lines.append(f"# TYPE autocat_{k}_ms summary")
                lines.append(f"autocat_{k}_ms_sum {t.sum_ms:.3f}")
                lines.append(f"autocat_{k}_ms_count {t.count}")
        return "\n".join(lines) + "\n"

METRICS = Metrics()
