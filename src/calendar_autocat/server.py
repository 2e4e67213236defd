from __future__ import annotations
import os
import aiosqlite
from fastapi import Body, FastAPI, HTTPException, Response
from structlog import get_logger
from .config import settings
from .obs.metrics import METRICS
from .runtime import Runtime, configure_logging
from .storage.base import CalendarItem

log = get_logger()
app = FastAPI(title="calendar-autocat", version="0.1.0")

_rt: Runtime | None = None

@app.on_event("startup")
async def startup() -> None:
    global _rt
    configure_logging(settings.log_level)
    _rt = Runtime(settings)
    await _rt.start()
    log.info("startup", db=_rt.store.db_path, categories=_rt.classifier.table.categories,
             mode=settings.match_mode, sweep=settings.startup_sweep)
    if settings.startup_sweep:
        await _rt.sweep()

@app.on_event("shutdown")
async def shutdown() -> None:
    global _rt
    if _rt:
        await _rt.stop()
        _rt = None
    log.info("shutdown")

@app.get("/health")
async def health():
    assert _rt is not None
    return {"ok": True, "db_path": os.path.expanduser(settings.db_path), "items": await _rt.store.count()}

@app.get("/metrics")
async def metrics():
    text = await METRICS.export_prom()
    return Response(content=text, media_type="text/plain; version=0.0.4")

@app.post("/items", status_code=201)
async def create_item_ep(item: CalendarItem):
    assert _rt is not None
    try:
        await _rt.store.create(item)
    except aiosqlite.IntegrityError:
        raise HTTPException(status_code=409, detail="item already exists")
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    # re-read: the created hook may already have written a category
    return {"success": True, "data": (await _rt.store.get(item.calendar_id, item.id)).model_dump()}

@app.put("/items/{calendar_id}/{item_id}")
async def update_item_ep(calendar_id: str, item_id: str, payload: dict = Body(...)):
    assert _rt is not None
    if payload.get("item") is None:
        raise HTTPException(status_code=422, detail="item body required")
    try:
        await _rt.store.update(calendar_id, item_id, format=str(payload.get("format", settings.item_format)),
                               item=payload.get("item"))
    except KeyError:
        raise HTTPException(status_code=404, detail="item not found")
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"success": True, "data": (await _rt.store.get(calendar_id, item_id)).model_dump()}

@app.get("/items/{calendar_id}/{item_id}")
async def get_item_ep(calendar_id: str, item_id: str):
    assert _rt is not None
    try:
        item = await _rt.store.get(calendar_id, item_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="item not found")
    return {"success": True, "data": item.model_dump()}

@app.post("/tools/classify")
async def classify_ep(payload: dict = Body(...)):
    assert _rt is not None
    title = payload.get("title")
    title = str(title) if title is not None else None
    return {"success": True, "data": {"title": title, "category": _rt.classifier.classify(title)}}

@app.post("/tools/sweep")
async def sweep_ep(payload: dict = Body(default={})):
    assert _rt is not None
    window = payload.get("window_days")
    try:
        res = await _rt.sweep(int(window) if window is not None else None)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"success": True, "data": res.as_dict()}
