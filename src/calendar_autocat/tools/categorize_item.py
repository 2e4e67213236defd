from __future__ import annotations
from enum import Enum
from typing import Callable, Optional, Sequence
from structlog import get_logger
from ..ical.component import Component, parse as parse_jcal
from ..intelligence.categorize import Classifier
from ..obs.metrics import METRICS
from ..storage.base import CalendarItem, CalendarStore

log = get_logger()

CATEGORIES_PROP = "categories"
SUMMARY_PROP = "summary"

class Outcome(str, Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"

def _find_target(root: Component, item_types: Sequence[str]) -> Optional[Component]:
    # A bare vevent/vtodo is handled as-is; otherwise the first supported child wins.
    if root.name in item_types:
        return root
    for t in item_types:
        sub = root.get_first_subcomponent(t)
        if sub is not None:
            return sub
    return None

def _current_categories(comp: Component) -> list[str]:
    out: list[str] = []
    for p in comp.get_all_properties(CATEGORIES_PROP):
        out.extend(str(v) for v in p.values)
    return out

async def _apply(
    item: CalendarItem,
    *,
    store: CalendarStore,
    classifier: Classifier,
    parser: Callable[[object], Component],
    item_types: Sequence[str],
) -> Outcome:
    root = parser(item.item)
    target = _find_target(root, item_types)
    if target is None:
        log.debug("categorize_skip", reason="no_component", calendar_id=item.calendar_id, item_id=item.id)
        return Outcome.SKIPPED

    summary = target.get_first_property_value(SUMMARY_PROP)
    if not summary:
        log.debug("categorize_skip", reason="no_summary", calendar_id=item.calendar_id, item_id=item.id)
        return Outcome.SKIPPED

    category = classifier.classify(str(summary))
    if category is None:
        return Outcome.SKIPPED

    if category in _current_categories(target):
        log.debug("categorize_unchanged", calendar_id=item.calendar_id, item_id=item.id, category=category)
        return Outcome.UNCHANGED

    target.remove_all_properties(CATEGORIES_PROP)
    target.add_property_with_value(CATEGORIES_PROP, category)
    body = root.to_string() if isinstance(item.item, (str, bytes)) else root.to_json()

    await store.update(item.calendar_id, item.id, format=item.format, item=body)
    log.info("categorize_updated", calendar_id=item.calendar_id, item_id=item.id, category=category, component=target.name)
    return Outcome.UPDATED

async def categorize_item_tool(
    *,
    store: CalendarStore,
    classifier: Classifier,
    item: CalendarItem,
    item_types: Sequence[str] = ("vevent", "vtodo"),
    parser: Callable[[object], Component] = parse_jcal,
) -> Outcome:
    """
    Classify the item's title and write the category back through the store.
    Never raises: failures are logged with the item ids and reported as FAILED.
    """
    try:
        outcome = await _apply(item, store=store, classifier=classifier, parser=parser,
                               item_types=[t.lower() for t in item_types])
    except Exception as e:
        log.warning("categorize_failed", calendar_id=item.calendar_id, item_id=item.id, err=str(e), exc_info=True)
        outcome = Outcome.FAILED
    await METRICS.record_outcome(outcome.value)
    return outcome
