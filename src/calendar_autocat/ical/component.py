"""
Minimal jCal (RFC 7265) component tree.

A component is ``[name, [properties...], [subcomponents...]]`` and a property
is ``[name, {params}, value_type, value, ...]``. Wrappers hold references into
the underlying lists, so edits on a subcomponent show up in ``to_json()`` of
its root.
"""
from __future__ import annotations

import copy
import json
from typing import Any, List, Optional


class JCalError(ValueError):
    pass


class Property:
    def __init__(self, jcal: list) -> None:
        if not (isinstance(jcal, list) and len(jcal) >= 3 and isinstance(jcal[0], str)
                and isinstance(jcal[1], dict) and isinstance(jcal[2], str)):
            raise JCalError(f"malformed jCal property: {jcal!r}")
        self.jcal = jcal

    @property
    def name(self) -> str:
        return self.jcal[0].lower()

    @property
    def values(self) -> List[Any]:
        return list(self.jcal[3:])

    @property
    def first_value(self) -> Any:
        return self.jcal[3] if len(self.jcal) > 3 else None


class Component:
    def __init__(self, jcal: list) -> None:
        if not (isinstance(jcal, list) and len(jcal) == 3 and isinstance(jcal[0], str)
                and isinstance(jcal[1], list) and isinstance(jcal[2], list)):
            raise JCalError("malformed jCal component")
        self.jcal = jcal

    @property
    def name(self) -> str:
        return self.jcal[0].lower()

    # ---------- subcomponents ----------

    def get_first_subcomponent(self, name: str) -> Optional["Component"]:
        for c in self.jcal[2]:
            comp = Component(c)
            if comp.name == name.lower():
                return comp
        return None

    # ---------- properties ----------

    def get_all_properties(self, name: Optional[str] = None) -> List[Property]:
        out = [Property(p) for p in self.jcal[1]]
        if name is None:
            return out
        return [p for p in out if p.name == name.lower()]

    def get_first_property(self, name: str) -> Optional[Property]:
        props = self.get_all_properties(name)
        return props[0] if props else None

    def get_first_property_value(self, name: str) -> Any:
        p = self.get_first_property(name)
        return p.first_value if p else None

    def remove_all_properties(self, name: str) -> bool:
        before = len(self.jcal[1])
        self.jcal[1][:] = [p for p in self.jcal[1] if Property(p).name != name.lower()]
        return len(self.jcal[1]) != before

    def add_property_with_value(self, name: str, value: Any, value_type: str = "text") -> Property:
        raw = [name.lower(), {}, value_type, value]
        self.jcal[1].append(raw)
        return Property(raw)

    def to_json(self) -> list:
        return copy.deepcopy(self.jcal)

    def to_string(self) -> str:
        return json.dumps(self.jcal, ensure_ascii=False)


def parse(raw: Any) -> Component:
    """Parse jCal text or an already-decoded tree. Input is never mutated."""
    if isinstance(raw, (str, bytes)):
        try:
            tree = json.loads(raw)
        except json.JSONDecodeError as e:
            raise JCalError(f"invalid jCal JSON: {e}") from e
    else:
        tree = copy.deepcopy(raw)
    return Component(tree)
