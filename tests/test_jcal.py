import json

import pytest

from calendar_autocat.ical.component import Component, JCalError, parse

from conftest import vcalendar, vevent


def test_parse_navigates_subcomponents_and_properties() -> None:
    comp = parse(vcalendar(vevent("ODS Vorlesung", categories=["Work", "Uni"])))
    assert comp.name == "vcalendar"
    ev = comp.get_first_subcomponent("VEVENT")
    assert ev is not None
    assert ev.get_first_property_value("summary") == "ODS Vorlesung"
    assert [p.first_value for p in ev.get_all_properties("categories")] == ["Work", "Uni"]
    assert comp.get_first_subcomponent("vtodo") is None


def test_edits_on_subcomponent_reach_root_json() -> None:
    comp = parse(vcalendar(vevent("Laufen", categories=["Old"])))
    ev = comp.get_first_subcomponent("vevent")
    assert ev.remove_all_properties("categories") is True
    ev.add_property_with_value("categories", "Sport")
    out = comp.to_json()
    props = out[2][0][1]
    assert ["categories", {}, "text", "Sport"] in props
    assert sum(1 for p in props if p[0] == "categories") == 1


def test_parse_does_not_mutate_input() -> None:
    raw = vcalendar(vevent("Laufen", categories=["Old"]))
    before = json.dumps(raw)
    parse(raw).get_first_subcomponent("vevent").remove_all_properties("categories")
    assert json.dumps(raw) == before


def test_parse_accepts_json_text() -> None:
    comp = parse(json.dumps(vcalendar(vevent("x"))))
    assert isinstance(comp, Component)
    assert json.loads(comp.to_string()) == comp.to_json()


@pytest.mark.parametrize("raw", ["not json", "[]", '["vcalendar", {}, []]', 42, None])
def test_malformed_input_raises(raw) -> None:
    with pytest.raises(JCalError):
        parse(raw)


def test_multi_value_property() -> None:
    ev = Component(["vevent", [["categories", {}, "text", "A", "B"]], []])
    (p,) = ev.get_all_properties("categories")
    assert p.values == ["A", "B"]
    assert ev.get_first_property_value("summary") is None
