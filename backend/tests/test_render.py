"""Tests for render plans and field-level rules."""

from formdesk.schemas.field import FieldType, parse_fields
from formdesk.services.render import (
    FIELD_RENDERERS,
    REDACTED,
    build_render_plan,
    missing_required_fields,
    percent_complete,
    redact_form_data,
    sanitize_form_data,
)

from tests.conftest import INTAKE_FIELDS

FIELDS = parse_fields(INTAKE_FIELDS)


def by_id(plan):
    return {f.id: f for f in plan}


def test_every_field_type_has_a_renderer():
    assert set(FIELD_RENDERERS) == set(FieldType)


def test_empty_defaults():
    plan = by_id(build_render_plan(FIELDS, {}, completed=False))
    assert plan["name"].value == ""
    assert plan["age"].value is None
    assert plan["dept"].value == ""
    assert plan["agree"].value is False
    assert plan["intro"].value is None
    assert plan["sep"].value is None


def test_order_and_extras():
    plan = build_render_plan(FIELDS, {}, completed=False)
    assert [f.id for f in plan] == [f["id"] for f in INTAKE_FIELDS]
    fields = by_id(plan)
    assert fields["intro"].extras == {"level": 3, "description": None}
    assert [o["value"] for o in fields["dept"].extras["options"]] == ["engineering", "sales"]


def test_rendering_is_idempotent():
    data = {"name": "Ada", "agree": True}
    first = build_render_plan(FIELDS, data, completed=False)
    second = build_render_plan(FIELDS, data, completed=False)
    assert first == second


def test_completed_plan_is_not_editable():
    plan = build_render_plan(FIELDS, {"name": "Ada"}, completed=True)
    assert not any(f.editable for f in plan)


def test_layout_fields_are_not_editable():
    plan = by_id(build_render_plan(FIELDS, {}, completed=False))
    assert plan["intro"].editable is False
    assert plan["name"].editable is True


def test_sensitive_values_are_redacted():
    plan = by_id(build_render_plan(FIELDS, {"ssn": "123"}, completed=True, can_view_sensitive=False))
    assert plan["ssn"].value == REDACTED
    assert plan["ssn"].redacted is True
    assert plan["ssn"].answered is True
    assert plan["name"].redacted is False


def test_full_viewers_see_sensitive_values():
    plan = by_id(build_render_plan(FIELDS, {"ssn": "123"}, completed=True, can_view_sensitive=True))
    assert plan["ssn"].value == "123"


def test_missing_required_fields():
    assert missing_required_fields(FIELDS, {}) == ["Full name", "I agree"]
    assert missing_required_fields(FIELDS, {"name": "  ", "agree": False}) == ["Full name"]
    assert missing_required_fields(FIELDS, {"name": "Ada", "agree": True}) == []


def test_sanitize_drops_unknown_and_layout_keys():
    data = sanitize_form_data(FIELDS, {"name": "Ada", "intro": "x", "bogus": 1})
    assert data == {"name": "Ada"}


def test_redact_form_data():
    data = {"name": "Ada", "ssn": "123"}
    assert redact_form_data(FIELDS, data, False) == {"name": "Ada", "ssn": REDACTED}
    assert redact_form_data(FIELDS, data, True) == data


def test_percent_complete():
    # 5 input fields
    assert percent_complete(FIELDS, {}) == 0.0
    assert percent_complete(FIELDS, {"name": "Ada", "age": 30, "dept": "sales"}) == 60.0
    assert percent_complete(parse_fields([{"id": "h", "type": "header"}]), {}) == 0.0
