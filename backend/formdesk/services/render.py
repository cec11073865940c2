"""
Render plans and field-level rules over form data.

A render plan lists every template field in order with the value to show,
whether it can be edited, and whether it was redacted for the viewer.
Dispatch on field type goes through ``FIELD_RENDERERS``, which must cover
every ``FieldType``.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from formdesk.schemas.field import (
    BaseField,
    DropdownField,
    FieldType,
    HeaderField,
)
from formdesk.schemas.submission import RenderedField

REDACTED = "[hidden]"

Renderer = Callable[[BaseField, Any], Tuple[Any, Dict[str, Any]]]


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def _render_text(field: BaseField, value: Any) -> Tuple[Any, Dict[str, Any]]:
    return ("" if value is None else value), {}


def _render_number(field: BaseField, value: Any) -> Tuple[Any, Dict[str, Any]]:
    return (None if is_empty(value) else value), {}


def _render_dropdown(field: DropdownField, value: Any) -> Tuple[Any, Dict[str, Any]]:
    options = [o.model_dump() for o in field.options]
    return ("" if value is None else value), {"options": options}


def _render_file(field: BaseField, value: Any) -> Tuple[Any, Dict[str, Any]]:
    return (None if is_empty(value) else value), {}


def _render_image(field: BaseField, value: Any) -> Tuple[Any, Dict[str, Any]]:
    return (None if is_empty(value) else value), {"accept": "image/*"}


def _render_boolean(field: BaseField, value: Any) -> Tuple[Any, Dict[str, Any]]:
    return (value is True or value == "true"), {}


def _render_header(field: HeaderField, value: Any) -> Tuple[Any, Dict[str, Any]]:
    return None, {"level": field.header_level, "description": field.description}


def _render_separator(field: BaseField, value: Any) -> Tuple[Any, Dict[str, Any]]:
    return None, {}


FIELD_RENDERERS: Dict[FieldType, Renderer] = {
    FieldType.TEXT: _render_text,
    FieldType.NUMBER: _render_number,
    FieldType.TEXTAREA: _render_text,
    FieldType.DROPDOWN: _render_dropdown,
    FieldType.FILE: _render_file,
    FieldType.IMAGE: _render_image,
    FieldType.BOOLEAN: _render_boolean,
    FieldType.HEADER: _render_header,
    FieldType.SEPARATOR: _render_separator,
}

_unhandled = set(FieldType) - set(FIELD_RENDERERS)
if _unhandled:
    raise RuntimeError(f"No renderer for: {sorted(t.value for t in _unhandled)}")


def render_field(
    field: BaseField,
    form_data: Dict[str, Any],
    *,
    completed: bool,
    can_view_sensitive: bool = True,
) -> RenderedField:
    raw = form_data.get(field.id) if field.holds_value else None
    value, extras = FIELD_RENDERERS[field.field_type](field, raw)
    answered = field.holds_value and not is_empty(raw)

    redacted = field.sensitive and not can_view_sensitive
    if redacted:
        value = REDACTED

    return RenderedField(
        id=field.id,
        label=field.label,
        type=field.field_type.value,
        value=value,
        editable=field.holds_value and not completed,
        visible=True,
        required=field.required,
        sensitive=field.sensitive,
        redacted=redacted,
        answered=answered,
        extras=extras,
    )


def build_render_plan(
    fields: List[BaseField],
    form_data: Optional[Dict[str, Any]],
    *,
    completed: bool,
    can_view_sensitive: bool = True,
) -> List[RenderedField]:
    """Render every field in template order."""
    data = form_data or {}
    return [
        render_field(f, data, completed=completed, can_view_sensitive=can_view_sensitive)
        for f in fields
    ]


def missing_required_fields(fields: List[BaseField], form_data: Dict[str, Any]) -> List[str]:
    """Labels of required input fields that have no value."""
    return [
        f.label
        for f in fields
        if f.required and f.holds_value and is_empty(form_data.get(f.id))
    ]


def sanitize_form_data(fields: List[BaseField], form_data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only keys that belong to input fields of the template."""
    input_ids = {f.id for f in fields if f.holds_value}
    return {k: v for k, v in form_data.items() if k in input_ids}


def redact_form_data(
    fields: List[BaseField],
    form_data: Dict[str, Any],
    can_view_sensitive: bool,
) -> Dict[str, Any]:
    """Replace sensitive values for viewers without full access."""
    if can_view_sensitive:
        return dict(form_data)
    sensitive_ids = {f.id for f in fields if f.sensitive}
    return {
        k: (REDACTED if k in sensitive_ids else v)
        for k, v in form_data.items()
    }


def percent_complete(fields: List[BaseField], form_data: Dict[str, Any]) -> float:
    inputs = [f for f in fields if f.holds_value]
    if not inputs:
        return 0.0
    answered = sum(1 for f in inputs if not is_empty(form_data.get(f.id)))
    return round(answered / len(inputs) * 100, 1)
