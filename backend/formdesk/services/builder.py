"""
Form builder operations on an ordered field list.

Every function is pure: it takes a list of fields and returns a new list,
leaving its input untouched. Templates are persisted only when the author
saves, so these operations never touch the database.
"""

import uuid
from typing import Any, Dict, List, Optional

from formdesk.schemas.field import (
    FIELD_MODELS,
    LAYOUT_TYPES,
    BaseField,
    DropdownField,
    FieldOption,
    FieldType,
    slugify,
)


class BuilderError(ValueError):
    """An edit that would break a field list invariant."""


def new_field() -> BaseField:
    return FIELD_MODELS[FieldType.TEXT](
        id=str(uuid.uuid4()),
        label="New Field",
        placeholder="",
        required=False,
    )


def add_field(fields: List[BaseField], field: Optional[BaseField] = None) -> List[BaseField]:
    field = field or new_field()
    if any(f.id == field.id for f in fields):
        raise BuilderError(f"Duplicate field id: {field.id}")
    return [*fields, field]


def remove_field(fields: List[BaseField], field_id: str) -> List[BaseField]:
    return [f for f in fields if f.id != field_id]


def _index_of(fields: List[BaseField], field_id: str) -> int:
    for i, f in enumerate(fields):
        if f.id == field_id:
            return i
    raise BuilderError(f"Unknown field id: {field_id}")


def update_field(
    fields: List[BaseField],
    field_id: str,
    updates: Dict[str, Any],
) -> List[BaseField]:
    """
    Apply attribute updates to one field.

    Changing the type rebuilds the field as the new variant: switching to
    dropdown seeds a first option when there is none, switching away drops
    options, and layout types are never required.
    """
    if "id" in updates and updates["id"] != field_id:
        raise BuilderError("Field id cannot be changed")

    idx = _index_of(fields, field_id)
    current = fields[idx]
    data = current.model_dump(by_alias=False)
    data.update({k: v for k, v in updates.items() if k != "id"})
    if "headerLevel" in data:
        data["header_level"] = data.pop("headerLevel")

    new_type = FieldType(data.get("type", current.type))
    if new_type != FieldType.DROPDOWN:
        data.pop("options", None)
    elif not data.get("options"):
        data["options"] = [{"label": "Option 1", "value": "option1"}]
    if new_type in LAYOUT_TYPES:
        data["required"] = False

    model = FIELD_MODELS[new_type]
    known = set(model.model_fields)
    updated = model(**{k: v for k, v in data.items() if k in known})

    result = list(fields)
    result[idx] = updated
    return result


def move_field(fields: List[BaseField], index: int, direction: str) -> List[BaseField]:
    """Swap a field with its neighbour; no-op at either boundary."""
    if direction not in ("up", "down"):
        raise BuilderError(f"Unknown direction: {direction}")
    if index < 0 or index >= len(fields):
        raise BuilderError(f"Index out of range: {index}")
    if (direction == "up" and index == 0) or (direction == "down" and index == len(fields) - 1):
        return list(fields)

    target = index - 1 if direction == "up" else index + 1
    result = list(fields)
    result[index], result[target] = result[target], result[index]
    return result


def _dropdown(fields: List[BaseField], field_id: str) -> DropdownField:
    field = fields[_index_of(fields, field_id)]
    if not isinstance(field, DropdownField):
        raise BuilderError(f"Field {field_id} is not a dropdown")
    return field


def add_option(fields: List[BaseField], field_id: str) -> List[BaseField]:
    field = _dropdown(fields, field_id)
    n = len(field.options) + 1
    options = [*field.options, FieldOption(label=f"Option {n}", value=f"option{n}")]
    return _replace(fields, field.model_copy(update={"options": options}))


def update_option(
    fields: List[BaseField],
    field_id: str,
    option_index: int,
    label: str,
) -> List[BaseField]:
    field = _dropdown(fields, field_id)
    if option_index < 0 or option_index >= len(field.options):
        raise BuilderError(f"Option index out of range: {option_index}")
    options = list(field.options)
    options[option_index] = FieldOption(label=label, value=slugify(label))
    return _replace(fields, field.model_copy(update={"options": options}))


def remove_option(fields: List[BaseField], field_id: str, option_index: int) -> List[BaseField]:
    field = _dropdown(fields, field_id)
    if len(field.options) == 1:
        raise BuilderError("A dropdown needs at least one option")
    if option_index < 0 or option_index >= len(field.options):
        raise BuilderError(f"Option index out of range: {option_index}")
    options = [o for i, o in enumerate(field.options) if i != option_index]
    return _replace(fields, field.model_copy(update={"options": options}))


def load_predefined(template_fields: List[BaseField]) -> List[BaseField]:
    """Fields copied from a predefined template; ids are kept."""
    return [f.model_copy(deep=True) for f in template_fields]


def _replace(fields: List[BaseField], field: BaseField) -> List[BaseField]:
    result = list(fields)
    result[_index_of(fields, field.id)] = field
    return result
