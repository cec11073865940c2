"""
Field schema: the shape of one form input and of a template's field list.

Fields are a closed tagged union discriminated by ``type``. Each member of
``FieldType`` has exactly one model here; ``FIELD_MODELS`` is checked for
completeness at import time so adding a type without a model fails fast.
"""

import re
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class FieldType(str, Enum):
    """Field types a template may contain."""
    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    DROPDOWN = "dropdown"
    FILE = "file"
    IMAGE = "image"
    BOOLEAN = "boolean"
    HEADER = "header"
    SEPARATOR = "separator"


# Types that only structure the form and never hold a value
LAYOUT_TYPES = frozenset({FieldType.HEADER, FieldType.SEPARATOR})


def slugify(label: str) -> str:
    """Option value for a label: lower-cased, whitespace runs to underscores."""
    return re.sub(r"\s+", "_", label.lower())


class FieldOption(BaseModel):
    """One dropdown choice."""
    label: str
    value: str


class BaseField(BaseModel):
    """Attributes shared by every field type."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Stable id, join key into form_data")
    label: str = Field("", description="Display text, may span lines")
    placeholder: Optional[str] = None
    required: bool = False
    sensitive: bool = Field(False, description="Hidden from admins with partial access")

    @property
    def field_type(self) -> FieldType:
        return FieldType(self.type)

    @property
    def holds_value(self) -> bool:
        return self.field_type not in LAYOUT_TYPES


class TextField(BaseField):
    type: Literal["text"] = "text"


class NumberField(BaseField):
    type: Literal["number"] = "number"


class TextareaField(BaseField):
    type: Literal["textarea"] = "textarea"


class DropdownField(BaseField):
    type: Literal["dropdown"] = "dropdown"
    options: List[FieldOption] = Field(
        default_factory=lambda: [FieldOption(label="Option 1", value="option1")]
    )

    @model_validator(mode="after")
    def _at_least_one_option(self) -> "DropdownField":
        if not self.options:
            raise ValueError("Dropdown fields need at least one option")
        return self


class FileField(BaseField):
    type: Literal["file"] = "file"


class ImageField(BaseField):
    type: Literal["image"] = "image"


class BooleanField(BaseField):
    type: Literal["boolean"] = "boolean"


class HeaderField(BaseField):
    type: Literal["header"] = "header"
    header_level: int = Field(2, ge=1, le=6, alias="headerLevel")
    description: Optional[str] = None

    @model_validator(mode="after")
    def _never_required(self) -> "HeaderField":
        self.required = False
        return self


class SeparatorField(BaseField):
    type: Literal["separator"] = "separator"

    @model_validator(mode="after")
    def _never_required(self) -> "SeparatorField":
        self.required = False
        return self


FormField = Annotated[
    Union[
        TextField,
        NumberField,
        TextareaField,
        DropdownField,
        FileField,
        ImageField,
        BooleanField,
        HeaderField,
        SeparatorField,
    ],
    Field(discriminator="type"),
]

FIELD_MODELS: Dict[FieldType, Type[BaseField]] = {
    FieldType.TEXT: TextField,
    FieldType.NUMBER: NumberField,
    FieldType.TEXTAREA: TextareaField,
    FieldType.DROPDOWN: DropdownField,
    FieldType.FILE: FileField,
    FieldType.IMAGE: ImageField,
    FieldType.BOOLEAN: BooleanField,
    FieldType.HEADER: HeaderField,
    FieldType.SEPARATOR: SeparatorField,
}

_missing = set(FieldType) - set(FIELD_MODELS)
if _missing:
    raise RuntimeError(f"No field model for: {sorted(t.value for t in _missing)}")

_field_list_adapter = TypeAdapter(List[FormField])


def parse_fields(raw: List[dict]) -> List[BaseField]:
    """Validate a stored or submitted field list."""
    return _field_list_adapter.validate_python(raw or [])


def dump_fields(fields: List[BaseField]) -> List[dict]:
    """Serialize fields the way they are stored in form_templates.fields."""
    return [f.model_dump(by_alias=True, exclude_none=True) for f in fields]


def ensure_unique_ids(fields: List[BaseField]) -> List[BaseField]:
    seen = set()
    for f in fields:
        if f.id in seen:
            raise ValueError(f"Duplicate field id: {f.id}")
        seen.add(f.id)
    return fields
