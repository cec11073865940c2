"""
Template editing for super admins.

A ``TemplateDraft`` holds the builder state for one template: its name,
whether it is predefined, and the ordered field list. Edits go through the
builder operations and stay local until ``save`` posts the draft.
"""

from typing import Any, Dict, List, Optional

import structlog

from formdesk.client.api import FormDeskClient
from formdesk.schemas.field import BaseField, dump_fields, parse_fields
from formdesk.services import builder
from formdesk.services.builder import BuilderError

logger = structlog.get_logger(__name__)


class TemplateDraft:
    """Unsaved builder state; ``template_id`` is None until first saved."""

    def __init__(
        self,
        name: str = "",
        fields: Optional[List[BaseField]] = None,
        is_predefined: bool = False,
        template_id: Optional[int] = None,
    ):
        self.name = name
        self.fields: List[BaseField] = list(fields or [])
        self.is_predefined = is_predefined
        self.template_id = template_id

    @classmethod
    def from_template(cls, template: Dict[str, Any]) -> "TemplateDraft":
        """Draft for editing a template as returned by the API."""
        return cls(
            name=template["name"],
            fields=parse_fields(template["fields"]),
            is_predefined=template.get("is_predefined", False),
            template_id=template["id"],
        )

    @classmethod
    def from_predefined(cls, template: Dict[str, Any], name: str = "") -> "TemplateDraft":
        """New draft starting from a predefined template's fields."""
        fields = builder.load_predefined(parse_fields(template["fields"]))
        return cls(name=name or template["name"], fields=fields)

    def add_field(self, field: Optional[BaseField] = None) -> BaseField:
        self.fields = builder.add_field(self.fields, field)
        return self.fields[-1]

    def remove_field(self, field_id: str) -> None:
        self.fields = builder.remove_field(self.fields, field_id)

    def update_field(self, field_id: str, **updates: Any) -> None:
        self.fields = builder.update_field(self.fields, field_id, updates)

    def move_field(self, index: int, direction: str) -> None:
        self.fields = builder.move_field(self.fields, index, direction)

    def add_option(self, field_id: str) -> None:
        self.fields = builder.add_option(self.fields, field_id)

    def update_option(self, field_id: str, option_index: int, label: str) -> None:
        self.fields = builder.update_option(self.fields, field_id, option_index, label)

    def remove_option(self, field_id: str, option_index: int) -> None:
        self.fields = builder.remove_option(self.fields, field_id, option_index)

    def field(self, field_id: str) -> BaseField:
        for f in self.fields:
            if f.id == field_id:
                return f
        raise BuilderError(f"Unknown field id: {field_id}")

    def payload(self) -> Dict[str, Any]:
        if not self.name.strip():
            raise BuilderError("Form name is required")
        if not self.fields:
            raise BuilderError("A form needs at least one field")
        return {
            "name": self.name.strip(),
            "fields": dump_fields(self.fields),
            "is_predefined": self.is_predefined,
        }

    async def save(self, api: FormDeskClient) -> Dict[str, Any]:
        """Create the template on first save, update it afterwards."""
        body = self.payload()
        if self.template_id is None:
            saved = await api.create_template(body)
            self.template_id = saved["id"]
            logger.info("template_draft_created", template_id=self.template_id)
        else:
            saved = await api.update_template(self.template_id, body)
            logger.info("template_draft_updated", template_id=self.template_id)
        self.fields = parse_fields(saved["fields"])
        return saved
