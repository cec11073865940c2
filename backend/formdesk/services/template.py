"""Template service for builder-authored form templates."""

from typing import Optional, List

import structlog
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from formdesk.models.template import FormTemplate
from formdesk.models.user import User
from formdesk.schemas.field import BaseField, dump_fields, parse_fields
from formdesk.schemas.template import TemplateCreate, TemplateUpdate, TemplateListResponse
from formdesk.services.access import AccessService
from formdesk.services.change_feed import feed

logger = structlog.get_logger(__name__)


class TemplateService:
    """Service for template management."""

    @staticmethod
    def get_template(db: Session, template_id: int) -> Optional[FormTemplate]:
        """Get a template by ID."""
        return db.query(FormTemplate).filter(FormTemplate.id == template_id).first()

    @staticmethod
    def get_template_or_404(db: Session, template_id: int) -> FormTemplate:
        template = TemplateService.get_template(db, template_id)
        if not template:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Template not found"
            )
        return template

    @staticmethod
    def get_templates(
        db: Session,
        skip: int = 0,
        limit: int = 100,
        predefined_only: bool = False
    ) -> List[FormTemplate]:
        """Get templates, newest first."""
        query = db.query(FormTemplate)
        if predefined_only:
            query = query.filter(FormTemplate.is_predefined == True)
        return query.order_by(FormTemplate.created_at.desc(), FormTemplate.id.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def fields_of(template: FormTemplate) -> List[BaseField]:
        """Typed field list of a stored template."""
        return parse_fields(template.fields)

    @staticmethod
    def to_list_item(template: FormTemplate) -> TemplateListResponse:
        return TemplateListResponse(
            id=template.id,
            name=template.name,
            is_predefined=template.is_predefined,
            field_count=len(template.fields or []),
            created_at=template.created_at,
        )

    @staticmethod
    def create_template(
        db: Session,
        template_data: TemplateCreate,
        author: User
    ) -> FormTemplate:
        """Persist a template saved from the builder."""
        db_template = FormTemplate(
            name=template_data.name,
            fields=dump_fields(template_data.fields),
            is_predefined=template_data.is_predefined,
            created_by=author.id,
        )
        db.add(db_template)
        db.commit()
        db.refresh(db_template)

        logger.info("template_created", template_id=db_template.id, author_id=author.id)
        return db_template

    @staticmethod
    def update_template(
        db: Session,
        template_id: int,
        template_data: TemplateUpdate
    ) -> FormTemplate:
        """Update a template. Last write wins."""
        db_template = TemplateService.get_template_or_404(db, template_id)

        update_data = template_data.model_dump(exclude_unset=True, exclude={"fields"})
        if template_data.fields is not None:
            update_data["fields"] = dump_fields(template_data.fields)

        for key, value in update_data.items():
            setattr(db_template, key, value)

        db.commit()
        db.refresh(db_template)

        logger.info("template_updated", template_id=template_id, keys=sorted(update_data))
        return db_template

    @staticmethod
    def delete_template(db: Session, template_id: int) -> int:
        """
        Delete a template together with every submission made from it.

        Notes on those submissions go with them. Returns the number of
        submissions removed.
        """
        db_template = TemplateService.get_template_or_404(db, template_id)
        removed = [
            (s.id, AccessService.audience_for(db, s)) for s in db_template.submissions
        ]

        db.delete(db_template)
        db.commit()

        for submission_id, audience in removed:
            feed.publish("submissions", "DELETE", submission_id, submission_id, audience=audience)

        logger.info(
            "template_deleted",
            template_id=template_id,
            submissions_removed=len(removed),
        )
        return len(removed)
