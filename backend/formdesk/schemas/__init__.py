"""Pydantic schemas for request/response validation."""

from formdesk.schemas.user import (
    UserCreate,
    UserResponse,
    UserLogin,
    ProfileUpdate,
    AccessLevelUpdate,
    Token,
    TokenData,
)
from formdesk.schemas.field import (
    FieldType,
    FieldOption,
    FormField,
    parse_fields,
    dump_fields,
)
from formdesk.schemas.template import (
    TemplateCreate,
    TemplateUpdate,
    TemplateResponse,
    TemplateListResponse,
)
from formdesk.schemas.submission import (
    FormDataPayload,
    SubmissionResponse,
    SubmissionListItem,
    SubmissionDetail,
    RenderedField,
    RenderPlan,
    NoteCreate,
    NoteResponse,
)
from formdesk.schemas.assignment import (
    AssignmentCreate,
    AssignmentResponse,
    InviteLinkResponse,
    InviteInfo,
    InviteAcceptResponse,
)

__all__ = [
    # User
    "UserCreate",
    "UserResponse",
    "UserLogin",
    "ProfileUpdate",
    "AccessLevelUpdate",
    "Token",
    "TokenData",
    # Field
    "FieldType",
    "FieldOption",
    "FormField",
    "parse_fields",
    "dump_fields",
    # Template
    "TemplateCreate",
    "TemplateUpdate",
    "TemplateResponse",
    "TemplateListResponse",
    # Submission
    "FormDataPayload",
    "SubmissionResponse",
    "SubmissionListItem",
    "SubmissionDetail",
    "RenderedField",
    "RenderPlan",
    "NoteCreate",
    "NoteResponse",
    # Assignment
    "AssignmentCreate",
    "AssignmentResponse",
    "InviteLinkResponse",
    "InviteInfo",
    "InviteAcceptResponse",
]
