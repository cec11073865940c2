"""Service layer for business logic."""

from formdesk.services.auth import AuthService
from formdesk.services.template import TemplateService
from formdesk.services.submission import SubmissionService
from formdesk.services.notes import NoteService
from formdesk.services.access import AccessService
from formdesk.services.assignment import AssignmentService
from formdesk.services.invite import InviteService

__all__ = [
    "AuthService",
    "TemplateService",
    "SubmissionService",
    "NoteService",
    "AccessService",
    "AssignmentService",
    "InviteService",
]
