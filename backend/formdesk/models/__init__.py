"""SQLAlchemy models for FormDesk."""

from formdesk.models.user import User, UserRole, AccessLevel
from formdesk.models.template import FormTemplate
from formdesk.models.submission import Submission, SubmissionStatus
from formdesk.models.note import AdminNote
from formdesk.models.assignment import AdminAssignment

__all__ = [
    "User",
    "UserRole",
    "AccessLevel",
    "FormTemplate",
    "Submission",
    "SubmissionStatus",
    "AdminNote",
    "AdminAssignment",
]
