"""Async client for the FormDesk API."""

from formdesk.client.api import ApiError, FormDeskClient
from formdesk.client.form_session import FormSession, SubmissionLocked
from formdesk.client.session import SessionContext
from formdesk.client.template_draft import TemplateDraft

__all__ = [
    "ApiError",
    "FormDeskClient",
    "FormSession",
    "SubmissionLocked",
    "SessionContext",
    "TemplateDraft",
]
