"""FastAPI application entry point."""

import os

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from formdesk.config import get_settings
from formdesk.logging import RequestIdMiddleware, setup_logging
from formdesk.routers import (
    assignments,
    auth,
    changes,
    invites,
    profile,
    submissions,
    templates,
    uploads,
    users,
)
from formdesk.storage import MOUNT_PATH

settings = get_settings()
setup_logging(settings.log_level)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="FormDesk",
    description="Dynamic forms with role-based review, assignments and autosave",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(profile.router, prefix="/api/profile", tags=["Profile"])
app.include_router(templates.router, prefix="/api/templates", tags=["Templates"])
app.include_router(submissions.router, prefix="/api/submissions", tags=["Submissions"])
app.include_router(assignments.router, prefix="/api/assignments", tags=["Assignments"])
app.include_router(users.router, prefix="/api/users", tags=["Accounts"])
app.include_router(invites.router, prefix="/api/invites", tags=["Invites"])
app.include_router(uploads.router, prefix="/api/uploads", tags=["Uploads"])
app.include_router(changes.router, prefix="/api", tags=["Change Feed"])

# Ensure storage directory exists
os.makedirs(settings.upload_dir, exist_ok=True)

# Uploaded files are public by URL
app.mount(MOUNT_PATH, StaticFiles(directory=settings.upload_dir), name="files")

logger.info("app_started", database=settings.database_url.split(":", 1)[0])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "formdesk-backend"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "FormDesk API",
        "docs": "/docs",
        "health": "/health",
    }
