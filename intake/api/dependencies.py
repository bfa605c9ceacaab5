"""Route Dependencies: hand the app-owned settings, registry and validator to route handlers.

Invariants:
    - One Settings, one SubmissionRegistry and one UploadStreamValidator per app
      instance, created in main.py at startup; the validator binds into that registry
    - Routes never construct registries or read the environment themselves

Design Decisions:
    - Read from app.state through Depends(): tests swap instances with
      app.dependency_overrides, the same way database sessions are overridden
"""

from fastapi import Request

from intake.config import Settings
from intake.core.submission_registry import SubmissionRegistry
from intake.services.upload_validator import UploadStreamValidator


def get_registry(request: Request) -> SubmissionRegistry:
    return request.app.state.registry


def get_upload_validator(request: Request) -> UploadStreamValidator:
    return request.app.state.upload_validator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
