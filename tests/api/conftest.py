"""API test fixtures: FastAPI test client with a fresh registry per test.

Invariants:
    - Every test gets its own SubmissionRegistry and UploadStreamValidator
    - get_registry / get_upload_validator / get_app_settings overridden on the shared app

Design Decisions:
    - httpx AsyncClient over ASGITransport: exercises the real middleware stack
      and streams request bodies the way uvicorn does
"""

import pytest
from httpx import ASGITransport, AsyncClient

from intake.api.dependencies import get_app_settings, get_registry, get_upload_validator
from intake.config import Settings
from intake.core.submission_registry import SubmissionRegistry
from intake.core.upload_tracker import PlaceholderNameGenerator
from intake.main import app
from intake.services.upload_validator import UploadStreamValidator


@pytest.fixture
def registry():
    return SubmissionRegistry()


@pytest.fixture
def upload_validator(registry):
    return UploadStreamValidator(registry, names=PlaceholderNameGenerator())


@pytest.fixture
def settings():
    return Settings(max_upload_bytes=64 * 1024)


@pytest.fixture
async def client(registry, upload_validator, settings):
    """FastAPI test client with registry/validator/settings overridden."""
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_upload_validator] = lambda: upload_validator
    app.dependency_overrides[get_app_settings] = lambda: settings

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def upload_id(client):
    """Register a submission and return its upload id."""
    res = await client.post("/submit", json={"name": "Alice", "height": 170})
    assert res.status_code == 200
    return res.json()["uploadId"]
