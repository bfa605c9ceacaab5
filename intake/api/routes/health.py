"""Health Probe: liveness endpoint for container orchestration.

Invariants:
    - GET /health always returns 200 if the process is up
    - Reports how many submissions the in-memory registry holds

Design Decisions:
    - No readiness probe: there is no external dependency to wait for
"""

from fastapi import APIRouter, Depends, status

from intake import __version__
from intake.api.dependencies import get_registry
from intake.core.submission_registry import SubmissionRegistry

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(registry: SubmissionRegistry = Depends(get_registry)):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "intake-api",
        "version": __version__,
        "submissions": len(registry),
    }
