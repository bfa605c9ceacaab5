"""Submissions: phase one of the two-phase submission, plus the uploaded listing.

Invariants:
    - POST /submit payload validated by SubmissionCreate before reaching the handler
    - GET /data lists only submissions with a bound file

Design Decisions:
    - Paths kept at the root (/submit, /data) for compatibility with existing clients
"""

import logging

from fastapi import APIRouter, Depends

from intake.api.dependencies import get_registry
from intake.core.submission_registry import SubmissionRegistry
from intake.schemas.submission import (
    SubmissionCreate,
    SubmissionCreated,
    SubmissionView,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["submissions"])


@router.get("/data", response_model=list[SubmissionView])
async def list_uploaded(registry: SubmissionRegistry = Depends(get_registry)):
    """List submissions whose file upload completed."""
    return [SubmissionView.from_record(r) for r in registry.list_uploaded()]


@router.post("/submit", response_model=SubmissionCreated)
async def submit(
    body: SubmissionCreate, registry: SubmissionRegistry = Depends(get_registry),
):
    """Register metadata for a pending upload."""
    submission_id = registry.create(body.name, body.height)
    logger.info(
        "Submission registered",
        extra={"submission_id": str(submission_id)},
    )
    return SubmissionCreated(uploadId=submission_id)
