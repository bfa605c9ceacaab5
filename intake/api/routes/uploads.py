"""Uploads: phase two, streaming a multipart body bound to a registered submission.

Invariants:
    - upload_id must be a UUID (FastAPI path validation → 400 before the core runs)
    - Only multipart/form-data is accepted (415 otherwise)
    - Declared Content-Length above the limit is rejected before the body is read
    - Every non-success UploadOutcome maps to exactly one IntakeError

Design Decisions:
    - Body read through request.stream(): parts are parsed as chunks arrive,
      the file content itself is never buffered
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from intake.api.dependencies import get_app_settings, get_upload_validator
from intake.config import Settings
from intake.core.domain_types import SubmissionId, UploadFailure
from intake.core.errors import (
    ErrorContext,
    IntakeError,
    InvalidPayloadError,
    MalformedStreamError,
    PayloadTooLargeError,
    SubmissionAlreadyBoundError,
    UnknownUploadIdError,
)
from intake.core.upload_tracker import UploadOutcome
from intake.schemas.submission import UploadResult
from intake.services.multipart_parts import boundary_from_content_type, iter_multipart_parts
from intake.services.upload_validator import UploadStreamValidator

logger = logging.getLogger(__name__)
router = APIRouter(tags=["uploads"])


def _check_declared_length(request: Request, max_bytes: int) -> None:
    declared = request.headers.get("content-length")
    if declared is None:
        return
    try:
        length = int(declared)
    except ValueError:
        raise MalformedStreamError("Invalid Content-Length header")
    if length > max_bytes:
        raise PayloadTooLargeError(max_bytes)


def outcome_error(
    outcome: UploadOutcome, submission_id: str, max_bytes: int,
) -> IntakeError:
    """Map a failed outcome to the error the client receives."""
    context = ErrorContext(submission_id=submission_id)
    if outcome.failure == UploadFailure.UNKNOWN_ID:
        return UnknownUploadIdError(submission_id, context)
    if outcome.failure == UploadFailure.ALREADY_BOUND:
        return SubmissionAlreadyBoundError(submission_id, context)
    if outcome.failure == UploadFailure.PAYLOAD_TOO_LARGE:
        return PayloadTooLargeError(max_bytes, context)
    if outcome.failure == UploadFailure.MALFORMED_STREAM:
        return MalformedStreamError(outcome.reason or "Malformed multipart body", context)
    return InvalidPayloadError(context)


@router.post("/upload/{upload_id}", response_model=UploadResult)
async def upload(
    upload_id: UUID,
    request: Request,
    validator: UploadStreamValidator = Depends(get_upload_validator),
    settings: Settings = Depends(get_app_settings),
):
    """Accept one file for a registered submission."""
    boundary = boundary_from_content_type(request.headers.get("content-type"))
    _check_declared_length(request, settings.max_upload_bytes)

    parts = iter_multipart_parts(
        request.stream(), boundary, settings.max_upload_bytes,
    )
    outcome = await validator.consume(SubmissionId(upload_id), parts)
    if not outcome.succeeded:
        raise outcome_error(outcome, str(upload_id), settings.max_upload_bytes)
    return UploadResult(result=True)
