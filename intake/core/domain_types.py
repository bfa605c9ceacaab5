"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - SubmissionId wraps UUID: never use bare UUID in domain logic
    - All upload states and failure kinds encoded as Enums: no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON log fields without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SubmissionId = NewType("SubmissionId", UUID)


# ─── Constants ───────────────────────────────────────────────────

NAME_MAX_LENGTH = 100
HEIGHT_MAX = 500
UPLOAD_FIELD_NAME = "file"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


# ─── Enums ───────────────────────────────────────────────────────

class UploadState(str, Enum):
    """Per-stream lifecycle. SUCCEEDED and FAILED are terminal."""
    IDLE = "idle"
    RECEIVING = "receiving"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class UploadFailure(str, Enum):
    """Why an upload stream was rejected."""
    UNKNOWN_ID = "unknown_id"
    INVALID_PAYLOAD = "invalid_payload"
    MALFORMED_STREAM = "malformed_stream"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    ALREADY_BOUND = "already_bound"
