"""Submission Schemas: Pydantic models with field-level validation for API boundaries.

Invariants:
    - SubmissionCreate.name: 1-100 chars, must be a JSON string
    - SubmissionCreate.height: optional integer, 1-500
    - Unknown keys in the submit payload are rejected
    - Response models use the public wire names (uploadId, file)

Design Decisions:
    - StrictStr for name, StrictInt for height: no cross-type coercion
      (a number is not a name, true is not a height)
    - from_record() keeps the registry dataclass out of the route handlers
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from intake.core.domain_types import NAME_MAX_LENGTH, HEIGHT_MAX
from intake.core.submission_registry import SubmissionRecord


class SubmissionCreate(BaseModel):
    """Submit form: validates name length and height range."""
    model_config = ConfigDict(extra="forbid")

    name: StrictStr = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    height: StrictInt | None = Field(None, gt=0, le=HEIGHT_MAX)


class SubmissionCreated(BaseModel):
    """Submit response: the id the client uploads against."""
    uploadId: UUID


class SubmissionView(BaseModel):
    """One uploaded submission as listed by GET /data."""
    id: UUID
    name: str
    height: int | None = None
    file: str

    @classmethod
    def from_record(cls, record: SubmissionRecord) -> "SubmissionView":
        return cls(
            id=record.id, name=record.name,
            height=record.height, file=record.bound_file,
        )


class UploadResult(BaseModel):
    """Upload response."""
    result: bool = True
