"""Submission Registry: in-memory store of submissions and their bound files.

Invariants:
    - Ids are generated here (uuid4), never supplied by clients, never reused
    - bound_file moves None → filename exactly once; a second bind is rejected
    - list_uploaded() returns only records with a bound file, in insertion order
    - bind() on an unknown id raises and never creates a record

Design Decisions:
    - In-memory dict, not DB/Redis: single-process uvicorn, storage is ephemeral
      (ADR: durability out of scope)
    - Explicit object owned by the app instead of a module-level dict: constructed
      once at startup, handed to routes through a dependency
    - No locks: create/bind never await, so each mutation is atomic on the event loop
"""

import uuid
from dataclasses import dataclass

from intake.core.domain_types import SubmissionId, NAME_MAX_LENGTH, HEIGHT_MAX
from intake.core.errors import (
    SubmissionAlreadyBoundError,
    SubmissionNotFoundError,
    SubmissionValidationError,
)


@dataclass
class SubmissionRecord:
    """One pending or completed submission."""

    id: SubmissionId
    name: str
    height: int | None = None
    bound_file: str | None = None

    @property
    def is_bound(self) -> bool:
        return self.bound_file is not None


def check_submission_fields(name: object, height: object) -> None:
    """Raise SubmissionValidationError if name/height break the metadata rules."""
    if not isinstance(name, str) or not 1 <= len(name) <= NAME_MAX_LENGTH:
        raise SubmissionValidationError(
            f"name must be a string of 1-{NAME_MAX_LENGTH} characters", "name",
        )
    if height is None:
        return
    # bool is an int subclass
    if isinstance(height, bool) or not isinstance(height, int):
        raise SubmissionValidationError("height must be an integer", "height")
    if not 0 < height <= HEIGHT_MAX:
        raise SubmissionValidationError(
            f"height must be between 1 and {HEIGHT_MAX}", "height",
        )


class SubmissionRegistry:
    """Keyed store of SubmissionRecord: pure, no IO."""

    def __init__(self) -> None:
        self._records: dict[SubmissionId, SubmissionRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def create(self, name: str, height: int | None = None) -> SubmissionId:
        check_submission_fields(name, height)
        submission_id = SubmissionId(uuid.uuid4())
        while submission_id in self._records:
            submission_id = SubmissionId(uuid.uuid4())
        self._records[submission_id] = SubmissionRecord(
            id=submission_id, name=name, height=height,
        )
        return submission_id

    def exists(self, submission_id: SubmissionId) -> bool:
        return submission_id in self._records

    def get(self, submission_id: SubmissionId) -> SubmissionRecord:
        record = self._records.get(submission_id)
        if record is None:
            raise SubmissionNotFoundError(str(submission_id))
        return record

    def is_bound(self, submission_id: SubmissionId) -> bool:
        record = self._records.get(submission_id)
        return record is not None and record.is_bound

    def bind(self, submission_id: SubmissionId, filename: str) -> None:
        """Attach filename to the submission. First bind wins; later binds raise."""
        record = self.get(submission_id)
        if record.is_bound:
            raise SubmissionAlreadyBoundError(str(submission_id))
        record.bound_file = filename

    def list_uploaded(self) -> list[SubmissionRecord]:
        return [r for r in self._records.values() if r.is_bound]
