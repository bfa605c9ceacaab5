"""Upload Tracker: pure state machine deciding the outcome of one multipart stream.

Invariants:
    - IDLE → RECEIVING → {SUCCEEDED, FAILED}; terminal states never change
    - Exactly one terminal outcome per stream
    - A part is valid only with the required field name AND a non-empty filename
    - One invalid part fails the whole stream, but later parts are still observed
    - SUCCEEDED only on close, with content seen, no invalid part, record present
      and not yet bound

Design Decisions:
    - Decision is a function of the parts observed plus the terminal signal
      (close/abort): no callbacks, no IO, no async
    - Placeholder names come from an injected NameGenerator so tests can pin them
    - Several valid parts: the last filename wins
"""

import itertools
from dataclasses import dataclass, field
from typing import Protocol

from intake.core.domain_types import UploadFailure, UploadState, UPLOAD_FIELD_NAME


@dataclass(frozen=True)
class UploadPart:
    """One multipart segment as seen by the tracker (body already drained)."""
    field_name: str | None
    filename: str | None = None


@dataclass(frozen=True)
class UploadOutcome:
    """Terminal result of one upload stream."""
    state: UploadState
    filename: str | None = None
    failure: UploadFailure | None = None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == UploadState.SUCCEEDED

    @classmethod
    def bound(cls, filename: str) -> "UploadOutcome":
        return cls(UploadState.SUCCEEDED, filename=filename)

    @classmethod
    def failed(cls, failure: UploadFailure, reason: str | None = None) -> "UploadOutcome":
        return cls(UploadState.FAILED, failure=failure, reason=reason)


class NameGenerator(Protocol):
    """Source of unique local filenames for parts that arrive without one."""
    def next_name(self) -> str: ...


class PlaceholderNameGenerator:
    """uploaded-file-1.file, uploaded-file-2.file, ... unique per instance."""

    def __init__(
        self, prefix: str = "uploaded-file-", suffix: str = ".file", start: int = 1,
    ) -> None:
        self.prefix = prefix
        self.suffix = suffix
        self._counter = itertools.count(start)

    def next_name(self) -> str:
        return f"{self.prefix}{next(self._counter)}{self.suffix}"


@dataclass
class UploadTracker:
    """Per-stream state: pure dataclass, no IO."""

    names: NameGenerator
    required_field: str = UPLOAD_FIELD_NAME

    state: UploadState = UploadState.IDLE
    has_content: bool = False
    failed: bool = False
    candidate_filename: str | None = None
    part_count: int = 0
    rejected_parts: list[UploadPart] = field(default_factory=list)
    outcome: UploadOutcome | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (UploadState.SUCCEEDED, UploadState.FAILED)

    def is_valid_part(self, part: UploadPart) -> bool:
        return part.field_name == self.required_field and bool(part.filename)

    def open(self, record_exists: bool, already_bound: bool = False) -> UploadOutcome | None:
        """Start receiving. Returns the outcome if the stream is rejected up front."""
        if self.state != UploadState.IDLE:
            return self.outcome
        failure = _check_record(record_exists, already_bound)
        if failure:
            return self._finish(UploadOutcome.failed(failure))
        self.state = UploadState.RECEIVING
        return None

    def observe(self, part: UploadPart) -> None:
        if self.state != UploadState.RECEIVING:
            return
        self.has_content = True
        self.part_count += 1
        if self.is_valid_part(part):
            self.candidate_filename = part.filename
        else:
            self.failed = True
            self.rejected_parts.append(part)

    def abort(
        self, reason: str, failure: UploadFailure = UploadFailure.MALFORMED_STREAM,
    ) -> UploadOutcome:
        """Transport or framing error (or byte limit hit): fail immediately."""
        if self.is_terminal:
            return self.outcome
        return self._finish(UploadOutcome.failed(failure, reason))

    def close(self, record_exists: bool, already_bound: bool = False) -> UploadOutcome:
        """End of input reached cleanly: decide the outcome."""
        if self.is_terminal:
            return self.outcome
        failure = _check_record(record_exists, already_bound)
        if failure:
            return self._finish(UploadOutcome.failed(failure))
        if self.failed or not self.has_content:
            return self._finish(UploadOutcome.failed(
                UploadFailure.INVALID_PAYLOAD,
                "no parts" if not self.has_content else "invalid part",
            ))
        filename = self.candidate_filename or self.names.next_name()
        return self._finish(UploadOutcome.bound(filename))

    def _finish(self, outcome: UploadOutcome) -> UploadOutcome:
        self.state = outcome.state
        self.outcome = outcome
        return outcome


def _check_record(record_exists: bool, already_bound: bool) -> UploadFailure | None:
    if not record_exists:
        return UploadFailure.UNKNOWN_ID
    if already_bound:
        return UploadFailure.ALREADY_BOUND
    return None
