"""Upload Stream Validator: drives UploadTracker over a part stream and binds on success.

Invariants:
    - Unknown or already-bound ids are rejected before the stream is read
    - Parts are consumed in arrival order until close or the first stream error
    - registry.bind() is called at most once, and only for a SUCCEEDED outcome
    - A failed upload never mutates the registry

Design Decisions:
    - Impureim sandwich: registry reads → pure tracker decisions → registry write
      (ADR: ExMA functional core, imperative shell)
    - Stream errors are returned as MALFORMED_STREAM outcomes, not raised: the
      caller maps every outcome to a response in one place
"""

import logging
from typing import AsyncIterable

from intake.core.domain_types import SubmissionId, UploadFailure, UPLOAD_FIELD_NAME
from intake.core.errors import (
    MalformedStreamError,
    PayloadTooLargeError,
    SubmissionAlreadyBoundError,
    SubmissionNotFoundError,
)
from intake.core.submission_registry import SubmissionRegistry
from intake.core.upload_tracker import (
    NameGenerator,
    PlaceholderNameGenerator,
    UploadOutcome,
    UploadPart,
    UploadTracker,
)

logger = logging.getLogger(__name__)


class UploadStreamValidator:
    """Decides whether one multipart stream is a valid single-file upload."""

    def __init__(
        self,
        registry: SubmissionRegistry,
        names: NameGenerator | None = None,
        field_name: str = UPLOAD_FIELD_NAME,
    ):
        self.registry = registry
        self.names = names or PlaceholderNameGenerator()
        self.field_name = field_name

    def new_tracker(self) -> UploadTracker:
        return UploadTracker(names=self.names, required_field=self.field_name)

    async def consume(
        self,
        submission_id: SubmissionId,
        parts: AsyncIterable[UploadPart],
        tracker: UploadTracker | None = None,
    ) -> UploadOutcome:
        tracker = tracker or self.new_tracker()
        rejected = tracker.open(
            self.registry.exists(submission_id),
            self.registry.is_bound(submission_id),
        )
        if rejected:
            # Body left unread: the ASGI server closes the connection instead
            # of reusing it, so no stale bytes reach the next request
            return self._log_outcome(submission_id, tracker, rejected)

        try:
            async for part in parts:
                tracker.observe(part)
        except MalformedStreamError as e:
            failure = (
                UploadFailure.PAYLOAD_TOO_LARGE
                if isinstance(e, PayloadTooLargeError)
                else UploadFailure.MALFORMED_STREAM
            )
            outcome = tracker.abort(e.message, failure)
            return self._log_outcome(submission_id, tracker, outcome)

        outcome = tracker.close(
            self.registry.exists(submission_id),
            self.registry.is_bound(submission_id),
        )
        if outcome.succeeded:
            outcome = self._bind(submission_id, outcome)
        return self._log_outcome(submission_id, tracker, outcome)

    def _bind(self, submission_id: SubmissionId, outcome: UploadOutcome) -> UploadOutcome:
        try:
            self.registry.bind(submission_id, outcome.filename)
        except SubmissionNotFoundError:
            return UploadOutcome.failed(UploadFailure.UNKNOWN_ID)
        except SubmissionAlreadyBoundError:
            return UploadOutcome.failed(UploadFailure.ALREADY_BOUND)
        return outcome

    def _log_outcome(
        self,
        submission_id: SubmissionId,
        tracker: UploadTracker,
        outcome: UploadOutcome,
    ) -> UploadOutcome:
        extra = {
            "submission_id": str(submission_id),
            "upload_outcome": (outcome.failure or outcome.state).value,
            "part_count": tracker.part_count,
        }
        if outcome.succeeded:
            logger.info(f"Upload bound: {outcome.filename}", extra=extra)
            return outcome

        message = f"Upload rejected ({outcome.failure.value}): {outcome.reason or '-'}"
        if tracker.rejected_parts:
            fields = ", ".join(
                f"{p.field_name or '<unnamed>'}/{p.filename or '<no filename>'}"
                for p in tracker.rejected_parts
            )
            message += f" [rejected parts: {fields}]"
        logger.warning(message, extra=extra)
        return outcome
