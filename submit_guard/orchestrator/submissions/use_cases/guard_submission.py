# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""GuardSubmission use case implementation."""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from submit_guard.core.submissions.entities import RequestSnapshot, SubmissionRecord
from submit_guard.core.submissions.exceptions import (
    DuplicateSubmissionError,
    UnsupportedContentTypeError,
)
from submit_guard.core.submissions.repositories import SubmissionTracker
from submit_guard.core.submissions.services import FingerprintService

from ..commands import GuardSubmissionCommand
from ..dtos import GuardDecision

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuardSubmissionUseCase:
    """Use case for admitting a request at most once per retention window.

    This use case orchestrates duplicate detection with the following
    guarantees:
    - Skip: requests whose body was not captured bypass the tracker
    - Exclusion: of concurrent identical requests exactly one is admitted
    - Release: an admitted request always completes its submission record,
      whether the handler returns, raises or is cancelled

    The use case holds no state of its own; all shared state lives in the
    injected tracker.

    Attributes:
        ttl_seconds: Default retention window.
        release_on_failure: Forget the record instead of completing it when
            the handler fails, so the client may retry immediately.
    """

    def __init__(
        self,
        tracker: SubmissionTracker,
        fingerprint_service: FingerprintService,
        ttl_seconds: float,
        release_on_failure: bool = False,
    ) -> None:
        """Initialize use case with its collaborators.

        Args:
            tracker: Submission tracker shared by all request workers.
            fingerprint_service: Fingerprint extractor.
            ttl_seconds: Default retention window.
            release_on_failure: Release instead of complete on handler failure.

        Raises:
            ValueError: If ttl_seconds is not positive.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._tracker = tracker
        self._fingerprint_service = fingerprint_service
        self.ttl_seconds = ttl_seconds
        self.release_on_failure = release_on_failure

    @contextmanager
    def guard(self, command: GuardSubmissionCommand) -> Iterator[GuardDecision]:
        """Admit the request for the duration of the ``with`` block.

        Args:
            command: GuardSubmission command with the request snapshot.

        Yields:
            GuardDecision, ADMITTED or SKIPPED.

        Raises:
            DuplicateSubmissionError: If an identical submission is live.
                Raised before the block runs.
        """
        decision = self._admit(command)
        if not decision.admitted:
            yield decision
            return

        failed = False
        try:
            yield decision
        except BaseException:
            failed = True
            raise
        finally:
            self._finish(decision.record, failed, command.correlation_id)

    def execute(
        self,
        command: GuardSubmissionCommand,
        handler: Callable[[RequestSnapshot], T],
    ) -> T:
        """Run ``handler`` under the guard and return its result.

        Raises:
            DuplicateSubmissionError: If an identical submission is live.
        """
        with self.guard(command):
            return handler(command.snapshot)

    def _admit(self, command: GuardSubmissionCommand) -> GuardDecision:
        try:
            fingerprint = self._fingerprint_service.compute(command.snapshot)
        except UnsupportedContentTypeError:
            logger.debug(
                "Skipping duplicate check for %s %s",
                command.snapshot.method, command.snapshot.path,
            )
            return GuardDecision.skipped()

        ttl = command.ttl_seconds or self.ttl_seconds
        admission = self._tracker.try_admit(fingerprint, ttl)
        if not admission.admitted:
            logger.warning(
                "Duplicate submission rejected for %s %s (fingerprint %s, %s)",
                command.snapshot.method, command.snapshot.path,
                fingerprint.short(), admission.record.state.value,
            )
            raise DuplicateSubmissionError(
                fingerprint=str(fingerprint),
                state=admission.record.state.value,
                retry_after=admission.retry_after,
                correlation_id=command.correlation_id,
            )
        return GuardDecision.from_record(admission.record)

    def _finish(
        self,
        record: Optional[SubmissionRecord],
        failed: bool,
        correlation_id: Optional[str],
    ) -> None:
        if record is None:
            return
        if failed and self.release_on_failure:
            self._tracker.release(record.fingerprint, record.admission_token)
            logger.info(
                "Released fingerprint %s after handler failure (correlation_id=%s)",
                record.fingerprint.short(), correlation_id,
            )
            return
        self._tracker.complete(record.fingerprint, record.admission_token)
