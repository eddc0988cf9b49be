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

"""Submission tracking record entity."""

from dataclasses import dataclass, replace
from typing import Optional

from ..exceptions import InvalidStateTransitionError
from ..value_objects import AdmissionVerdict, Fingerprint, SubmissionState


@dataclass(frozen=True)
class SubmissionRecord:
    """Submission tracking record.

    Immutable record of an admitted request. State changes produce a new
    record; only the submission tracker stores and replaces records.

    Timestamps are seconds on the tracker's clock. ``expires_at`` is
    ``created_at + ttl_seconds`` while the request is in flight, so a handler
    that never completes cannot wedge the fingerprint forever, and is moved
    to ``completed_at + ttl_seconds`` on completion.

    Attributes:
        fingerprint: Fingerprint of the admitted request.
        admission_token: Random token identifying this particular admission.
        ttl_seconds: Retention window applied on creation and completion.
        created_at: Admission timestamp.
        expires_at: Timestamp from which the record no longer blocks.
        state: Current lifecycle state.
        completed_at: Completion timestamp, if completed.
    """

    fingerprint: Fingerprint
    admission_token: str
    ttl_seconds: float
    created_at: float
    expires_at: float
    state: SubmissionState = SubmissionState.IN_FLIGHT
    completed_at: Optional[float] = None

    @classmethod
    def admit(
        cls,
        fingerprint: Fingerprint,
        admission_token: str,
        ttl_seconds: float,
        now: float,
    ) -> "SubmissionRecord":
        """Create a new IN_FLIGHT record.

        Raises:
            ValueError: If ttl_seconds is not positive.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        return cls(
            fingerprint=fingerprint,
            admission_token=admission_token,
            ttl_seconds=ttl_seconds,
            created_at=now,
            expires_at=now + ttl_seconds,
        )

    def complete(self, now: float) -> "SubmissionRecord":
        """Return a COMPLETED copy whose retention countdown starts at ``now``.

        Raises:
            InvalidStateTransitionError: If the record is already COMPLETED.
        """
        if self.state != SubmissionState.IN_FLIGHT:
            raise InvalidStateTransitionError(
                fingerprint=str(self.fingerprint),
                from_state=self.state.value,
                to_state=SubmissionState.COMPLETED.value,
            )
        return replace(
            self,
            state=SubmissionState.COMPLETED,
            completed_at=now,
            expires_at=now + self.ttl_seconds,
        )

    def is_expired(self, now: float) -> bool:
        """Check if record has expired."""
        return now >= self.expires_at

    def remaining(self, now: float) -> float:
        """Seconds until the record expires (never negative)."""
        return max(0.0, self.expires_at - now)

    def owned_by(self, admission_token: Optional[str]) -> bool:
        """Check if the record belongs to the given admission.

        A ``None`` token matches any admission.
        """
        return admission_token is None or admission_token == self.admission_token


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of an admission attempt.

    Attributes:
        verdict: ADMITTED or REJECTED.
        record: The newly created record when admitted, the blocking record
            when rejected.
        retry_after: Seconds until the blocking record expires (rejections only).
    """

    verdict: AdmissionVerdict
    record: SubmissionRecord
    retry_after: Optional[float] = None

    @property
    def admitted(self) -> bool:
        """True if the request may proceed to the handler."""
        return self.verdict == AdmissionVerdict.ADMITTED
