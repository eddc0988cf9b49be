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

"""Guard decision DTO."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from submit_guard.core.submissions.entities import SubmissionRecord


class GuardOutcome(str, Enum):
    """What the guard decided for a request that may proceed."""

    ADMITTED = "ADMITTED"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class GuardDecision:
    """Response DTO for the guard use case.

    Rejections are not represented here; they surface as
    DuplicateSubmissionError so the handler is never reached.

    Attributes:
        outcome: ADMITTED (dedup enforced) or SKIPPED (not applicable).
        fingerprint: Hex fingerprint when admitted.
        record: Submission record created for this admission.
    """

    outcome: GuardOutcome
    fingerprint: Optional[str] = None
    record: Optional[SubmissionRecord] = None

    @property
    def admitted(self) -> bool:
        """True if a submission record was created for this request."""
        return self.outcome == GuardOutcome.ADMITTED

    @staticmethod
    def skipped() -> "GuardDecision":
        """Decision for requests that bypass duplicate checking."""
        return GuardDecision(outcome=GuardOutcome.SKIPPED)

    @staticmethod
    def from_record(record: SubmissionRecord) -> "GuardDecision":
        """Create an ADMITTED decision from the new submission record."""
        return GuardDecision(
            outcome=GuardOutcome.ADMITTED,
            fingerprint=str(record.fingerprint),
            record=record,
        )
