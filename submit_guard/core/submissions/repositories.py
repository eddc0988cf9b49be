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

"""Port interfaces (Protocols) for the submissions domain.

These define the contracts that infrastructure implementations must satisfy.
Using Protocol instead of ABC allows for structural subtyping (duck typing).
"""

from typing import Optional, Protocol
import uuid

from .entities import AdmissionDecision, SubmissionRecord
from .value_objects import Fingerprint


class Clock(Protocol):
    """Time source port."""

    def now(self) -> float:
        """Return the current time in seconds.

        Only differences between readings are meaningful; the value must
        never go backwards.
        """
        ...


class UUIDGenerator(Protocol):
    """Generator port for admission tokens and other identifiers."""

    def generate(self) -> uuid.UUID:
        """Generate a UUID object.

        Returns:
            uuid.UUID: A new UUID.
        """
        ...


class SubmissionTracker(Protocol):
    """Registry of in-flight and recently completed submissions.

    Implementations must be safe to share between all request workers of a
    process. ``try_admit`` must be atomic per fingerprint: of any number of
    concurrent calls for the same fingerprint, exactly one is admitted.
    Expired records must never cause a rejection.
    """

    def try_admit(self, fingerprint: Fingerprint, ttl_seconds: float) -> AdmissionDecision:
        """Admit the fingerprint unless a live record exists.

        Args:
            fingerprint: Fingerprint of the inbound request.
            ttl_seconds: Retention window for the new record.

        Returns:
            ADMITTED with the new IN_FLIGHT record, or REJECTED with the
            existing live record (which is left untouched).

        Raises:
            ValueError: If ttl_seconds is not positive.
        """
        ...

    def complete(self, fingerprint: Fingerprint, admission_token: Optional[str] = None) -> bool:
        """Move an IN_FLIGHT record to COMPLETED and start its retention window.

        Idempotent; a no-op if the record is absent, expired, already
        completed, or owned by a different admission.

        Returns:
            True if a transition happened.
        """
        ...

    def release(self, fingerprint: Fingerprint, admission_token: Optional[str] = None) -> bool:
        """Forget a record immediately so the fingerprint may be admitted again.

        Returns:
            True if a record was removed.
        """
        ...

    def get(self, fingerprint: Fingerprint) -> Optional[SubmissionRecord]:
        """Return the live record for the fingerprint, if any."""
        ...

    def purge_expired(self) -> int:
        """Remove all expired records.

        Returns:
            Number of records removed.
        """
        ...
