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

"""In-memory submission tracker.

Records live in a plain dict guarded by a single ``threading.Lock``. Every
public method takes the lock for its whole read-modify-write, so admission
is atomic per fingerprint across threads. None of the methods await, so the
same instance can also be called directly from an asyncio event loop.

Per-process only: a multi-process deployment needs a shared store instead.
"""

import logging
import threading
from typing import Dict, Optional

from submit_guard.core.submissions.entities import AdmissionDecision, SubmissionRecord
from submit_guard.core.submissions.repositories import Clock, SubmissionTracker, UUIDGenerator
from submit_guard.core.submissions.value_objects import (
    AdmissionVerdict,
    Fingerprint,
    SubmissionState,
)

from .id_generator import MonotonicClock, UUIDv4Generator

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 256


class InMemorySubmissionTracker(SubmissionTracker):
    """Thread-safe in-memory SubmissionTracker with TTL-based expiry.

    Expiry is lazy (an expired record is dropped when its fingerprint is
    next touched) plus an opportunistic full sweep every ``sweep_interval``
    admission attempts, which bounds memory for fingerprints that are never
    seen again.

    Attributes:
        sweep_interval: Admission attempts between full sweeps.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        uuid_generator: Optional[UUIDGenerator] = None,
        sweep_interval: int = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        """Initialize the tracker.

        Args:
            clock: Time source. Defaults to a monotonic clock.
            uuid_generator: Admission token source. Defaults to UUID v4.
            sweep_interval: Admission attempts between full sweeps.

        Raises:
            ValueError: If sweep_interval is not positive.
        """
        if sweep_interval <= 0:
            raise ValueError(f"sweep_interval must be positive, got {sweep_interval}")
        self._clock = clock or MonotonicClock()
        self._uuid_generator = uuid_generator or UUIDv4Generator()
        self.sweep_interval = sweep_interval
        self._records: Dict[str, SubmissionRecord] = {}
        self._lock = threading.Lock()
        self._attempts = 0

    def try_admit(self, fingerprint: Fingerprint, ttl_seconds: float) -> AdmissionDecision:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        with self._lock:
            now = self._clock.now()
            self._attempts += 1
            if self._attempts % self.sweep_interval == 0:
                self._purge_locked(now)

            existing = self._live_record_locked(fingerprint, now)
            if existing is not None:
                logger.debug(
                    "Fingerprint %s rejected, existing record is %s",
                    fingerprint.short(), existing.state.value,
                )
                return AdmissionDecision(
                    AdmissionVerdict.REJECTED, existing, retry_after=existing.remaining(now)
                )

            record = SubmissionRecord.admit(
                fingerprint=fingerprint,
                admission_token=str(self._uuid_generator.generate()),
                ttl_seconds=ttl_seconds,
                now=now,
            )
            self._records[fingerprint.value] = record
            logger.debug("Fingerprint %s admitted", fingerprint.short())
            return AdmissionDecision(AdmissionVerdict.ADMITTED, record)

    def complete(self, fingerprint: Fingerprint, admission_token: Optional[str] = None) -> bool:
        with self._lock:
            now = self._clock.now()
            record = self._live_record_locked(fingerprint, now)
            if record is None or not record.owned_by(admission_token):
                return False
            if record.state != SubmissionState.IN_FLIGHT:
                return False
            self._records[fingerprint.value] = record.complete(now)
            logger.debug("Fingerprint %s completed", fingerprint.short())
            return True

    def release(self, fingerprint: Fingerprint, admission_token: Optional[str] = None) -> bool:
        with self._lock:
            record = self._records.get(fingerprint.value)
            if record is None or not record.owned_by(admission_token):
                return False
            del self._records[fingerprint.value]
            logger.debug("Fingerprint %s released", fingerprint.short())
            return True

    def get(self, fingerprint: Fingerprint) -> Optional[SubmissionRecord]:
        with self._lock:
            return self._live_record_locked(fingerprint, self._clock.now())

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_locked(self._clock.now())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _live_record_locked(
        self, fingerprint: Fingerprint, now: float
    ) -> Optional[SubmissionRecord]:
        """Return the unexpired record, dropping an expired one (lock held)."""
        record = self._records.get(fingerprint.value)
        if record is None:
            return None
        if record.is_expired(now):
            del self._records[fingerprint.value]
            return None
        return record

    def _purge_locked(self, now: float) -> int:
        expired = [key for key, record in self._records.items() if record.is_expired(now)]
        for key in expired:
            del self._records[key]
        if expired:
            logger.debug("Purged %d expired submission records", len(expired))
        return len(expired)
