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

"""Shared pytest fixtures for submission guard tests."""

import uuid
from typing import Callable, Optional

import pytest

from submit_guard.core.submissions.entities import RequestSnapshot
from submit_guard.core.submissions.repositories import Clock, UUIDGenerator
from submit_guard.core.submissions.services import FingerprintService
from submit_guard.core.submissions.value_objects import CallerId, ReplayableBody
from submit_guard.infra.submission_tracker import InMemorySubmissionTracker
from submit_guard.tests.utils import ORDER_BODY


class FakeClock(Clock):
    """Manually advanced clock for deterministic expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        """Initialize the fake clock."""
        self._now = start

    def now(self) -> float:
        """Return the current fake time."""
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self._now += seconds


class FakeUUIDGenerator(UUIDGenerator):
    """Fake UUID generator for testing."""

    def __init__(self) -> None:
        """Initialize the fake generator."""
        self._counter = 1

    def generate(self) -> uuid.UUID:
        """Generate a predictable UUID for testing."""
        uuid_str = f"123e4567-e89b-12d3-a456-426614174{self._counter:03d}"
        self._counter += 1
        return uuid.UUID(uuid_str)


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock."""
    return FakeClock()


@pytest.fixture
def uuid_generator() -> FakeUUIDGenerator:
    """Provide a fake UUID generator."""
    return FakeUUIDGenerator()


@pytest.fixture
def tracker(clock, uuid_generator) -> InMemorySubmissionTracker:  # noqa: W0621
    """Provide an in-memory tracker driven by the fake clock."""
    return InMemorySubmissionTracker(clock=clock, uuid_generator=uuid_generator)


@pytest.fixture
def fingerprint_service() -> FingerprintService:
    """Provide a byte-exact, global fingerprint service."""
    return FingerprintService()


@pytest.fixture
def make_snapshot() -> Callable[..., RequestSnapshot]:
    """Factory for request snapshots with sensible defaults."""

    def _make(
        body: Optional[bytes] = ORDER_BODY,
        method: str = "POST",
        path: str = "/orders",
        content_type: Optional[str] = "application/json",
        query_string: str = "",
        caller: Optional[str] = None,
    ) -> RequestSnapshot:
        return RequestSnapshot(
            method=method,
            path=path,
            content_type=content_type,
            body=ReplayableBody(body) if body is not None else None,
            query_string=query_string,
            caller_id=CallerId(caller) if caller else None,
        )

    return _make
