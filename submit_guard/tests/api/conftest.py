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

"""Fixtures for API tests running the guard in front of the demo app."""

from typing import Any, Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from submit_guard.api.config import GuardSettings
from submit_guard.main import create_app


@pytest.fixture
def settings() -> GuardSettings:
    """Guard settings with a 2 second window and a 1 KiB body cap."""
    return GuardSettings(ttl_seconds=2.0, max_body_bytes=1024)


@pytest.fixture
def app_factory(tracker) -> Callable[..., FastAPI]:
    """Factory building the app around the fake-clock tracker."""

    def _make(**overrides: Any) -> FastAPI:
        base = {"ttl_seconds": 2.0, "max_body_bytes": 1024}
        base.update(overrides)
        return create_app(settings=GuardSettings(**base), tracker=tracker)

    return _make


@pytest.fixture
def app(settings, tracker) -> FastAPI:
    """Application with the default test settings."""
    return create_app(settings=settings, tracker=tracker)


@pytest.fixture
def client(app) -> TestClient:
    """Test client for the default application."""
    return TestClient(app)


@pytest.fixture
def submission_log(app):
    """Submission log the demo handlers append to."""
    return app.state.submission_log
