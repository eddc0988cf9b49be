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

"""FastAPI application wiring the submission guard in front of the demo routes.

Run with ``uvicorn submit_guard.main:app``.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI

from submit_guard import __version__
from submit_guard.api.config import GuardSettings, load_settings
from submit_guard.api.demo.routes import SubmissionLog, router as demo_router
from submit_guard.api.middleware import RepeatSubmitMiddleware
from submit_guard.core.submissions.repositories import SubmissionTracker
from submit_guard.infra.submission_tracker import InMemorySubmissionTracker

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from LOG_LEVEL (default INFO)."""
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
    )


def create_app(
    settings: Optional[GuardSettings] = None,
    tracker: Optional[SubmissionTracker] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Guard settings. Defaults to load_settings().
        tracker: Submission tracker shared by all workers of this process.
            Defaults to a new in-memory tracker.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()
    tracker = tracker if tracker is not None else InMemorySubmissionTracker()

    app = FastAPI(
        title="Submit Guard",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.submission_log = SubmissionLog()
    app.add_middleware(RepeatSubmitMiddleware, settings=settings, tracker=tracker)
    app.include_router(demo_router)

    logger.info(
        "Submit guard enabled (ttl=%.1fs, max_body_bytes=%d, include_caller=%s)",
        settings.ttl_seconds, settings.max_body_bytes, settings.include_caller,
    )
    return app


configure_logging()
app = create_app()
