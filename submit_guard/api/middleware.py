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

"""ASGI middleware rejecting repeated submissions before they reach a handler."""

import hashlib
import logging
from contextlib import ExitStack
from typing import Optional

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from submit_guard.core.submissions.entities import RequestSnapshot
from submit_guard.core.submissions.exceptions import (
    BodyReadError,
    DuplicateSubmissionError,
    PayloadTooLargeError,
)
from submit_guard.core.submissions.repositories import SubmissionTracker
from submit_guard.core.submissions.services import FingerprintService
from submit_guard.core.submissions.value_objects import CallerId, ReplayableBody
from submit_guard.infra.body_buffer import BodyBuffer
from submit_guard.infra.submission_tracker import InMemorySubmissionTracker
from submit_guard.orchestrator.submissions.commands import GuardSubmissionCommand
from submit_guard.orchestrator.submissions.use_cases import GuardSubmissionUseCase

from .config import GuardSettings
from .errors import error_response

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "x-correlation-id"


class RepeatSubmitMiddleware:
    """Duplicate-submission guard for an ASGI application.

    Per request:
    1. Pass through non-HTTP scopes, exempt paths and ineligible content types
    2. Buffer the body (413 when too large, 400/500 when the stream fails)
    3. Fingerprint and admit through the guard use case (409 on duplicates)
    4. Call the wrapped app with a receive channel that replays the body

    The buffered body and fingerprint are exposed to handlers as
    ``request.state.replayable_body`` and ``request.state.submission_fingerprint``.
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: Optional[GuardSettings] = None,
        tracker: Optional[SubmissionTracker] = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: Downstream ASGI application.
            settings: Guard settings. Defaults to GuardSettings().
            tracker: Shared submission tracker. Defaults to a new in-memory one.
        """
        self.app = app
        self.settings = settings if settings is not None else GuardSettings()
        self.tracker = tracker if tracker is not None else InMemorySubmissionTracker()
        self.body_buffer = BodyBuffer(
            eligible_content_types=self.settings.eligible_content_types,
            max_body_bytes=self.settings.max_body_bytes,
        )
        self.use_case = GuardSubmissionUseCase(
            tracker=self.tracker,
            fingerprint_service=FingerprintService(
                include_caller=self.settings.include_caller,
                canonical_json=self.settings.canonical_json,
            ),
            ttl_seconds=self.settings.ttl_seconds,
            release_on_failure=self.settings.release_on_failure,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        headers = Headers(scope=scope)
        content_type = headers.get("content-type")
        if self.settings.is_exempt(path) or not self.body_buffer.is_eligible(content_type):
            await self.app(scope, receive, send)
            return

        correlation_id = headers.get(CORRELATION_HEADER)
        try:
            body = await self.body_buffer.capture_async(receive, _declared_length(headers))
        except (BodyReadError, PayloadTooLargeError) as exc:
            exc.correlation_id = correlation_id
            await error_response(exc)(scope, receive, send)
            return

        snapshot = RequestSnapshot(
            method=scope["method"],
            path=path,
            content_type=content_type,
            body=body,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            caller_id=self._caller_id(headers),
        )
        command = GuardSubmissionCommand(
            snapshot=snapshot,
            ttl_seconds=self.settings.ttl_for(path),
            correlation_id=correlation_id,
        )

        with ExitStack() as stack:
            try:
                decision = stack.enter_context(self.use_case.guard(command))
            except DuplicateSubmissionError as exc:
                await error_response(exc)(scope, receive, send)
                return

            state = scope.setdefault("state", {})
            state["replayable_body"] = body
            state["submission_fingerprint"] = decision.fingerprint
            await self.app(scope, _replay_receive(body, receive), send)

    def _caller_id(self, headers: Headers) -> Optional[CallerId]:
        """Digest of the caller header, so raw credentials are never retained."""
        if not self.settings.include_caller:
            return None
        raw = headers.get(self.settings.caller_header)
        if not raw or not raw.strip():
            return None
        return CallerId(hashlib.sha256(raw.strip().encode("utf-8")).hexdigest())


def _declared_length(headers: Headers) -> Optional[int]:
    raw = headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _replay_receive(body: ReplayableBody, receive: Receive) -> Receive:
    """Receive channel that yields the buffered body once, then defers upstream.

    Later calls fall through to the original channel so the app still sees
    ``http.disconnect``.
    """
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body.read(), "more_body": False}
        return await receive()

    return replay
