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

"""Mapping of submission guard errors to HTTP responses."""

import math
from typing import Dict

from fastapi import status
from fastapi.responses import JSONResponse

from submit_guard.core.submissions.exceptions import (
    BodyReadError,
    DuplicateSubmissionError,
    PayloadTooLargeError,
    SubmissionGuardError,
)


def error_response(exc: SubmissionGuardError) -> JSONResponse:
    """Build the client-visible response for a guard error.

    Body shape: ``{"detail": {"error": <code>, "message": <text>}}``.
    """
    headers: Dict[str, str] = {}
    if isinstance(exc, DuplicateSubmissionError):
        status_code = status.HTTP_409_CONFLICT
        error = "duplicate_submission"
        message = "Duplicate submission, please do not resubmit the same request"
        if exc.retry_after is not None:
            headers["Retry-After"] = str(max(1, math.ceil(exc.retry_after)))
    elif isinstance(exc, PayloadTooLargeError):
        status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        error = "payload_too_large"
        message = f"Request body exceeds {exc.limit} bytes"
    elif isinstance(exc, BodyReadError) and exc.client_disconnected:
        status_code = status.HTTP_400_BAD_REQUEST
        error = "incomplete_body"
        message = "Request body ended before it was fully received"
    elif isinstance(exc, BodyReadError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error = "body_read_error"
        message = "Failed to read request body"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error = "internal_error"
        message = "Submission guard failure"

    if exc.correlation_id:
        headers["X-Correlation-ID"] = exc.correlation_id
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"error": error, "message": message}},
        headers=headers,
    )
