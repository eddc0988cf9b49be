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

"""Domain exceptions for the submissions domain."""

from typing import Optional


class SubmissionGuardError(Exception):
    """Base exception for all submission guard errors."""

    def __init__(self, message: str, correlation_id: Optional[str] = None) -> None:
        """Initialize guard error.

        Args:
            message: Human-readable error description.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id


class BodyReadError(SubmissionGuardError):
    """Request body stream failed while it was being captured."""

    def __init__(
        self,
        reason: str,
        client_disconnected: bool = False,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize body read error.

        Args:
            reason: Description of the underlying failure.
            client_disconnected: True if the client went away mid-body.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(
            f"Failed to read request body: {reason}",
            correlation_id=correlation_id
        )
        self.reason = reason
        self.client_disconnected = client_disconnected


class PayloadTooLargeError(SubmissionGuardError):
    """Request body exceeds the configured buffering cap."""

    def __init__(
        self,
        limit: int,
        received: int,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize payload too large error.

        Args:
            limit: Maximum number of body bytes that may be buffered.
            received: Number of bytes seen (or declared) when the cap tripped.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(
            f"Request body of at least {received} bytes exceeds limit of {limit} bytes",
            correlation_id=correlation_id
        )
        self.limit = limit
        self.received = received


class UnsupportedContentTypeError(SubmissionGuardError):
    """Body was not captured, so the request cannot be fingerprinted.

    This is a skip signal rather than a failure: the request proceeds
    without a duplicate check.
    """

    def __init__(
        self,
        content_type: Optional[str],
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize unsupported content type signal.

        Args:
            content_type: Declared content type of the request, if any.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(
            f"Content type not eligible for duplicate checking: {content_type!r}",
            correlation_id=correlation_id
        )
        self.content_type = content_type


class DuplicateSubmissionError(SubmissionGuardError):
    """A submission with the same fingerprint is in flight or was just completed."""

    def __init__(
        self,
        fingerprint: str,
        state: str,
        retry_after: Optional[float] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize duplicate submission error.

        Args:
            fingerprint: Fingerprint of the rejected request.
            state: State of the existing submission record.
            retry_after: Seconds until the existing record expires.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(
            f"Duplicate submission rejected: {fingerprint[:12]} is {state}",
            correlation_id=correlation_id
        )
        self.fingerprint = fingerprint
        self.state = state
        self.retry_after = retry_after


class InvalidStateTransitionError(SubmissionGuardError):
    """Attempted submission state transition is not valid."""

    def __init__(
        self,
        fingerprint: str,
        from_state: str,
        to_state: str,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            fingerprint: Fingerprint of the submission record.
            from_state: Current state.
            to_state: Attempted target state.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(
            f"Invalid submission state transition for {fingerprint[:12]}: "
            f"{from_state} -> {to_state}",
            correlation_id=correlation_id
        )
        self.fingerprint = fingerprint
        self.from_state = from_state
        self.to_state = to_state
