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

"""Capture of single-read request bodies into replayable buffers."""

import logging
from typing import Any, Awaitable, BinaryIO, Callable, Iterable, List, Mapping, Optional, Tuple

from submit_guard.core.submissions.exceptions import BodyReadError, PayloadTooLargeError
from submit_guard.core.submissions.value_objects import ReplayableBody

logger = logging.getLogger(__name__)

Receive = Callable[[], Awaitable[Mapping[str, Any]]]

DEFAULT_CONTENT_TYPES = ("application/json",)
DEFAULT_MAX_BODY_BYTES = 1024 * 1024
DEFAULT_CHUNK_SIZE = 64 * 1024


class BodyBuffer:
    """Reads a request body exactly once and returns a ReplayableBody.

    Only bodies whose content type starts with one of the eligible prefixes
    (case-insensitive) are captured; everything else is left to the caller
    to pass through untouched. Memory is bounded by ``max_body_bytes`` plus
    one chunk.
    """

    def __init__(
        self,
        eligible_content_types: Iterable[str] = DEFAULT_CONTENT_TYPES,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Initialize the buffer.

        Args:
            eligible_content_types: Content-type prefixes eligible for capture.
            max_body_bytes: Maximum number of body bytes to buffer.
            chunk_size: Read size for synchronous streams.

        Raises:
            ValueError: If a size is not positive.
        """
        if max_body_bytes <= 0:
            raise ValueError(f"max_body_bytes must be positive, got {max_body_bytes}")
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.eligible_content_types: Tuple[str, ...] = tuple(
            prefix.strip().lower() for prefix in eligible_content_types if prefix.strip()
        )
        self.max_body_bytes = max_body_bytes
        self.chunk_size = chunk_size

    def is_eligible(self, content_type: Optional[str]) -> bool:
        """Check whether a body of this content type should be captured."""
        if not content_type:
            return False
        lowered = content_type.strip().lower()
        return any(lowered.startswith(prefix) for prefix in self.eligible_content_types)

    def capture(self, stream: BinaryIO, content_length: Optional[int] = None) -> ReplayableBody:
        """Drain a synchronous file-like stream.

        Args:
            stream: Object with a ``read(size)`` method returning bytes.
            content_length: Declared body length, if known.

        Returns:
            ReplayableBody holding the whole body.

        Raises:
            PayloadTooLargeError: If the body exceeds ``max_body_bytes``.
            BodyReadError: If reading the stream fails.
        """
        self._check_declared_length(content_length)
        chunks: List[bytes] = []
        received = 0
        while True:
            try:
                chunk = stream.read(self.chunk_size)
            except Exception as exc:
                logger.error("Request body stream failed after %d bytes", received)
                raise BodyReadError(_describe(exc)) from exc
            if not chunk:
                break
            received = self._accept(chunks, chunk, received)
        return ReplayableBody(b"".join(chunks))

    async def capture_async(
        self,
        receive: Receive,
        content_length: Optional[int] = None,
    ) -> ReplayableBody:
        """Drain ASGI ``http.request`` messages until ``more_body`` is false.

        Args:
            receive: ASGI receive callable.
            content_length: Declared body length, if known.

        Returns:
            ReplayableBody holding the whole body.

        Raises:
            PayloadTooLargeError: If the body exceeds ``max_body_bytes``.
            BodyReadError: If receiving fails or the client disconnects.
        """
        self._check_declared_length(content_length)
        chunks: List[bytes] = []
        received = 0
        more_body = True
        while more_body:
            try:
                message = await receive()
            except Exception as exc:
                logger.error("Request body stream failed after %d bytes", received)
                raise BodyReadError(_describe(exc)) from exc
            if message["type"] == "http.disconnect":
                logger.warning("Client disconnected after %d body bytes", received)
                raise BodyReadError("client disconnected", client_disconnected=True)
            if message["type"] != "http.request":
                continue
            received = self._accept(chunks, message.get("body", b""), received)
            more_body = message.get("more_body", False)
        return ReplayableBody(b"".join(chunks))

    def _check_declared_length(self, content_length: Optional[int]) -> None:
        if content_length is not None and content_length > self.max_body_bytes:
            logger.warning(
                "Declared body of %d bytes exceeds limit of %d bytes",
                content_length, self.max_body_bytes,
            )
            raise PayloadTooLargeError(limit=self.max_body_bytes, received=content_length)

    def _accept(self, chunks: List[bytes], chunk: bytes, received: int) -> int:
        received += len(chunk)
        if received > self.max_body_bytes:
            logger.warning(
                "Request body exceeded limit of %d bytes", self.max_body_bytes
            )
            raise PayloadTooLargeError(limit=self.max_body_bytes, received=received)
        if chunk:
            chunks.append(chunk)
        return received


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
