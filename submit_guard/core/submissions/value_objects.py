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

"""Value objects for the submissions domain.

All value objects are immutable and defined by their values, not identity.
"""

import io
import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterator


@dataclass(frozen=True)
class Fingerprint:
    """SHA-256 hash identifying semantically identical submissions.

    Attributes:
        value: 64-character hex string (SHA-256 digest).

    Raises:
        ValueError: If value does not match SHA-256 pattern or exceeds length.
    """

    value: str

    SHA256_PATTERN: ClassVar[str] = r'^[0-9a-f]{64}$'
    MAX_LENGTH: ClassVar[int] = 64  # SHA-256 hex digest length

    def __post_init__(self) -> None:
        """Validate SHA-256 format and length."""
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Fingerprint length cannot exceed {self.MAX_LENGTH} characters, "
                f"got {len(self.value)}"
            )
        if not re.match(self.SHA256_PATTERN, self.value):
            raise ValueError(
                f"Invalid SHA-256 format: {self.value}. "
                f"Expected 64 lowercase hexadecimal characters."
            )

    def short(self) -> str:
        """Return a truncated form suitable for log lines."""
        return self.value[:12]

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class CallerId:
    """Caller identity used for per-caller deduplication.

    Attributes:
        value: Opaque caller identifier (client id or a digest of a token).

    Raises:
        ValueError: If value is empty or exceeds length.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 128

    def __post_init__(self) -> None:
        """Validate caller ID is not empty and within length limit."""
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"CallerId length cannot exceed {self.MAX_LENGTH} characters, "
                f"got {len(self.value)}"
            )
        if not self.value or not self.value.strip():
            raise ValueError("Caller ID cannot be empty")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class ReplayableBody:
    """Request body captured once and readable any number of times.

    Every read returns the identical byte sequence; streams handed out by
    ``open`` are independent of each other.

    Attributes:
        content: Buffered body bytes.
    """

    content: bytes = b""

    DEFAULT_CHUNK_SIZE: ClassVar[int] = 64 * 1024

    def read(self) -> bytes:
        """Return the full body."""
        return self.content

    def open(self) -> io.BytesIO:
        """Return a fresh binary stream positioned at the start of the body."""
        return io.BytesIO(self.content)

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the body in chunks of at most ``chunk_size`` bytes."""
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        view = memoryview(self.content)
        for start in range(0, len(view), chunk_size):
            yield bytes(view[start:start + chunk_size])

    def __len__(self) -> int:
        return len(self.content)


class SubmissionState(str, Enum):
    """Submission record lifecycle states."""

    IN_FLIGHT = "IN_FLIGHT"
    COMPLETED = "COMPLETED"


class AdmissionVerdict(str, Enum):
    """Tracker verdict for an admission attempt."""

    ADMITTED = "ADMITTED"
    REJECTED = "REJECTED"
