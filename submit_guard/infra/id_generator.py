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

"""Infrastructure layer for identifier and time generation."""

import time
import uuid

from submit_guard.core.submissions.repositories import Clock, UUIDGenerator


class UUIDv4Generator(UUIDGenerator):
    """UUID v4 generator for admission tokens.

    Generates random UUID v4 identifiers; tokens only need to be unique,
    not ordered.
    """

    def generate(self) -> uuid.UUID:
        """Generate a new UUID v4.

        Returns:
            uuid.UUID: A new UUID v4 object.
        """
        return uuid.uuid4()


class MonotonicClock(Clock):
    """Clock backed by ``time.monotonic``.

    Immune to wall-clock adjustments, which matters for retention windows of
    a few seconds.
    """

    def now(self) -> float:
        """Return monotonic seconds."""
        return time.monotonic()
