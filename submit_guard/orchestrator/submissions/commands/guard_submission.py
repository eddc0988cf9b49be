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

"""GuardSubmission command DTO."""

from dataclasses import dataclass
from typing import Optional

from submit_guard.core.submissions.entities import RequestSnapshot


@dataclass(frozen=True)
class GuardSubmissionCommand:
    """Command to run one request through the duplicate-submission guard.

    Attributes:
        snapshot: Captured inbound request.
        ttl_seconds: Retention window override for this request's route.
        correlation_id: Request correlation identifier for tracing.
    """

    snapshot: RequestSnapshot
    ttl_seconds: Optional[float] = None
    correlation_id: Optional[str] = None
