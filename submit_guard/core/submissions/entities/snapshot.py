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

"""Request snapshot entity."""

from dataclasses import dataclass
from typing import Optional

from ..value_objects import CallerId, ReplayableBody


@dataclass(frozen=True)
class RequestSnapshot:
    """Immutable capture of an inbound request taken at the pipeline boundary.

    Attributes:
        method: HTTP method as received.
        path: Request path as received (normalized by the fingerprint service).
        content_type: Declared content type, if any.
        body: Buffered body, or None when capture was bypassed for the
            content type.
        query_string: Raw query string without the leading '?'.
        caller_id: Caller identity, if the deployment extracts one.
    """

    method: str
    path: str
    content_type: Optional[str]
    body: Optional[ReplayableBody]
    query_string: str = ""
    caller_id: Optional[CallerId] = None

    @property
    def is_captured(self) -> bool:
        """True if the body was buffered and can be fingerprinted."""
        return self.body is not None
