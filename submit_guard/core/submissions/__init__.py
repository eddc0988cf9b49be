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

"""Submissions domain module for duplicate-submission detection."""

from .entities import AdmissionDecision, RequestSnapshot, SubmissionRecord
from .exceptions import (
    BodyReadError,
    DuplicateSubmissionError,
    InvalidStateTransitionError,
    PayloadTooLargeError,
    SubmissionGuardError,
    UnsupportedContentTypeError,
)
from .repositories import Clock, SubmissionTracker, UUIDGenerator
from .services import FingerprintService
from .value_objects import (
    AdmissionVerdict,
    CallerId,
    Fingerprint,
    ReplayableBody,
    SubmissionState,
)

__all__ = [
    "AdmissionDecision",
    "RequestSnapshot",
    "SubmissionRecord",
    "BodyReadError",
    "DuplicateSubmissionError",
    "InvalidStateTransitionError",
    "PayloadTooLargeError",
    "SubmissionGuardError",
    "UnsupportedContentTypeError",
    "Clock",
    "SubmissionTracker",
    "UUIDGenerator",
    "FingerprintService",
    "AdmissionVerdict",
    "CallerId",
    "Fingerprint",
    "ReplayableBody",
    "SubmissionState",
]
