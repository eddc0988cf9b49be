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

"""Domain services for the submissions domain."""

import hashlib
import json
import re
from typing import Any, Dict

from .entities import RequestSnapshot
from .exceptions import UnsupportedContentTypeError
from .value_objects import Fingerprint

_DUPLICATE_SLASHES = re.compile(r"/{2,}")


class FingerprintService:
    """Domain service for computing request fingerprints.

    Computes a deterministic SHA-256 hash of method, normalized path, sorted
    query parameters, body digest and (optionally) caller identity.

    Bodies are hashed byte-exact unless ``canonical_json`` is enabled, in
    which case bodies that parse as JSON are re-serialized with sorted keys
    and no whitespace first. Either way the choice is fixed per instance, so
    equal inputs always produce equal fingerprints.

    Attributes:
        include_caller: Scope deduplication per caller instead of globally.
        canonical_json: Normalize JSON bodies before hashing.
    """

    def __init__(self, include_caller: bool = False, canonical_json: bool = False) -> None:
        self.include_caller = include_caller
        self.canonical_json = canonical_json

    def compute(self, snapshot: RequestSnapshot) -> Fingerprint:
        """Compute the fingerprint of a captured request.

        Creates a deterministic hash by:
        1. Building a dict of the canonical request components
        2. JSON serializing with sorted keys and no whitespace
        3. UTF-8 encoding
        4. SHA-256 hashing

        Args:
            snapshot: Request snapshot with a buffered body.

        Returns:
            Fingerprint value object.

        Raises:
            UnsupportedContentTypeError: If the body was not captured.

        Example:
            >>> snap = RequestSnapshot("POST", "/orders", "application/json",
            ...                        ReplayableBody(b'{"qty":1}'))
            >>> len(FingerprintService().compute(snap).value)
            64
        """
        if not snapshot.is_captured:
            raise UnsupportedContentTypeError(snapshot.content_type)

        components: Dict[str, Any] = {
            "method": snapshot.method.upper(),
            "path": normalize_path(snapshot.path),
            "query": normalize_query(snapshot.query_string),
            "body": self._body_digest(snapshot.body.read()),
        }
        if self.include_caller:
            components["caller"] = str(snapshot.caller_id) if snapshot.caller_id else ""

        normalized = json.dumps(components, sort_keys=True, separators=(',', ':'))
        digest = hashlib.sha256(normalized.encode('utf-8')).hexdigest()
        return Fingerprint(digest)

    def _body_digest(self, content: bytes) -> str:
        if self.canonical_json and content:
            try:
                content = json.dumps(
                    json.loads(content), sort_keys=True, separators=(',', ':'), ensure_ascii=False
                ).encode('utf-8')
            except (ValueError, RecursionError):
                # Unusable as canonical JSON; fall back to byte-exact.
                pass
        return hashlib.sha256(content).hexdigest()


def normalize_path(path: str) -> str:
    """Collapse duplicate slashes and strip the trailing slash (except root)."""
    if not path:
        return "/"
    path = _DUPLICATE_SLASHES.sub("/", path)
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def normalize_query(query_string: str) -> str:
    """Sort the raw query parameters without decoding them.

    Escapes are kept as sent so that distinct byte sequences, including
    invalid UTF-8, never collapse into one parameter.
    """
    segments = [segment for segment in query_string.strip().split("&") if segment]
    return "&".join(sorted(segments))
