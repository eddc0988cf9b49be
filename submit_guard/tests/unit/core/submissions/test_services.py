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

"""Unit tests for FingerprintService."""

import pytest

from submit_guard.core.submissions.exceptions import UnsupportedContentTypeError
from submit_guard.core.submissions.services import (
    FingerprintService,
    normalize_path,
    normalize_query,
)


@pytest.mark.unit
class TestFingerprintService:
    """Tests for FingerprintService.compute."""

    def test_identical_requests_share_fingerprint(self, fingerprint_service, make_snapshot):
        """Same method, path and body give the same fingerprint."""
        first = fingerprint_service.compute(make_snapshot())
        second = fingerprint_service.compute(make_snapshot())
        assert first == second
        assert len(first.value) == 64

    def test_new_service_instance_is_deterministic(self, make_snapshot):
        """Fingerprints do not depend on the service instance."""
        assert FingerprintService().compute(make_snapshot()) == \
            FingerprintService().compute(make_snapshot())

    @pytest.mark.parametrize(
        "override",
        [
            {"method": "PUT"},
            {"path": "/invoices"},
            {"body": b'{"item":"B","qty":1}'},
            {"body": b""},
            {"query_string": "draft=1"},
        ],
    )
    def test_any_difference_changes_fingerprint(self, fingerprint_service, make_snapshot, override):
        """Changing method, path, body or query changes the fingerprint."""
        base = fingerprint_service.compute(make_snapshot())
        assert fingerprint_service.compute(make_snapshot(**override)) != base

    def test_content_type_is_not_part_of_fingerprint(self, fingerprint_service, make_snapshot):
        """Content-type parameters do not split identical submissions."""
        plain = fingerprint_service.compute(make_snapshot(content_type="application/json"))
        charset = fingerprint_service.compute(
            make_snapshot(content_type="application/json; charset=utf-8")
        )
        assert plain == charset

    def test_method_case_insensitive(self, fingerprint_service, make_snapshot):
        """Method is upper-cased before hashing."""
        assert fingerprint_service.compute(make_snapshot(method="post")) == \
            fingerprint_service.compute(make_snapshot(method="POST"))

    def test_equivalent_paths_share_fingerprint(self, fingerprint_service, make_snapshot):
        """Trailing and duplicate slashes are normalized away."""
        base = fingerprint_service.compute(make_snapshot(path="/api/orders"))
        assert fingerprint_service.compute(make_snapshot(path="/api/orders/")) == base
        assert fingerprint_service.compute(make_snapshot(path="//api//orders")) == base

    def test_query_parameter_order_ignored(self, fingerprint_service, make_snapshot):
        """Query parameters are sorted before hashing."""
        assert fingerprint_service.compute(make_snapshot(query_string="a=1&b=2")) == \
            fingerprint_service.compute(make_snapshot(query_string="b=2&a=1"))

    def test_distinct_invalid_utf8_escapes_differ(self, fingerprint_service, make_snapshot):
        """Undecodable escapes stay distinct instead of collapsing to one value."""
        assert fingerprint_service.compute(make_snapshot(query_string="token=%ff")) != \
            fingerprint_service.compute(make_snapshot(query_string="token=%fe"))

    def test_empty_body_is_fingerprinted(self, fingerprint_service, make_snapshot):
        """An empty body still yields a fingerprint."""
        first = fingerprint_service.compute(make_snapshot(body=b""))
        second = fingerprint_service.compute(make_snapshot(body=b""))
        assert first == second

    def test_body_not_consumed(self, fingerprint_service, make_snapshot):
        """Fingerprinting leaves the body readable."""
        snapshot = make_snapshot()
        fingerprint_service.compute(snapshot)
        assert snapshot.body.read() == b'{"item":"A","qty":1}'

    def test_bypassed_body_raises_unsupported(self, fingerprint_service, make_snapshot):
        """A snapshot without a captured body cannot be fingerprinted."""
        snapshot = make_snapshot(body=None, content_type="multipart/form-data")
        with pytest.raises(UnsupportedContentTypeError) as exc_info:
            fingerprint_service.compute(snapshot)
        assert exc_info.value.content_type == "multipart/form-data"


@pytest.mark.unit
class TestFingerprintBodyModes:
    """Tests for byte-exact and canonical JSON body hashing."""

    def test_byte_exact_distinguishes_key_order(self, fingerprint_service, make_snapshot):
        """Byte-exact mode treats reordered JSON as distinct."""
        first = fingerprint_service.compute(make_snapshot(body=b'{"item":"A","qty":1}'))
        second = fingerprint_service.compute(make_snapshot(body=b'{"qty":1,"item":"A"}'))
        assert first != second

    def test_byte_exact_distinguishes_whitespace(self, fingerprint_service, make_snapshot):
        """Byte-exact mode treats reformatted JSON as distinct."""
        first = fingerprint_service.compute(make_snapshot(body=b'{"item":"A","qty":1}'))
        second = fingerprint_service.compute(make_snapshot(body=b'{"item": "A", "qty": 1}'))
        assert first != second

    def test_canonical_json_ignores_key_order_and_whitespace(self, make_snapshot):
        """Canonical mode collapses equivalent JSON documents."""
        service = FingerprintService(canonical_json=True)
        first = service.compute(make_snapshot(body=b'{"item":"A","qty":1}'))
        second = service.compute(make_snapshot(body=b'{ "qty": 1,\n "item": "A" }'))
        assert first == second

    def test_canonical_json_keeps_value_differences(self, make_snapshot):
        """Canonical mode still separates different values."""
        service = FingerprintService(canonical_json=True)
        first = service.compute(make_snapshot(body=b'{"item":"A","qty":1}'))
        second = service.compute(make_snapshot(body=b'{"item":"A","qty":2}'))
        assert first != second

    def test_canonical_json_falls_back_for_invalid_json(self, make_snapshot):
        """Unparseable bodies are hashed byte-exact in canonical mode."""
        canonical = FingerprintService(canonical_json=True)
        exact = FingerprintService()
        snapshot = make_snapshot(body=b"not json")
        assert canonical.compute(snapshot) == exact.compute(snapshot)

    def test_canonical_json_lone_surrogate_falls_back(self, make_snapshot):
        """JSON holding an unpaired surrogate escape is hashed byte-exact."""
        canonical = FingerprintService(canonical_json=True)
        snapshot = make_snapshot(body=b'{"item":"\\ud800","qty":1}')
        assert canonical.compute(snapshot) == FingerprintService().compute(snapshot)

    def test_canonical_json_deep_nesting_falls_back(self, make_snapshot):
        """JSON nested beyond the parser's depth is hashed byte-exact."""
        canonical = FingerprintService(canonical_json=True)
        snapshot = make_snapshot(body=b"[" * 200000 + b"]" * 200000)
        assert canonical.compute(snapshot) == FingerprintService().compute(snapshot)


@pytest.mark.unit
class TestFingerprintCallerScope:
    """Tests for per-caller deduplication."""

    def test_caller_ignored_by_default(self, fingerprint_service, make_snapshot):
        """Global dedup ignores caller identity."""
        assert fingerprint_service.compute(make_snapshot(caller="alice")) == \
            fingerprint_service.compute(make_snapshot(caller="bob"))

    def test_caller_included_when_enabled(self, make_snapshot):
        """Per-caller dedup separates callers."""
        service = FingerprintService(include_caller=True)
        alice = service.compute(make_snapshot(caller="alice"))
        assert alice != service.compute(make_snapshot(caller="bob"))
        assert alice == service.compute(make_snapshot(caller="alice"))

    def test_anonymous_callers_share_scope(self, make_snapshot):
        """Requests without caller identity share one dedup space."""
        service = FingerprintService(include_caller=True)
        assert service.compute(make_snapshot()) == service.compute(make_snapshot())
        assert service.compute(make_snapshot()) != service.compute(make_snapshot(caller="alice"))


@pytest.mark.unit
class TestNormalization:
    """Tests for path and query normalization helpers."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("", "/"),
            ("/", "/"),
            ("//", "/"),
            ("/orders/", "/orders"),
            ("orders", "/orders"),
            ("/a//b///c/", "/a/b/c"),
        ],
    )
    def test_normalize_path(self, raw, expected):
        """Paths normalize to a single canonical form."""
        assert normalize_path(raw) == expected

    def test_normalize_query(self):
        """Query pairs are sorted and blank values kept."""
        assert normalize_query("b=2&a=&a=1") == "a=&a=1&b=2"
        assert normalize_query("") == ""

    def test_normalize_query_keeps_escapes(self):
        """Escapes are sorted as sent, and empty segments dropped."""
        assert normalize_query("ref=%fe&&a=%20") == "a=%20&ref=%fe"
