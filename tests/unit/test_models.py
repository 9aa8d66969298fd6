"""
Unit tests for core data models and errors.
"""

from datetime import datetime

import pytest

from linkaudit.errors import (
    AuditTimeout,
    FetchFailed,
    InvalidUrl,
    PageUnreachable,
    UnexpectedInternalError,
)
from linkaudit.models import (
    AuditOutcome,
    AuditReport,
    AuditRequest,
    BatchResult,
    LinkProbeResult,
)


def _report(**overrides) -> AuditReport:
    values = {
        "url": "https://example.com",
        "total_links": 3,
        "unique_links": 2,
        "broken_links": [LinkProbeResult("https://example.com/b", 404)],
        "issues": ["1 broken internal link(s) found."],
        "recommendations": ["Fix or remove broken internal links."],
        "links": ["https://example.com/a", "https://example.com/b"],
    }
    values.update(overrides)
    return AuditReport(**values)


class TestAuditRequest:
    """Tests for AuditRequest model."""

    def test_valid_http_url(self):
        """Test that valid HTTP URL is accepted."""
        request = AuditRequest("http://example.com")
        assert request.url == "http://example.com"
        assert request.hostname == "example.com"

    def test_valid_https_url_with_path(self):
        """Test that valid HTTPS URL is accepted."""
        request = AuditRequest("https://Example.com/path?q=1")
        assert request.hostname == "example.com"

    def test_invalid_url_no_scheme(self):
        """Test that URL without http/https scheme is rejected."""
        with pytest.raises(InvalidUrl, match="must start with http:// or https://"):
            AuditRequest("not-a-url")

    def test_invalid_url_other_scheme(self):
        """Test that non-web schemes are rejected."""
        with pytest.raises(InvalidUrl):
            AuditRequest("ftp://example.com/file")

    def test_invalid_url_no_host(self):
        """Test that URL without a hostname is rejected."""
        with pytest.raises(InvalidUrl, match="no hostname"):
            AuditRequest("https:///path")

    def test_invalid_url_empty(self):
        """Test that empty URL is rejected."""
        with pytest.raises(InvalidUrl):
            AuditRequest("")

    def test_invalid_url_none(self):
        """Test that None URL is rejected."""
        with pytest.raises(InvalidUrl):
            AuditRequest(None)

    def test_invalid_url_not_a_string(self):
        with pytest.raises(InvalidUrl):
            AuditRequest(42)

    def test_invalid_ipv6_host(self):
        """Test that an unparseable netloc is reported as an invalid URL."""
        with pytest.raises(InvalidUrl):
            AuditRequest("http://[::1")

    def test_invalid_url_port_out_of_range(self):
        """Test that a port above 65535 is rejected before any request."""
        with pytest.raises(InvalidUrl, match="Port out of range"):
            AuditRequest("http://127.0.0.1:99999/")


class TestLinkProbeResult:
    """Tests for LinkProbeResult model."""

    def test_broken_for_4xx_and_5xx(self):
        for status in [400, 404, 410, 500, 503]:
            assert LinkProbeResult("https://example.com", status).broken is True

    def test_broken_for_network_failure(self):
        assert LinkProbeResult("https://example.com", 0).broken is True

    def test_not_broken_below_400(self):
        for status in [200, 204, 301, 304, 399]:
            assert LinkProbeResult("https://example.com", status).broken is False

    def test_to_dict(self):
        assert LinkProbeResult("https://example.com/x", 404).to_dict() == {
            "url": "https://example.com/x",
            "status": 404,
        }


class TestAuditReport:
    """Tests for AuditReport model."""

    def test_to_dict_wire_shape(self):
        """Test that keys match the JSON contract."""
        data = _report().to_dict()

        assert data == {
            "url": "https://example.com",
            "totalLinks": 3,
            "uniqueLinks": 2,
            "brokenLinks": [{"url": "https://example.com/b", "status": 404}],
            "issues": ["1 broken internal link(s) found."],
            "recommendations": ["Fix or remove broken internal links."],
            "links": ["https://example.com/a", "https://example.com/b"],
        }

    def test_has_issues(self):
        assert _report().has_issues is True
        assert _report(issues=[], recommendations=[]).has_issues is False

    def test_link_statuses_uses_probes(self):
        report = _report(
            probes=[
                LinkProbeResult("https://example.com/a", 301),
                LinkProbeResult("https://example.com/b", 404),
            ]
        )
        assert report.link_statuses() == [
            ("https://example.com/a", 301),
            ("https://example.com/b", 404),
        ]

    def test_link_statuses_without_probes(self):
        """Links without a probe result have no status."""
        assert _report().link_statuses() == [
            ("https://example.com/a", None),
            ("https://example.com/b", 404),
        ]


class TestErrors:
    """Tests for the error taxonomy."""

    def test_invalid_url(self):
        error = InvalidUrl()
        assert error.status_code == 400
        assert error.to_dict() == {"error": "Invalid URL"}

    def test_invalid_url_with_detail(self):
        assert InvalidUrl("bad").message == "Invalid URL: bad"

    def test_page_unreachable(self):
        error = PageUnreachable(404, "Not Found")
        assert error.status_code == 400
        assert error.status == 404
        assert error.message == "Failed to fetch page: 404 Not Found"

    def test_page_unreachable_without_reason(self):
        assert PageUnreachable(599).message == "Failed to fetch page: 599"

    def test_fetch_failed(self):
        error = FetchFailed("https://example.com", "connection refused")
        assert error.status_code == 500
        assert error.message == "Failed to fetch page: connection refused"

    def test_audit_timeout(self):
        error = AuditTimeout(1500)
        assert error.status_code == 500
        assert error.message == "Link audit timed out after 1.5s."

    def test_unexpected_internal_error(self):
        error = UnexpectedInternalError()
        assert error.status_code == 500
        assert error.to_dict() == {"error": "Failed to check internal links."}


class TestBatchResult:
    """Tests for BatchResult model."""

    def _batch(self) -> BatchResult:
        return BatchResult(
            started_at=datetime(2024, 1, 1, 12, 0, 0),
            finished_at=datetime(2024, 1, 1, 12, 0, 5),
            outcomes=[
                AuditOutcome(url="https://example.com", report=_report()),
                AuditOutcome(
                    url="https://clean.example.com",
                    report=_report(
                        url="https://clean.example.com",
                        broken_links=[],
                        issues=[],
                        recommendations=[],
                    ),
                ),
                AuditOutcome(url="not-a-url", error=InvalidUrl()),
            ],
        )

    def test_counts(self):
        batch = self._batch()
        assert batch.urls_processed == 3
        assert batch.urls_succeeded == 2
        assert batch.urls_failed == 1
        assert batch.success_rate == 66.67

    def test_success_rate_empty(self):
        batch = BatchResult(started_at=datetime.now(), finished_at=None, outcomes=[])
        assert batch.success_rate == 0.0

    def test_get_failed_outcomes(self):
        failed = self._batch().get_failed_outcomes()
        assert [outcome.url for outcome in failed] == ["not-a-url"]

    def test_get_reports_with_issues(self):
        reports = self._batch().get_reports_with_issues()
        assert [report.url for report in reports] == ["https://example.com"]

    def test_failed_outcome_to_dict(self):
        outcome = AuditOutcome(url="not-a-url", error=InvalidUrl())
        assert outcome.to_dict() == {"url": "not-a-url", "error": "Invalid URL"}
