"""
Core data models for the internal link auditor.

All models are plain data structures created per audit and discarded afterwards.
They serialize to the JSON shape shared by the CLI, the API and file exports.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from urllib.parse import urlparse

from .errors import AuditError, InvalidUrl


class DedupPolicy(str, Enum):
    """How resolved internal links are considered equal."""

    EXACT = "exact"  # full absolute URL, query strings stay distinct
    PATH = "path"  # query string dropped before comparison


@dataclass(frozen=True)
class AuditRequest:
    """
    The URL to audit, validated on creation.

    Frozen to ensure immutability once created.
    """

    url: str

    def __post_init__(self):
        """Validate URL format."""
        if not self.url or not isinstance(self.url, str):
            raise InvalidUrl()

        try:
            parsed = urlparse(self.url)
            hostname = parsed.hostname
            parsed.port  # raises ValueError when out of range
        except ValueError as e:
            raise InvalidUrl(str(e)) from e

        if parsed.scheme not in ("http", "https"):
            raise InvalidUrl(f"URL must start with http:// or https://: {self.url}")
        if not hostname:
            raise InvalidUrl(f"URL has no hostname: {self.url}")

    @property
    def hostname(self) -> str:
        return urlparse(self.url).hostname or ""


@dataclass
class RawPage:
    """
    The primary page as returned by a fetcher.

    Only lives until its links have been extracted.
    """

    source_url: str  # URL as requested
    final_url: str  # URL after redirects
    html: str
    http_status: int
    fetch_time_ms: int = 0


@dataclass
class ExtractedLinks:
    """Internal links found on a page."""

    total_links: int  # resolved internal candidates, duplicates included
    links: list[str]  # deduplicated, in first-seen order

    @property
    def unique_links(self) -> int:
        return len(self.links)


@dataclass(frozen=True)
class LinkProbeResult:
    """
    Outcome of one liveness probe.

    A status of 0 means no HTTP response was received (timeout, DNS failure,
    refused connection).
    """

    url: str
    status: int

    @property
    def broken(self) -> bool:
        return self.status == 0 or self.status >= 400

    def to_dict(self) -> dict:
        return {"url": self.url, "status": self.status}


@dataclass
class AuditReport:
    """
    Link health report for a single page.

    This is the terminal artifact of an audit.
    """

    url: str
    total_links: int
    unique_links: int
    broken_links: list[LinkProbeResult]
    issues: list[str]
    recommendations: list[str]
    links: list[str]
    probes: list[LinkProbeResult] = field(default_factory=list, repr=False)

    @property
    def has_issues(self) -> bool:
        return len(self.issues) > 0

    def link_statuses(self) -> list[tuple[str, int | None]]:
        """
        Pair every link with its probed status.

        Links without a probe result get None.
        """
        statuses = {probe.url: probe.status for probe in self.probes}
        for broken in self.broken_links:
            statuses[broken.url] = broken.status
        return [(link, statuses.get(link)) for link in self.links]

    def to_dict(self) -> dict:
        """
        Convert the report to its wire format.

        Used for JSON export and API responses.
        """
        return {
            "url": self.url,
            "totalLinks": self.total_links,
            "uniqueLinks": self.unique_links,
            "brokenLinks": [broken.to_dict() for broken in self.broken_links],
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
            "links": list(self.links),
        }


@dataclass
class AuditOutcome:
    """Result of auditing one URL in a batch: either a report or an error."""

    url: str
    report: AuditReport | None = None
    error: AuditError | None = None

    @property
    def success(self) -> bool:
        return self.report is not None and self.error is None

    def to_dict(self) -> dict:
        if self.report is not None:
            return self.report.to_dict()
        data = {"url": self.url}
        if self.error is not None:
            data.update(self.error.to_dict())
        return data


@dataclass
class BatchResult:
    """
    Complete results for a batch of audited URLs.

    Represents the full output of a CLI run.
    """

    started_at: datetime
    finished_at: datetime | None
    outcomes: list[AuditOutcome]

    @property
    def urls_processed(self) -> int:
        return len(self.outcomes)

    @property
    def urls_succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def urls_failed(self) -> int:
        return self.urls_processed - self.urls_succeeded

    @property
    def success_rate(self) -> float:
        """Percentage of URLs audited successfully."""
        if self.urls_processed == 0:
            return 0.0
        return round((self.urls_succeeded / self.urls_processed) * 100, 2)

    def get_failed_outcomes(self) -> list[AuditOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    def get_reports_with_issues(self) -> list[AuditReport]:
        return [
            outcome.report
            for outcome in self.outcomes
            if outcome.report is not None and outcome.report.has_issues
        ]
