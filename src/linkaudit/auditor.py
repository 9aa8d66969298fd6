"""
Link auditor for classifying probe results into a report.

Rules are independent checks evaluated in a fixed order; every rule that
applies adds one issue and its paired recommendation.
"""

from .models import AuditReport, ExtractedLinks, LinkProbeResult


class LinkAuditor:
    """
    Turns extracted links and probe results into an AuditReport.

    Never raises: whatever the extractor and prober produced becomes a report.
    """

    def __init__(self, max_links: int = 100) -> None:
        """
        Initialize the auditor.

        Args:
            max_links: Unique link count above which a page has too many links
        """
        self.max_links = max_links

    def build_report(
        self,
        url: str,
        extracted: ExtractedLinks,
        probes: list[LinkProbeResult],
    ) -> AuditReport:
        """
        Build the report for one page.

        Args:
            url: The audited URL
            extracted: Links found on the page
            probes: Probe results for ``extracted.links``

        Returns:
            AuditReport with broken links, issues and recommendations
        """
        members = set(extracted.links)
        broken_links: list[LinkProbeResult] = []
        reported: set[str] = set()
        for probe in probes:
            if probe.broken and probe.url in members and probe.url not in reported:
                reported.add(probe.url)
                broken_links.append(probe)

        issues, recommendations = self._evaluate(extracted.unique_links, len(broken_links))

        return AuditReport(
            url=url,
            total_links=extracted.total_links,
            unique_links=extracted.unique_links,
            broken_links=broken_links,
            issues=issues,
            recommendations=recommendations,
            links=list(extracted.links),
            probes=list(probes),
        )

    def _evaluate(self, unique_links: int, broken_count: int) -> tuple[list[str], list[str]]:
        issues: list[str] = []
        recommendations: list[str] = []

        if unique_links == 0:
            issues.append("No internal links found.")
            recommendations.append("Add internal links to improve site structure and SEO.")

        if broken_count > 0:
            issues.append(f"{broken_count} broken internal link(s) found.")
            recommendations.append("Fix or remove broken internal links.")

        if unique_links > self.max_links:
            issues.append("Too many internal links on a single page.")
            recommendations.append("Limit the number of internal links to improve crawlability.")

        return issues, recommendations
