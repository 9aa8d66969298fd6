"""
Link extractor for turning page HTML into the set of internal links.

Parsing is tolerant: malformed markup degrades to fewer links, never to an error.
"""

import logging
from urllib.parse import urldefrag, urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup

from .models import DedupPolicy, ExtractedLinks

logger = logging.getLogger(__name__)


class LinkExtractor:
    """
    Extracts same-host links from HTML.

    A link is internal only when its resolved hostname equals the audited
    page's hostname exactly; subdomains count as external.
    """

    # href prefixes that never name a distinct page
    SKIPPED_PREFIXES = ("#", "?")

    ALLOWED_SCHEMES = ("http", "https")

    def __init__(self, base_url: str, dedup_policy: DedupPolicy = DedupPolicy.EXACT):
        """
        Initialize the link extractor.

        Args:
            base_url: The audited URL; relative links resolve against it
            dedup_policy: How resolved links are compared for deduplication
        """
        self.base_url = base_url
        self.base_hostname = urlparse(base_url).hostname
        self.dedup_policy = DedupPolicy(dedup_policy)

    def extract(self, html: str) -> ExtractedLinks:
        """
        Extract internal links from HTML.

        Args:
            html: HTML string to parse

        Returns:
            ExtractedLinks with the duplicate-inclusive count and the unique links
        """
        soup = BeautifulSoup(html, "lxml")

        total_links = 0
        seen: set[str] = set()
        links: list[str] = []

        for anchor in soup.find_all("a", href=True):
            resolved = self._resolve(anchor["href"])
            if resolved is None:
                continue

            total_links += 1
            if resolved not in seen:
                seen.add(resolved)
                links.append(resolved)

        return ExtractedLinks(total_links=total_links, links=links)

    def _resolve(self, href) -> str | None:
        """
        Resolve an href to an absolute internal URL.

        Args:
            href: Raw attribute value

        Returns:
            The normalized absolute URL, or None if the candidate is skipped
        """
        if isinstance(href, list):
            # Multi-valued attribute on some tree builders
            href = " ".join(href)

        href = href.strip()
        if not href or href.startswith(self.SKIPPED_PREFIXES):
            return None

        try:
            absolute, _fragment = urldefrag(urljoin(self.base_url, href))
            parsed = urlparse(absolute)
            hostname = parsed.hostname
            parsed.port  # raises ValueError when out of range
        except ValueError as e:
            logger.debug("Skipping unresolvable link %r: %s", href, e)
            return None

        if parsed.scheme not in self.ALLOWED_SCHEMES or hostname != self.base_hostname:
            return None

        if self.dedup_policy is DedupPolicy.PATH and parsed.query:
            absolute = urlunparse(parsed._replace(query=""))

        return absolute
