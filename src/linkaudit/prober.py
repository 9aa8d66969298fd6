"""
Liveness prober for internal links.

Issues HEAD requests with bounded concurrency. A failed probe is recorded as
status 0 so that one dead link never stops the others from being checked.
"""

import asyncio
import logging

import httpx

from .config import DEFAULT_USER_AGENT
from .models import LinkProbeResult

logger = logging.getLogger(__name__)

# Status recorded when no HTTP response was received
NO_RESPONSE = 0


class LinkProber:
    """
    Probes links with at most ``max_concurrency`` requests in flight.

    Holds no state between calls; the HTTP client is shared and reused.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_concurrency: int = 10,
        timeout: int = 5000,
        user_agent: str | None = None,
    ):
        """
        Initialize the prober.

        Args:
            client: Shared HTTP client
            max_concurrency: Maximum number of probes in flight
            timeout: Per-probe timeout in milliseconds
            user_agent: Custom User-Agent header (optional)
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1: {max_concurrency}")

        self.client = client
        self.max_concurrency = max_concurrency
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT

    async def probe_all(self, links: list[str]) -> list[LinkProbeResult]:
        """
        Probe every link.

        Args:
            links: Absolute URLs to probe

        Returns:
            One LinkProbeResult per link, in the order given
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(link: str) -> LinkProbeResult:
            async with semaphore:
                return await self.probe(link)

        return list(await asyncio.gather(*(bounded(link) for link in links)))

    async def probe(self, url: str) -> LinkProbeResult:
        """
        Probe a single link with a HEAD request.

        Args:
            url: Absolute URL to probe

        Returns:
            LinkProbeResult with the final HTTP status, or 0 on network failure
        """
        try:
            response = await self.client.head(
                url,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                timeout=self.timeout / 1000.0,
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError, OverflowError) as e:
            logger.info("Probe failed for %s: %s", url, type(e).__name__)
            return LinkProbeResult(url=url, status=NO_RESPONSE)

        return LinkProbeResult(url=url, status=response.status_code)
