"""
Audit runner for orchestrating the full link audit pipeline.

Fetch the page, extract internal links, probe them, build the report.
"""

import asyncio
import logging
from datetime import datetime

import httpx

from .auditor import LinkAuditor
from .errors import AuditError, AuditTimeout, UnexpectedInternalError
from .extractor import LinkExtractor
from .fetcher import Fetcher, PageFetcher, RenderedPageFetcher
from .models import AuditOutcome, AuditReport, AuditRequest, BatchResult, DedupPolicy
from .prober import LinkProber

logger = logging.getLogger(__name__)


class AuditRunner:
    """
    Orchestrates link audits for one or more URLs.

    Designed to be reusable by both the CLI and the API. The runner holds
    configuration only; every audit creates its own transient data.
    """

    def __init__(
        self,
        max_concurrency: int = 10,
        fetch_timeout: int = 30000,
        probe_timeout: int = 5000,
        audit_timeout: int | None = 120000,
        user_agent: str | None = None,
        dedup_policy: DedupPolicy | str = DedupPolicy.EXACT,
        render_js: bool = False,
        client: httpx.AsyncClient | None = None,
        fetcher: Fetcher | None = None,
    ):
        """
        Initialize the audit runner.

        Args:
            max_concurrency: Maximum number of link probes in flight per audit
            fetch_timeout: Timeout for the primary page fetch in milliseconds
            probe_timeout: Timeout for each link probe in milliseconds
            audit_timeout: Deadline for a whole audit in milliseconds (None disables it)
            user_agent: Custom User-Agent header (optional)
            dedup_policy: How internal links are deduplicated ('exact' or 'path')
            render_js: Render the page in a headless browser before extracting links
            client: Shared HTTP client; one is opened per call when omitted
            fetcher: Custom fetcher for the primary page (optional)
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1: {max_concurrency}")

        self.max_concurrency = max_concurrency
        self.fetch_timeout = fetch_timeout
        self.probe_timeout = probe_timeout
        self.audit_timeout = audit_timeout
        self.user_agent = user_agent
        self.dedup_policy = DedupPolicy(dedup_policy)
        self.render_js = render_js
        self.client = client
        self.fetcher = fetcher

        self.auditor = LinkAuditor()

    async def run_audit_async(self, url: str) -> AuditReport:
        """
        Audit a single URL.

        Args:
            url: Absolute http(s) URL of the page to audit

        Returns:
            AuditReport for the page

        Raises:
            InvalidUrl: If the URL is not valid; no request is made
            FetchFailed: If the page could not be retrieved
            PageUnreachable: If the page answered with a 4xx/5xx status
            AuditTimeout: If the audit exceeded its deadline
            UnexpectedInternalError: For anything else
        """
        request = AuditRequest(url)

        if self.client is not None:
            return await self._run_with_deadline(request, self.client)

        async with self._open_client() as client:
            return await self._run_with_deadline(request, client)

    def run_audit(self, url: str) -> AuditReport:
        """
        Audit a single URL synchronously.

        Convenience method that wraps run_audit_async.
        """
        return asyncio.run(self.run_audit_async(url))

    async def run_batch_async(self, urls: list[str]) -> BatchResult:
        """
        Audit several URLs one after another.

        A failed audit is recorded in its outcome and does not stop the batch.

        Args:
            urls: URLs to audit; blank entries and duplicates are dropped

        Returns:
            BatchResult with one outcome per URL
        """
        started_at = datetime.now()
        outcomes: list[AuditOutcome] = []

        if self.client is not None:
            await self._run_batch(self._deduplicate(urls), self.client, outcomes)
        else:
            async with self._open_client() as client:
                await self._run_batch(self._deduplicate(urls), client, outcomes)

        return BatchResult(started_at=started_at, finished_at=datetime.now(), outcomes=outcomes)

    def run_batch(self, urls: list[str]) -> BatchResult:
        """
        Audit several URLs synchronously.

        Convenience method that wraps run_batch_async.
        """
        return asyncio.run(self.run_batch_async(urls))

    async def _run_batch(
        self,
        urls: list[str],
        client: httpx.AsyncClient,
        outcomes: list[AuditOutcome],
    ) -> None:
        for url in urls:
            try:
                request = AuditRequest(url)
                report = await self._run_with_deadline(request, client)
                outcomes.append(AuditOutcome(url=url, report=report))
            except AuditError as e:
                outcomes.append(AuditOutcome(url=url, error=e))

    def _deduplicate(self, urls: list[str]) -> list[str]:
        return list(dict.fromkeys(url.strip() for url in urls if url and url.strip()))

    def _open_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            limits=httpx.Limits(max_connections=self.max_concurrency + 1),
        )

    async def _run_with_deadline(
        self,
        request: AuditRequest,
        client: httpx.AsyncClient,
    ) -> AuditReport:
        logger.info("Auditing internal links on %s", request.url)

        try:
            if self.audit_timeout is None:
                report = await self._audit(request, client)
            else:
                report = await asyncio.wait_for(
                    self._audit(request, client), timeout=self.audit_timeout / 1000.0
                )
        except AuditError:
            raise
        except asyncio.TimeoutError as e:
            logger.warning("Audit of %s exceeded %dms", request.url, self.audit_timeout)
            raise AuditTimeout(self.audit_timeout) from e
        except Exception as e:
            logger.exception("Internal link check failed for %s", request.url)
            raise UnexpectedInternalError() from e

        logger.info(
            "Audited %s: %d unique links, %d broken",
            request.url,
            report.unique_links,
            len(report.broken_links),
        )
        return report

    async def _audit(self, request: AuditRequest, client: httpx.AsyncClient) -> AuditReport:
        fetcher = self._get_fetcher(client)
        page = await fetcher.fetch(request.url, timeout=self.fetch_timeout)

        # Links resolve against the requested URL, not the post-redirect one
        extractor = LinkExtractor(base_url=request.url, dedup_policy=self.dedup_policy)
        extracted = extractor.extract(page.html)

        prober = LinkProber(
            client,
            max_concurrency=self.max_concurrency,
            timeout=self.probe_timeout,
            user_agent=self.user_agent,
        )
        probes = await prober.probe_all(extracted.links)

        return self.auditor.build_report(request.url, extracted, probes)

    def _get_fetcher(self, client: httpx.AsyncClient) -> Fetcher:
        if self.fetcher is not None:
            return self.fetcher
        if self.render_js:
            return RenderedPageFetcher(user_agent=self.user_agent)
        return PageFetcher(client, user_agent=self.user_agent)
