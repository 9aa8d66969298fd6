"""
Fetcher implementations for retrieving the audited page.

Provides a plain HTTP fetcher and an opt-in headless-browser fetcher for pages
whose links are only present after JavaScript runs.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

import httpx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import DEFAULT_USER_AGENT
from .errors import FetchFailed, InvalidUrl, PageUnreachable
from .models import RawPage

logger = logging.getLogger(__name__)


class Fetcher(ABC):
    """
    Abstract base class for fetchers.

    A fetcher either returns the final page or raises FetchFailed / PageUnreachable.
    There is no retry: the audit cannot continue without its root page.
    """

    @abstractmethod
    async def fetch(self, url: str, timeout: int = 30000) -> RawPage:
        """
        Fetch a URL.

        Args:
            url: The URL to fetch
            timeout: Timeout in milliseconds

        Returns:
            RawPage for the final response in the redirect chain

        Raises:
            FetchFailed: If no response could be obtained
            PageUnreachable: If the final response has a 4xx/5xx status
        """
        pass


class PageFetcher(Fetcher):
    """
    Fetches pages without JavaScript execution.

    Uses a shared httpx client. Follows redirects and sends a browser-like User-Agent.
    """

    def __init__(self, client: httpx.AsyncClient, user_agent: str | None = None):
        """
        Initialize the page fetcher.

        Args:
            client: Shared HTTP client, reused across audits
            user_agent: Custom User-Agent header (optional)
        """
        self.client = client
        self.user_agent = user_agent or DEFAULT_USER_AGENT

    async def fetch(self, url: str, timeout: int = 30000) -> RawPage:
        start_time = asyncio.get_running_loop().time()

        try:
            response = await self.client.get(
                url,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                timeout=timeout / 1000.0,
            )
        except httpx.InvalidURL as e:
            raise InvalidUrl(str(e)) from e
        except httpx.TimeoutException as e:
            logger.warning("Timed out fetching %s after %dms", url, timeout)
            raise FetchFailed(url, f"timeout after {timeout}ms") from e
        except httpx.HTTPError as e:
            logger.warning("Could not fetch %s: %s", url, e)
            raise FetchFailed(url, str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            logger.warning("Audited page %s answered %d", url, response.status_code)
            raise PageUnreachable(response.status_code, response.reason_phrase)

        fetch_time_ms = int((asyncio.get_running_loop().time() - start_time) * 1000)

        return RawPage(
            source_url=url,
            final_url=str(response.url),
            html=response.text,
            http_status=response.status_code,
            fetch_time_ms=fetch_time_ms,
        )


class RenderedPageFetcher(Fetcher):
    """
    Fetches pages with JavaScript execution enabled.

    Uses Playwright for headless browser rendering, so links injected client-side
    are visible to the extractor.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        wait_strategy: str = "network_idle",
        headless: bool = True,
    ):
        """
        Initialize the rendering fetcher.

        Args:
            user_agent: Custom User-Agent header (optional)
            wait_strategy: Wait strategy ('network_idle', 'load', or 'timeout')
            headless: Whether to run browser in headless mode
        """
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.wait_strategy = wait_strategy
        self.headless = headless

    async def fetch(self, url: str, timeout: int = 30000) -> RawPage:
        from playwright.async_api import async_playwright

        start_time = asyncio.get_running_loop().time()

        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=self.headless)
                try:
                    page = await browser.new_page(user_agent=self.user_agent)
                    response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout)

                    if not response:
                        raise FetchFailed(url, "no response received")
                    if response.status >= 400:
                        logger.warning("Audited page %s answered %d", url, response.status)
                        raise PageUnreachable(response.status, response.status_text)

                    await self._wait_for_content(page, timeout)

                    html = await page.content()
                    final_url = page.url
                    status = response.status
                finally:
                    await browser.close()

        except PlaywrightTimeoutError as e:
            logger.warning("Timed out rendering %s after %dms", url, timeout)
            raise FetchFailed(url, f"render timeout after {timeout}ms") from e
        except PlaywrightError as e:
            logger.warning("Could not render %s: %s", url, e)
            raise FetchFailed(url, f"render error: {e.message}") from e

        fetch_time_ms = int((asyncio.get_running_loop().time() - start_time) * 1000)

        return RawPage(
            source_url=url,
            final_url=final_url,
            html=html,
            http_status=status,
            fetch_time_ms=fetch_time_ms,
        )

    async def _wait_for_content(self, page: Page, timeout: int):
        """
        Apply wait strategy to ensure scripted links are in the DOM.

        Args:
            page: Playwright Page object
            timeout: Timeout in milliseconds
        """
        if self.wait_strategy == "load":
            await page.wait_for_load_state("load", timeout=timeout)

        elif self.wait_strategy == "timeout":
            # Wait half of the total timeout
            await asyncio.sleep(timeout / 2000.0)

        else:
            # No more than 2 connections for 500ms
            try:
                await page.wait_for_load_state("networkidle", timeout=timeout)
            except PlaywrightTimeoutError:
                # Keep what domcontentloaded produced
                pass
