"""
Unit tests for the link prober.
"""

import asyncio

import httpx
import pytest
import respx

from linkaudit.models import LinkProbeResult
from linkaudit.prober import LinkProber


class _SlowClient:
    """Stands in for httpx.AsyncClient and records how many HEADs overlap."""

    def __init__(self, delay: float = 0.01):
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = 0

    async def head(self, url, **kwargs):
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        return httpx.Response(200, request=httpx.Request("HEAD", url))


class _FailingClient:
    """Raises the configured exception for a URL, otherwise answers 200."""

    def __init__(self, errors: dict):
        self.errors = errors

    async def head(self, url, **kwargs):
        if url in self.errors:
            raise self.errors[url]
        return httpx.Response(200, request=httpx.Request("HEAD", url))


class TestLinkProber:
    """Tests for LinkProber class."""

    @pytest.mark.asyncio
    async def test_records_status_codes(self):
        with respx.mock:
            respx.head("https://example.com/ok").respond(200)
            respx.head("https://example.com/gone").respond(404)
            respx.head("https://example.com/error").respond(503)

            async with httpx.AsyncClient() as client:
                results = await LinkProber(client).probe_all(
                    [
                        "https://example.com/ok",
                        "https://example.com/gone",
                        "https://example.com/error",
                    ]
                )

        assert results == [
            LinkProbeResult("https://example.com/ok", 200),
            LinkProbeResult("https://example.com/gone", 404),
            LinkProbeResult("https://example.com/error", 503),
        ]

    @pytest.mark.asyncio
    async def test_uses_head_requests(self):
        with respx.mock:
            route = respx.head("https://example.com/ok").respond(200)

            async with httpx.AsyncClient() as client:
                await LinkProber(client, user_agent="ProbeBot/1.0").probe("https://example.com/ok")

        assert route.called
        assert route.calls.last.request.method == "HEAD"
        assert route.calls.last.request.headers["User-Agent"] == "ProbeBot/1.0"

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        with respx.mock:
            respx.head("https://example.com/old").respond(
                301, headers={"Location": "https://example.com/new"}
            )
            respx.head("https://example.com/new").respond(200)

            async with httpx.AsyncClient() as client:
                result = await LinkProber(client).probe("https://example.com/old")

        assert result == LinkProbeResult("https://example.com/old", 200)

    @pytest.mark.asyncio
    async def test_connection_failure_is_status_zero(self):
        """Test that a failed probe becomes data instead of an exception."""
        with respx.mock:
            respx.head("https://example.com/refused").mock(side_effect=httpx.ConnectError)
            respx.head("https://example.com/slow").mock(side_effect=httpx.ReadTimeout)
            respx.head("https://example.com/ok").respond(200)

            async with httpx.AsyncClient() as client:
                results = await LinkProber(client).probe_all(
                    [
                        "https://example.com/refused",
                        "https://example.com/slow",
                        "https://example.com/ok",
                    ]
                )

        assert [result.status for result in results] == [0, 0, 200]
        assert [result.broken for result in results] == [True, True, False]

    @pytest.mark.asyncio
    async def test_empty_link_list(self):
        async with httpx.AsyncClient() as client:
            assert await LinkProber(client).probe_all([]) == []

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        """Test that no more than max_concurrency probes run at once."""
        client = _SlowClient()
        links = [f"https://example.com/page-{i}" for i in range(25)]

        results = await LinkProber(client, max_concurrency=4).probe_all(links)

        assert client.calls == 25
        assert client.max_in_flight == 4
        assert [result.url for result in results] == links

    @pytest.mark.asyncio
    async def test_socket_level_errors_are_status_zero(self):
        """Test that errors httpx lets through from the socket layer stay per-link."""
        client = _FailingClient({
            "https://example.com:99999/x": OverflowError("connect(): port must be 0-65535."),
            "https://example.com/reset": ConnectionResetError(),
        })

        results = await LinkProber(client).probe_all(
            ["https://example.com:99999/x", "https://example.com/reset", "https://example.com/ok"]
        )

        assert [result.status for result in results] == [0, 0, 200]

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError, match="max_concurrency"):
            LinkProber(_SlowClient(), max_concurrency=0)
