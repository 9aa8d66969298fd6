"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single ``httpx.AsyncClient`` and builds one
:class:`~linkaudit.AuditRunner` around it (shared across all requests via
``request.app.state.runner``). The client only pools connections; no audit
state outlives a request. On shutdown the client is closed.

Routes
------
    POST /api/internal-link-checker   → audit one page's internal links
    GET  /api/health                  → liveness check
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from linkaudit import AuditRunner, InvalidUrl
from linkaudit.config import Settings, settings as default_settings

from linkaudit_api import routes


def build_runner(config: Settings, client: httpx.AsyncClient) -> AuditRunner:
    """Return an AuditRunner configured from *config* that reuses *client*."""
    return AuditRunner(
        max_concurrency=config.max_concurrency,
        fetch_timeout=config.fetch_timeout_ms,
        probe_timeout=config.probe_timeout_ms,
        audit_timeout=config.audit_timeout_ms,
        user_agent=config.user_agent,
        dedup_policy=config.dedup_policy,
        render_js=config.render_js,
        client=client,
    )


async def _invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies the same way as a bad URL."""
    error = InvalidUrl()
    return JSONResponse(error.to_dict(), status_code=error.status_code)


def create_app(config: Settings | None = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the shared HTTP client on startup and close it on shutdown."""
        client = httpx.AsyncClient(
            follow_redirects=True,
            limits=httpx.Limits(max_connections=config.max_concurrency * 4),
        )
        app.state.runner = build_runner(config, client)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="Internal Link Checker API",
        description=(
            "Fetches a page, extracts its same-host links, probes each one "
            "and reports broken links, issues and recommendations."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, _invalid_request_handler)
    app.include_router(routes.router, prefix="/api")

    return app


# Module-level instance used by uvicorn:
#   uvicorn linkaudit_api.app:app --reload
app = create_app()
