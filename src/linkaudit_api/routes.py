"""Link checker endpoints.

Routes
------
POST /internal-link-checker    Body: {"url": "https://..."}    → AuditReport JSON
GET  /health                                                   → {"status": "ok"}
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from linkaudit import AuditError

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class LinkCheckRequest(BaseModel):
    # Validated by the engine so every bad URL gets the same error shape
    url: str | None = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/internal-link-checker")
async def internal_link_checker(body: LinkCheckRequest, request: Request) -> Any:
    """Audit the internal links of ``body.url``.

    Returns the report on success, otherwise ``{"error": ...}`` with 400 for
    bad input or an unreachable page and 500 for everything else.
    """
    runner = request.app.state.runner
    try:
        report = await runner.run_audit_async(body.url)
    except AuditError as exc:
        logger.info("Internal link check for %r failed: %s", body.url, exc.message)
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)
    return report.to_dict()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
