"""
Internal link auditor.

Core engine for fetching a page, extracting its same-host links, probing each
one for liveness and reporting on the page's link health. Designed to be
reusable by the CLI and the API.
"""

# Errors
from .errors import (
    AuditError,
    AuditTimeout,
    FetchFailed,
    InvalidUrl,
    PageUnreachable,
    UnexpectedInternalError,
)

# Core models
from .models import (
    AuditOutcome,
    AuditReport,
    AuditRequest,
    BatchResult,
    DedupPolicy,
    ExtractedLinks,
    LinkProbeResult,
    RawPage,
)

# Main orchestrator
from .runner import AuditRunner

__all__ = [
    # Models
    "AuditRequest",
    "RawPage",
    "ExtractedLinks",
    "LinkProbeResult",
    "AuditReport",
    "AuditOutcome",
    "BatchResult",
    "DedupPolicy",
    # Errors
    "AuditError",
    "InvalidUrl",
    "FetchFailed",
    "PageUnreachable",
    "AuditTimeout",
    "UnexpectedInternalError",
    # Main entry point
    "AuditRunner",
]
