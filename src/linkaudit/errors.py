"""
Error taxonomy for link audits.

Every error a caller can see derives from AuditError and carries a single-sentence
message plus the HTTP status class used by the API surface.
"""


class AuditError(Exception):
    """Base exception for audits that could not produce a report."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Serialize to the structured error shape returned to callers."""
        return {"error": self.message}


class InvalidUrl(AuditError):
    """Raised when the requested URL is missing or not an absolute http(s) URL."""

    status_code = 400

    def __init__(self, detail: str | None = None):
        message = "Invalid URL" if not detail else f"Invalid URL: {detail}"
        super().__init__(message)


class PageUnreachable(AuditError):
    """Raised when the audited page answers with a 4xx/5xx status."""

    status_code = 400

    def __init__(self, status: int, reason: str = ""):
        self.status = status
        self.reason = reason
        super().__init__(f"Failed to fetch page: {status} {reason}".rstrip())


class FetchFailed(AuditError):
    """Raised when the audited page could not be retrieved at all."""

    def __init__(self, url: str, cause: str):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to fetch page: {cause}")


class AuditTimeout(AuditError):
    """Raised when the whole audit exceeds its deadline."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Link audit timed out after {timeout_ms / 1000:g}s.")


class UnexpectedInternalError(AuditError):
    """Wraps any failure not covered by the other categories."""

    def __init__(self):
        super().__init__("Failed to check internal links.")
