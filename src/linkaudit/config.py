"""Runtime settings for the link auditor.

Values can be overridden via environment variables or a `.env` file in the
working directory (loaded when this module is imported). Engine classes take
explicit arguments; the CLI and the API build them from :data:`settings`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv(override=False)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


DEDUP_POLICIES = ("exact", "path")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _env_dedup_policy(name: str, default: str) -> str:
    value = os.environ.get(name, default).strip().lower()
    if value not in DEDUP_POLICIES:
        raise ValueError(f"{name} must be one of {', '.join(DEDUP_POLICIES)}, got {value!r}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Probing
    # ------------------------------------------------------------------
    max_concurrency: int = field(
        default_factory=lambda: _env_int("LINKAUDIT_MAX_CONCURRENCY", 10)
    )
    probe_timeout_ms: int = field(
        default_factory=lambda: _env_int("LINKAUDIT_PROBE_TIMEOUT_MS", 5000)
    )

    # ------------------------------------------------------------------
    # Primary fetch
    # ------------------------------------------------------------------
    fetch_timeout_ms: int = field(
        default_factory=lambda: _env_int("LINKAUDIT_FETCH_TIMEOUT_MS", 30000)
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("LINKAUDIT_USER_AGENT", DEFAULT_USER_AGENT)
    )
    render_js: bool = field(default_factory=lambda: _env_bool("LINKAUDIT_RENDER_JS", False))

    # ------------------------------------------------------------------
    # Whole audit
    # ------------------------------------------------------------------
    audit_timeout_ms: int = field(
        default_factory=lambda: _env_int("LINKAUDIT_AUDIT_TIMEOUT_MS", 120000)
    )
    dedup_policy: str = field(
        default_factory=lambda: _env_dedup_policy("LINKAUDIT_DEDUP_POLICY", "exact")
    )


settings = Settings()
