"""
Centralized configuration for Agency OS.

All values that vary by deployment belong here.
Override via environment variables where marked.
"""

import os

# ============================================================
# Storage
# ============================================================

STORAGE_KEY: str = os.environ.get("AGENCY_OS_STORAGE_KEY", "nerozarb-os-v2")
"""Key under which the whole domain snapshot is stored."""

# ============================================================
# Remote store
# ============================================================

REMOTE_URL: str = os.environ.get("AGENCY_OS_REMOTE_URL", "")
"""Base URL of the optional remote store (PostgREST / Supabase style)."""

REMOTE_KEY: str = os.environ.get("AGENCY_OS_REMOTE_KEY", "")
"""Anon/service key sent as `apikey` and bearer token to the remote store."""

REMOTE_TIMEOUT: float = float(os.environ.get("AGENCY_OS_REMOTE_TIMEOUT", "10"))
"""Seconds before the startup remote fetch gives up."""

REMOTE_PLACEHOLDER_URL = "https://placeholder-project.supabase.co"
"""Template URL shipped in example env files; treated as not configured."""

# ============================================================
# Logging / API
# ============================================================

LOG_LEVEL: str = os.environ.get("AGENCY_OS_LOG_LEVEL", "INFO")
"""Root log level for CLI and API processes."""

CORS_ORIGINS: str = os.environ.get("CORS_ORIGINS", "*")
"""Comma-separated allowed origins for the dashboard UI ('*' in dev)."""


def remote_configured(url: str | None = None, key: str | None = None) -> bool:
    """True when both remote URL and key are set and the URL is not the placeholder."""
    url = REMOTE_URL if url is None else url
    key = REMOTE_KEY if key is None else key
    return bool(url and key and url.rstrip("/") != REMOTE_PLACEHOLDER_URL)
