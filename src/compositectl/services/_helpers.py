"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_compact() -> str:
    """Current UTC time as YYYYMMDDHHMMSS, the release stamp of a fresh build."""
    return datetime.now(UTC).strftime("%Y%m%d%H%M%S")
