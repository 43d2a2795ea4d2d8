"""Shared column helpers for ORM models."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware now; used as Python-side default so ordering keeps microseconds."""
    return datetime.now(timezone.utc)
