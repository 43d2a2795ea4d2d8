"""Structured logging helpers (PII-safe)."""

from typing import Any
from uuid import UUID


def build_log_context(
    *,
    org_id: UUID | str | None = None,
    portfolio_id: UUID | str | None = None,
    batch_id: UUID | str | None = None,
    import_type: str | None = None,
    row: int | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict for use as ``extra=``."""
    context: dict[str, Any] = {}
    if org_id:
        context["org_id"] = str(org_id)
    if portfolio_id:
        context["portfolio_id"] = str(portfolio_id)
    if batch_id:
        context["batch_id"] = str(batch_id)
    if import_type:
        context["import_type"] = import_type
    if row is not None:
        context["row"] = row
    return context
