"""Import batch bookkeeping shared by the account and contact importers.

Features:
- Whole-batch validation errors
- ImportBatch lifecycle: processing → completed | failed
- Result summary returned to the HTTP layer and the CLI
- CSV preview with the saved (or default) mapping applied
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.core.config import settings
from debtdesk.db.enums import ImportStatus, ImportType
from debtdesk.db.models import ImportBatch, Portfolio
from debtdesk.services import import_mapping_service, org_service, portfolio_service
from debtdesk.services.column_mapper import (
    apply_saved_mapping,
    build_default_mapping,
    parse_csv_content,
    suggest_mapping,
)
from debtdesk.services.import_fields import field_names


class ImportValidationError(ValueError):
    """Request cannot be imported at all (rejected before any row runs)."""


class PortfolioNotFoundError(ValueError):
    """Target portfolio does not exist in the tenant."""


# =============================================================================
# Result
# =============================================================================


@dataclass
class ImportResult:
    """Outcome of one import invocation."""

    import_type: ImportType = ImportType.ACCOUNTS
    batch_id: UUID | None = None
    total_records: int = 0
    # accounts
    created: int = 0
    updated: int = 0
    linked: int = 0
    # contacts
    added: int = 0
    matched: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    # [{"row", "account_id", "entity", "error"}]
    fanout_failures: list[dict[str, Any]] = field(default_factory=list)

    def row_error(self, row: int, message: str) -> None:
        self.errors.append(f"Row {row}: {message}")

    def row_warning(self, row: int, message: str) -> None:
        self.warnings.append(f"Row {row}: {message}")

    @property
    def message(self) -> str:
        if self.import_type == ImportType.CONTACTS:
            return f"Import complete: {self.added} contacts added to {self.matched} accounts"
        return (
            f"Import complete: {self.created} created, {self.updated} updated, "
            f"{self.linked} linked across portfolios"
        )


# =============================================================================
# Validation
# =============================================================================


def validate_request(
    db: Session,
    org_id: UUID,
    *,
    portfolio_id: UUID,
    records: list[dict[str, Any]],
    client_id: UUID | None = None,
    mapping_id: UUID | None = None,
) -> Portfolio:
    """
    Whole-batch checks that run before any row is processed.

    Raises:
        PortfolioNotFoundError: portfolio not in this tenant
        ImportValidationError: too many rows, unknown client or mapping
    """
    if len(records) > settings.IMPORT_MAX_ROWS:
        raise ImportValidationError(
            f"Too many records: {len(records)} (max {settings.IMPORT_MAX_ROWS})"
        )

    portfolio = portfolio_service.get_portfolio(db, org_id, portfolio_id)
    if not portfolio:
        raise PortfolioNotFoundError("Portfolio not found")

    if client_id is not None and not org_service.get_client(db, org_id, client_id):
        raise ImportValidationError("Client not found")

    if mapping_id is not None and not import_mapping_service.get_mapping(db, org_id, mapping_id):
        raise ImportValidationError("Import mapping not found")

    return portfolio


# =============================================================================
# Batch records
# =============================================================================


def create_batch(
    db: Session,
    org_id: UUID,
    portfolio_id: UUID,
    import_type: ImportType,
    *,
    total_records: int,
    column_mapping: dict[str, Any] | None = None,
    mapping_id: UUID | None = None,
    file_name: str | None = None,
    file_number_start: int | None = None,
) -> ImportBatch:
    """Create an import batch record in processing state."""
    batch = ImportBatch(
        organization_id=org_id,
        portfolio_id=portfolio_id,
        import_type=import_type.value,
        status=ImportStatus.PROCESSING.value,
        total_records=total_records,
        column_mapping_snapshot=column_mapping,
        mapping_id=mapping_id,
        file_name=file_name,
        file_number_start=file_number_start,
    )
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


def complete_batch(db: Session, batch: ImportBatch, result: ImportResult) -> ImportBatch:
    batch.status = ImportStatus.COMPLETED.value
    batch.created_count = result.created
    batch.updated_count = result.updated
    batch.linked_count = result.linked
    batch.added_count = result.added
    batch.matched_count = result.matched
    batch.error_count = len(result.errors)
    batch.errors = result.errors or None
    batch.warnings = result.warnings or None
    batch.fanout_failures = result.fanout_failures or None
    batch.completed_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(batch)
    return batch


def fail_batch(db: Session, batch_id: UUID, message: str) -> ImportBatch | None:
    """Mark a batch failed after an exception outside the per-row boundary."""
    batch = db.query(ImportBatch).filter(ImportBatch.id == batch_id).first()
    if not batch:
        return None
    batch.status = ImportStatus.FAILED.value
    batch.failure_message = message
    batch.completed_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(batch)
    return batch


def get_batch(db: Session, org_id: UUID, batch_id: UUID) -> ImportBatch | None:
    """Get import batch by ID (org-scoped)."""
    return (
        db.query(ImportBatch)
        .filter(ImportBatch.id == batch_id, ImportBatch.organization_id == org_id)
        .first()
    )


def list_batches(
    db: Session,
    org_id: UUID,
    *,
    portfolio_id: UUID | None = None,
    limit: int = 20,
) -> list[ImportBatch]:
    """List recent import batches for org, newest first."""
    query = db.query(ImportBatch).filter(ImportBatch.organization_id == org_id)
    if portfolio_id is not None:
        query = query.filter(ImportBatch.portfolio_id == portfolio_id)
    return query.order_by(ImportBatch.created_at.desc()).limit(limit).all()


# =============================================================================
# Preview
# =============================================================================

PREVIEW_SAMPLE_ROWS = 5


@dataclass
class ImportPreview:
    """What the mapping screen needs before an import runs."""

    import_type: ImportType
    headers: list[str] = field(default_factory=list)
    total_rows: int = 0
    sample_rows: list[dict[str, str]] = field(default_factory=list)
    mapping: dict[str, str] = field(default_factory=dict)
    suggested_mapping: dict[str, str] = field(default_factory=dict)
    available_fields: list[str] = field(default_factory=list)
    applied_mapping_id: UUID | None = None


def preview_import(
    db: Session,
    org_id: UUID,
    file_content: bytes | str,
    import_type: ImportType,
    mapping_id: UUID | None = None,
) -> ImportPreview:
    """
    Parse an uploaded CSV and prepare its mapping.

    The editable mapping starts all-skip, then the chosen saved mapping (or
    the tenant default for this import type) is merged onto it.

    Raises:
        ImportValidationError: file has no header row, unknown mapping, or a
            mapping saved for the other import type
    """
    import_type = ImportType(import_type)
    headers, records = parse_csv_content(file_content)
    if not headers:
        raise ImportValidationError("CSV file is empty")

    if mapping_id is not None:
        saved = import_mapping_service.get_mapping(db, org_id, mapping_id)
        if not saved:
            raise ImportValidationError("Import mapping not found")
        if saved.import_type != import_type.value:
            raise ImportValidationError(
                f"Import mapping is for {saved.import_type} imports, not {import_type.value}"
            )
    else:
        saved = import_mapping_service.get_default_mapping(db, org_id, import_type)

    mapping = build_default_mapping(headers)
    if saved:
        mapping = apply_saved_mapping(mapping, saved.field_mappings)

    return ImportPreview(
        import_type=import_type,
        headers=headers,
        total_rows=len(records),
        sample_rows=records[:PREVIEW_SAMPLE_ROWS],
        mapping=mapping,
        suggested_mapping=suggest_mapping(headers, import_type),
        available_fields=field_names(import_type),
        applied_mapping_id=saved.id if saved else None,
    )
