"""Pydantic schemas for bulk account/contact imports."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from debtdesk.db.enums import ImportType
from debtdesk.schemas.base import CamelModel


# =============================================================================
# Account import
# =============================================================================


class AccountImportRequest(CamelModel):
    """Already-parsed rows plus the column mapping to apply to them."""

    portfolio_id: UUID
    client_id: UUID
    records: list[dict[str, Any]]
    mappings: dict[str, str | None] = Field(
        description="Source column -> target field (or 'skip')",
    )
    file_number_start: int | None = Field(default=None, ge=0)
    mapping_id: UUID | None = None
    file_name: str | None = Field(default=None, max_length=255)


class AccountImportResults(CamelModel):
    created: int
    updated: int
    linked: int
    errors: list[str]
    warnings: list[str] = Field(default_factory=list)


class AccountImportResponse(CamelModel):
    success: bool = True
    results: AccountImportResults
    message: str
    batch_id: UUID | None = None


# =============================================================================
# Contact import
# =============================================================================


class ContactImportRequest(CamelModel):
    portfolio_id: UUID
    records: list[dict[str, Any]]
    mappings: dict[str, str | None]
    mapping_id: UUID | None = None
    file_name: str | None = Field(default=None, max_length=255)


class ContactImportResults(CamelModel):
    added: int
    matched: int
    errors: list[str]


class ContactImportResponse(CamelModel):
    success: bool = True
    results: ContactImportResults
    message: str
    batch_id: UUID | None = None


# =============================================================================
# Preview
# =============================================================================


class ImportPreviewResponse(CamelModel):
    import_type: ImportType
    headers: list[str]
    total_rows: int
    sample_rows: list[dict[str, str]]
    mapping: dict[str, str]
    suggested_mapping: dict[str, str]
    available_fields: list[str]
    applied_mapping_id: UUID | None = None


# =============================================================================
# Batches
# =============================================================================


class FanoutFailureRead(CamelModel):
    row: int
    account_id: UUID
    entity: str
    error: str


class ImportBatchListItem(CamelModel):
    id: UUID
    portfolio_id: UUID
    import_type: str
    status: str
    file_name: str | None
    total_records: int
    created_count: int
    updated_count: int
    linked_count: int
    matched_count: int
    added_count: int
    error_count: int
    created_at: datetime
    completed_at: datetime | None


class ImportBatchRead(ImportBatchListItem):
    mapping_id: UUID | None
    file_number_start: int | None
    column_mapping_snapshot: dict[str, Any] | None
    errors: list[str] | None
    warnings: list[str] | None
    fanout_failures: list[FanoutFailureRead] | None
    failure_message: str | None


class IncompleteAccountRead(CamelModel):
    account_id: UUID
    file_number: str | None
    missing: list[str]
