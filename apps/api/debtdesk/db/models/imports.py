"""Saved import mappings, import batch records and file number sequences."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from debtdesk.db.base import Base
from debtdesk.db.enums import DEFAULT_IMPORT_STATUS
from debtdesk.db.models._common import utcnow
from debtdesk.db.types import JSONType

if TYPE_CHECKING:
    from debtdesk.db.models import Organization, Portfolio


class ImportMapping(Base):
    """
    Reusable column mapping ("schema") for bulk imports.

    field_mappings: {source_column: target_field}
    One mapping per org and import type can be is_default=true (enforced
    via partial index on PostgreSQL, and by the service everywhere).
    """

    __tablename__ = "import_mappings"
    __table_args__ = (
        Index("idx_import_mappings_org", "organization_id", "import_type"),
        Index(
            "uq_import_mapping_default",
            "organization_id",
            "import_type",
            unique=True,
            postgresql_where=text("is_default = TRUE"),
            sqlite_where=text("is_default = 1"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    import_type: Mapped[str] = mapped_column(String(20), nullable=False)  # accounts, contacts
    field_mappings: Mapped[dict] = mapped_column(JSONType, nullable=False)
    is_default: Mapped[bool] = mapped_column(default=False, nullable=False)

    # Usage stats
    usage_count: Mapped[int] = mapped_column(default=0, nullable=False)
    last_used_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    organization: Mapped["Organization"] = relationship()


class ImportBatch(Base):
    """
    One invocation of the account or contact importer.

    Flow: processing → completed (row errors are still "completed")
                     → failed (batch-level exception)
    """

    __tablename__ = "import_batches"
    __table_args__ = (Index("idx_import_batches_org_created", "organization_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    portfolio_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False
    )
    mapping_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("import_mappings.id", ondelete="SET NULL"), nullable=True
    )

    import_type: Mapped[str] = mapped_column(String(20), nullable=False)
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_IMPORT_STATUS.value, nullable=False
    )
    column_mapping_snapshot: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    file_number_start: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Counts
    total_records: Mapped[int] = mapped_column(default=0, nullable=False)
    created_count: Mapped[int] = mapped_column(default=0, nullable=False)
    updated_count: Mapped[int] = mapped_column(default=0, nullable=False)
    linked_count: Mapped[int] = mapped_column(default=0, nullable=False)
    matched_count: Mapped[int] = mapped_column(default=0, nullable=False)
    added_count: Mapped[int] = mapped_column(default=0, nullable=False)
    error_count: Mapped[int] = mapped_column(default=0, nullable=False)

    # Details
    errors: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    warnings: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    # [{account_id, entity, error}] for child creations that failed
    fanout_failures: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    failure_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    organization: Mapped["Organization"] = relationship()
    portfolio: Mapped["Portfolio"] = relationship()
    mapping: Mapped["ImportMapping | None"] = relationship()


class FileNumberSequence(Base):
    """
    Per-tenant, per-year counter behind FN-{year}-{seq} file numbers.

    Rows are locked with SELECT ... FOR UPDATE and advanced in the same
    transaction as the account insert that consumes the number.
    """

    __tablename__ = "file_number_sequences"
    __table_args__ = (
        UniqueConstraint("organization_id", "year", name="uq_file_number_sequence_org_year"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    last_value: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)
