"""Tenant (organization) and client (creditor) models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from debtdesk.db.base import Base
from debtdesk.db.models._common import utcnow

if TYPE_CHECKING:
    from debtdesk.db.models import Portfolio


class Organization(Base):
    """
    A tenant/company in the multi-tenant system.

    Every portfolio, account, saved mapping and import batch is scoped to
    exactly one organization.
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    clients: Mapped[list["Client"]] = relationship(back_populates="organization")
    portfolios: Mapped[list["Portfolio"]] = relationship(back_populates="organization")


class Client(Base):
    """Creditor that places debt with the agency."""

    __tablename__ = "clients"
    __table_args__ = (Index("idx_clients_org", "organization_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    organization: Mapped["Organization"] = relationship(back_populates="clients")
