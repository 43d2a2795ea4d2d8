"""Account (debtor) model and its child entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import date, datetime

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from debtdesk.db.base import Base
from debtdesk.db.enums import DEFAULT_ACCOUNT_STATUS
from debtdesk.db.models._common import utcnow
from debtdesk.db.types import EncryptedString, JSONType

if TYPE_CHECKING:
    from debtdesk.db.models import Portfolio


class Account(Base):
    """
    A single collectible debt tied to one person and one portfolio.

    Balances are integer cents. current_balance is maintained by the
    payment path; the importer only seeds it.

    linked_account_id is a one-way pointer to the same person's account in
    another portfolio of the same tenant (matched by SSN at import time).
    """

    __tablename__ = "accounts"
    __table_args__ = (
        Index("idx_accounts_org", "organization_id"),
        Index("idx_accounts_portfolio", "portfolio_id", "created_at"),
        Index("idx_accounts_portfolio_number", "portfolio_id", "account_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    portfolio_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False
    )
    client_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True
    )
    assigned_collector_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    linked_account_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )

    file_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    account_number: Mapped[str] = mapped_column(String(100), nullable=False)

    # Identity
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[str | None] = mapped_column(EncryptedString, nullable=True)
    ssn: Mapped[str | None] = mapped_column(EncryptedString, nullable=True)
    ssn_last4: Mapped[str | None] = mapped_column(String(4), nullable=True)

    # Address / legacy single email
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Debt
    original_creditor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    client_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    original_balance: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # cents
    current_balance: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # cents
    status: Mapped[str] = mapped_column(
        String(30), default=DEFAULT_ACCOUNT_STATUS.value, nullable=False
    )
    last_contact_date: Mapped[str | None] = mapped_column(String(30), nullable=True)
    next_follow_up_date: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Unmapped/custom source columns
    custom_fields: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    portfolio: Mapped["Portfolio"] = relationship(back_populates="accounts")
    linked_account: Mapped["Account | None"] = relationship(remote_side=[id])
    contacts: Mapped[list["AccountContact"]] = relationship(
        back_populates="account", cascade="all, delete-orphan"
    )
    employment_records: Mapped[list["EmploymentRecord"]] = relationship(
        back_populates="account", cascade="all, delete-orphan"
    )
    references: Mapped[list["AccountReference"]] = relationship(
        back_populates="account", cascade="all, delete-orphan"
    )


class AccountContact(Base):
    """Phone number or email address for an account."""

    __tablename__ = "account_contacts"
    __table_args__ = (Index("idx_account_contacts_account", "account_id", "type"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)  # phone, email
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    label: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_primary: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_valid: Mapped[bool] = mapped_column(default=True, nullable=False)
    last_verified: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    account: Mapped["Account"] = relationship(back_populates="contacts")


class EmploymentRecord(Base):
    """Place of employment (POE)."""

    __tablename__ = "employment_records"
    __table_args__ = (Index("idx_employment_records_account", "account_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    employer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    employer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    employer_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    salary: Mapped[int | None] = mapped_column(Integer, nullable=True)  # annual, cents
    is_current: Mapped[bool] = mapped_column(default=True, nullable=False)
    verified_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    account: Mapped["Account"] = relationship(back_populates="employment_records")


class AccountReference(Base):
    """Personal reference (relative, friend, co-worker) for an account."""

    __tablename__ = "account_references"
    __table_args__ = (Index("idx_account_references_account", "account_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    relationship_type: Mapped[str | None] = mapped_column(
        "relationship", String(100), nullable=True
    )
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    added_date: Mapped[date] = mapped_column(Date, nullable=False)

    account: Mapped["Account"] = relationship(back_populates="references")
