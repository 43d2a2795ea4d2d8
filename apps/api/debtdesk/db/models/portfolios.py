"""Portfolio model."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import date, datetime

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from debtdesk.db.base import Base
from debtdesk.db.enums import DEFAULT_PORTFOLIO_STATUS
from debtdesk.db.models._common import utcnow
from debtdesk.db.types import JSONType

if TYPE_CHECKING:
    from debtdesk.db.models import Account, Client, Organization


class Portfolio(Base):
    """
    A purchased batch of debt accounts from one creditor.

    total_accounts / total_face_value are derived rollups. They are
    recomputed from the account rows after every import and are never
    incremented in place.
    """

    __tablename__ = "portfolios"
    __table_args__ = (Index("idx_portfolios_org", "organization_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    client_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    creditor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    debt_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # cents
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_PORTFOLIO_STATUS.value, nullable=False
    )

    # Derived rollups
    total_accounts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_face_value: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # cents

    # Display labels for custom slots: {"custom3": "Original Branch"}
    custom_field_labels: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    organization: Mapped["Organization"] = relationship(back_populates="portfolios")
    client: Mapped["Client | None"] = relationship()
    accounts: Mapped[list["Account"]] = relationship(back_populates="portfolio")
