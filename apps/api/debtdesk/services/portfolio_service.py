"""Portfolio operations, including post-import rollups."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from debtdesk.db.models import Account, Portfolio

logger = logging.getLogger(__name__)


def get_portfolio(db: Session, org_id: UUID, portfolio_id: UUID) -> Portfolio | None:
    """Get portfolio by ID (org-scoped)."""
    return (
        db.query(Portfolio)
        .filter(Portfolio.organization_id == org_id, Portfolio.id == portfolio_id)
        .first()
    )


def list_portfolios(db: Session, org_id: UUID) -> list[Portfolio]:
    return (
        db.query(Portfolio)
        .filter(Portfolio.organization_id == org_id)
        .order_by(Portfolio.created_at.desc())
        .all()
    )


def create_portfolio(
    db: Session,
    org_id: UUID,
    *,
    name: str,
    client_id: UUID | None = None,
    creditor_name: str | None = None,
    debt_type: str | None = None,
    purchase_date: date | None = None,
    purchase_price: int = 0,
) -> Portfolio:
    portfolio = Portfolio(
        organization_id=org_id,
        client_id=client_id,
        name=name,
        creditor_name=creditor_name,
        debt_type=debt_type,
        purchase_date=purchase_date,
        purchase_price=purchase_price,
        total_accounts=0,
        total_face_value=0,
    )
    db.add(portfolio)
    db.commit()
    db.refresh(portfolio)
    return portfolio


def update_portfolio(db: Session, portfolio: Portfolio, **fields: object) -> Portfolio:
    """Partial patch by attribute name."""
    for name, value in fields.items():
        setattr(portfolio, name, value)
    db.commit()
    db.refresh(portfolio)
    return portfolio


def recompute_totals(db: Session, portfolio: Portfolio) -> Portfolio:
    """
    Recompute total_accounts and total_face_value from the account rows.

    Authoritative and idempotent: whatever happened mid-import, the
    rollup afterwards matches what is actually stored.
    """
    total_accounts, total_face_value = (
        db.query(func.count(Account.id), func.coalesce(func.sum(Account.original_balance), 0))
        .filter(Account.portfolio_id == portfolio.id)
        .one()
    )
    portfolio = update_portfolio(
        db,
        portfolio,
        total_accounts=int(total_accounts),
        total_face_value=int(total_face_value),
    )
    logger.info(
        "Recomputed portfolio totals: portfolio=%s accounts=%s face_value=%s",
        portfolio.id,
        portfolio.total_accounts,
        portfolio.total_face_value,
    )
    return portfolio


def register_custom_field_labels(
    db: Session, portfolio: Portfolio, labels: dict[str, str]
) -> Portfolio:
    """Record display labels for custom slots ({"custom3": "Branch"}); later labels win."""
    if not labels:
        return portfolio
    merged = dict(portfolio.custom_field_labels or {})
    merged.update(labels)
    return update_portfolio(db, portfolio, custom_field_labels=merged)
