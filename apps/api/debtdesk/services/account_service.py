"""Account (debtor) persistence operations."""

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.db.models import Account


def list_accounts(
    db: Session,
    org_id: UUID,
    portfolio_id: UUID | None = None,
) -> list[Account]:
    """
    List accounts for a tenant, optionally limited to one portfolio.

    Ordered by creation so "first match" is stable across calls.
    """
    query = db.query(Account).filter(Account.organization_id == org_id)
    if portfolio_id is not None:
        query = query.filter(Account.portfolio_id == portfolio_id)
    return query.order_by(Account.created_at.asc(), Account.id.asc()).all()


def get_account(db: Session, org_id: UUID, account_id: UUID) -> Account | None:
    """Get account by ID (org-scoped)."""
    return (
        db.query(Account)
        .filter(Account.organization_id == org_id, Account.id == account_id)
        .first()
    )


def create_account(db: Session, **fields: Any) -> Account:
    """Insert one account row. Whole-row write: either it commits or it raises."""
    account = Account(**fields)
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def update_account(db: Session, account: Account, fields: dict[str, Any]) -> Account:
    """Partial patch by attribute name; attributes not in ``fields`` are untouched."""
    for name, value in fields.items():
        setattr(account, name, value)
    db.commit()
    db.refresh(account)
    return account
