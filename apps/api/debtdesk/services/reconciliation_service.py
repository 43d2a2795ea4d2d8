"""Repair queries for imports whose child fan-out partly failed."""

from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.db.enums import ContactType, FanoutEntity
from debtdesk.db.models import (
    Account,
    AccountContact,
    AccountReference,
    EmploymentRecord,
    ImportBatch,
)


def _has_children(db: Session, account_id: UUID, entity: FanoutEntity) -> bool:
    if entity in (FanoutEntity.PHONE, FanoutEntity.EMAIL):
        contact_type = ContactType(entity.value)
        query = db.query(AccountContact.id).filter(
            AccountContact.account_id == account_id,
            AccountContact.type == contact_type.value,
        )
    elif entity == FanoutEntity.EMPLOYMENT:
        query = db.query(EmploymentRecord.id).filter(EmploymentRecord.account_id == account_id)
    else:
        query = db.query(AccountReference.id).filter(AccountReference.account_id == account_id)
    return query.first() is not None


def find_incomplete_accounts(
    db: Session, org_id: UUID, batch_id: UUID
) -> list[dict[str, object]]:
    """
    Accounts from a batch that still have none of a child type whose
    creation failed during the import.

    Returns:
        [{"account_id", "file_number", "missing": [entity, ...]}] in failure order
    """
    batch = (
        db.query(ImportBatch)
        .filter(ImportBatch.id == batch_id, ImportBatch.organization_id == org_id)
        .first()
    )
    if not batch or not batch.fanout_failures:
        return []

    missing: dict[str, list[str]] = {}
    for failure in batch.fanout_failures:
        account_id = failure["account_id"]
        entity = failure["entity"]
        if entity not in missing.setdefault(account_id, []):
            missing[account_id].append(entity)

    incomplete: list[dict[str, object]] = []
    for account_id, entities in missing.items():
        account = (
            db.query(Account)
            .filter(Account.id == UUID(account_id), Account.organization_id == org_id)
            .first()
        )
        if not account:
            continue
        still_missing = [
            entity
            for entity in entities
            if not _has_children(db, account.id, FanoutEntity(entity))
        ]
        if still_missing:
            incomplete.append(
                {
                    "account_id": account.id,
                    "file_number": account.file_number,
                    "missing": still_missing,
                }
            )
    return incomplete
