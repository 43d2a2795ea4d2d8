"""Contacts, employment records and references attached to an account."""

from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.db.enums import ContactType
from debtdesk.db.models import AccountContact, AccountReference, EmploymentRecord


# =============================================================================
# Contacts
# =============================================================================


def list_contacts(
    db: Session, account_id: UUID, contact_type: ContactType | None = None
) -> list[AccountContact]:
    query = db.query(AccountContact).filter(AccountContact.account_id == account_id)
    if contact_type is not None:
        query = query.filter(AccountContact.type == contact_type.value)
    return query.order_by(AccountContact.created_at.asc()).all()


def create_contact(
    db: Session,
    account_id: UUID,
    *,
    contact_type: ContactType,
    value: str,
    label: str | None = None,
    is_primary: bool = False,
    is_valid: bool = True,
) -> AccountContact:
    contact = AccountContact(
        account_id=account_id,
        type=contact_type.value,
        value=value,
        label=label,
        is_primary=is_primary,
        is_valid=is_valid,
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


# =============================================================================
# Employment
# =============================================================================


def list_employment_records(db: Session, account_id: UUID) -> list[EmploymentRecord]:
    return (
        db.query(EmploymentRecord)
        .filter(EmploymentRecord.account_id == account_id)
        .order_by(EmploymentRecord.created_at.asc())
        .all()
    )


def create_employment_record(
    db: Session,
    account_id: UUID,
    *,
    employer_name: str,
    employer_phone: str | None = None,
    employer_address: str | None = None,
    position: str | None = None,
    salary: int | None = None,
    is_current: bool = True,
) -> EmploymentRecord:
    record = EmploymentRecord(
        account_id=account_id,
        employer_name=employer_name,
        employer_phone=employer_phone,
        employer_address=employer_address,
        position=position,
        salary=salary,
        is_current=is_current,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


# =============================================================================
# References
# =============================================================================


def list_references(db: Session, account_id: UUID) -> list[AccountReference]:
    return (
        db.query(AccountReference)
        .filter(AccountReference.account_id == account_id)
        .order_by(AccountReference.added_date.asc(), AccountReference.id.asc())
        .all()
    )


def create_reference(
    db: Session,
    account_id: UUID,
    *,
    name: str,
    relationship_type: str | None = None,
    phone: str | None = None,
    address: str | None = None,
    city: str | None = None,
    state: str | None = None,
    zip_code: str | None = None,
    notes: str | None = None,
    added_date: date | None = None,
) -> AccountReference:
    reference = AccountReference(
        account_id=account_id,
        name=name,
        relationship_type=relationship_type,
        phone=phone,
        address=address,
        city=city,
        state=state,
        zip_code=zip_code,
        notes=notes,
        added_date=added_date or date.today(),
    )
    db.add(reference)
    db.commit()
    db.refresh(reference)
    return reference
