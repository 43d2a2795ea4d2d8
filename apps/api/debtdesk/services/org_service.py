"""Organization and client operations."""

from uuid import UUID

from sqlalchemy.orm import Session

from debtdesk.db.models import Client, Organization


def get_org_by_id(db: Session, org_id: UUID) -> Organization | None:
    """Get organization by ID."""
    return db.query(Organization).filter(Organization.id == org_id).first()


def get_org_by_slug(db: Session, slug: str) -> Organization | None:
    """Get organization by slug."""
    return db.query(Organization).filter(Organization.slug == slug.lower()).first()


def create_org(db: Session, name: str, slug: str) -> Organization:
    """
    Create a new organization.

    Raises:
        IntegrityError: If slug already exists
    """
    org = Organization(name=name, slug=slug.lower())
    db.add(org)
    db.commit()
    db.refresh(org)
    return org


def get_client(db: Session, org_id: UUID, client_id: UUID) -> Client | None:
    return (
        db.query(Client)
        .filter(Client.organization_id == org_id, Client.id == client_id)
        .first()
    )


def create_client(
    db: Session,
    org_id: UUID,
    *,
    name: str,
    contact_name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
) -> Client:
    client = Client(
        organization_id=org_id,
        name=name,
        contact_name=contact_name,
        email=email,
        phone=phone,
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    return client
