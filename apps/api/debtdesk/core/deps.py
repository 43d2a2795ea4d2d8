"""FastAPI dependencies for tenant context and database access."""

from typing import Generator
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from debtdesk.db.session import SessionLocal


ORG_HEADER = "X-Organization-Id"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_org_id(
    x_organization_id: UUID = Header(..., alias=ORG_HEADER),
    db: Session = Depends(get_db),
) -> UUID:
    """
    Resolve the tenant for the request.

    Authentication lives in front of this service; by the time a request
    reaches us the gateway has already pinned it to one organization.

    Raises:
        HTTPException 404: Organization does not exist
    """
    from debtdesk.services import org_service

    org = org_service.get_org_by_id(db, x_organization_id)
    if not org:
        raise HTTPException(status_code=404, detail="Organization not found")
    return org.id
