"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite schema per test
- Tenant, client and portfolio fixtures
- HTTPX AsyncClient with the tenant header set
"""
import os
import uuid
from typing import AsyncGenerator, Generator

from cryptography.fernet import Fernet

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("DATA_ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

from debtdesk.main import app
from debtdesk.core.deps import ORG_HEADER, get_db
from debtdesk.db.base import Base
from debtdesk.db.models import Client, Organization, Portfolio
from debtdesk.db.session import SessionLocal, engine


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Session over a freshly created schema.

    App code commits and rolls back for real (the importer relies on
    per-row rollback), so isolation comes from recreating the tables.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_org(db: Session) -> Organization:
    """Create a test organization."""
    org = Organization(
        id=uuid.uuid4(),
        name="Test Organization",
        slug=f"test-org-{uuid.uuid4().hex[:8]}",
    )
    db.add(org)
    db.commit()
    return org


@pytest.fixture(scope="function")
def test_client(db: Session, test_org: Organization) -> Client:
    """Create a creditor client in test_org."""
    client = Client(
        id=uuid.uuid4(),
        organization_id=test_org.id,
        name="First Creditor Bank",
    )
    db.add(client)
    db.commit()
    return client


def make_portfolio(db: Session, org: Organization, client: Client | None, name: str) -> Portfolio:
    portfolio = Portfolio(
        id=uuid.uuid4(),
        organization_id=org.id,
        client_id=client.id if client else None,
        name=name,
        total_accounts=0,
        total_face_value=0,
    )
    db.add(portfolio)
    db.commit()
    return portfolio


@pytest.fixture(scope="function")
def test_portfolio(db: Session, test_org: Organization, test_client: Client) -> Portfolio:
    """Create an empty portfolio in test_org."""
    return make_portfolio(db, test_org, test_client, "Spring 2026 Purchase")


@pytest.fixture(scope="function")
def other_portfolio(db: Session, test_org: Organization, test_client: Client) -> Portfolio:
    """Second portfolio in the same tenant, for cross-portfolio linkage."""
    return make_portfolio(db, test_org, test_client, "Fall 2025 Purchase")


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient without a tenant header.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def org_client(
    db: Session,
    test_org: Organization,
) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient pinned to test_org through the tenant header.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={ORG_HEADER: str(test_org.id)},
    ) as c:
        yield c

    app.dependency_overrides.clear()
