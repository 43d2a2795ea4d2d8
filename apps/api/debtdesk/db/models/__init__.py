"""SQLAlchemy ORM models."""

from debtdesk.db.models.accounts import (
    Account,
    AccountContact,
    AccountReference,
    EmploymentRecord,
)
from debtdesk.db.models.imports import FileNumberSequence, ImportBatch, ImportMapping
from debtdesk.db.models.portfolios import Portfolio
from debtdesk.db.models.tenants import Client, Organization

__all__ = [
    "Account",
    "AccountContact",
    "AccountReference",
    "Client",
    "EmploymentRecord",
    "FileNumberSequence",
    "ImportBatch",
    "ImportMapping",
    "Organization",
    "Portfolio",
]
