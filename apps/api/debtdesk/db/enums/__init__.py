"""Enum definitions for application constants."""

from debtdesk.db.enums.accounts import AccountStatus, ContactType, PortfolioStatus
from debtdesk.db.enums.defaults import (
    DEFAULT_ACCOUNT_STATUS,
    DEFAULT_IMPORT_STATUS,
    DEFAULT_PORTFOLIO_STATUS,
)
from debtdesk.db.enums.imports import FanoutEntity, ImportStatus, ImportType

__all__ = [
    "AccountStatus",
    "ContactType",
    "PortfolioStatus",
    "DEFAULT_ACCOUNT_STATUS",
    "DEFAULT_IMPORT_STATUS",
    "DEFAULT_PORTFOLIO_STATUS",
    "FanoutEntity",
    "ImportStatus",
    "ImportType",
]
