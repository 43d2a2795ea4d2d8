"""Centralized defaults for enums."""

from debtdesk.db.enums.accounts import AccountStatus, PortfolioStatus
from debtdesk.db.enums.imports import ImportStatus


DEFAULT_ACCOUNT_STATUS: AccountStatus = AccountStatus.OPEN
DEFAULT_PORTFOLIO_STATUS: PortfolioStatus = PortfolioStatus.ACTIVE
DEFAULT_IMPORT_STATUS: ImportStatus = ImportStatus.PROCESSING
