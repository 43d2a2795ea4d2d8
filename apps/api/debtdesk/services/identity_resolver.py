"""Identity resolution for account imports.

Decides per coerced record whether to reject it, update an existing
account in the target portfolio, or create a new one (optionally linked
to the same person's account in another portfolio of the tenant).

Works against a snapshot of account keys taken once per batch.
"""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from debtdesk.db.models import Account
from debtdesk.services.import_transformers import CoercedRecord


class ResolutionOutcome(str, Enum):
    REJECT = "reject"
    UPDATE = "update"
    CREATE = "create"


@dataclass(frozen=True)
class AccountKey:
    """Just the matchable identity of an account, detached from the session."""

    id: UUID
    portfolio_id: UUID
    account_number: str | None
    ssn: str | None

    @classmethod
    def from_account(cls, account: Account) -> "AccountKey":
        return cls(
            id=account.id,
            portfolio_id=account.portfolio_id,
            account_number=account.account_number,
            ssn=account.ssn,
        )


@dataclass
class Resolution:
    outcome: ResolutionOutcome
    match: AccountKey | None = None
    linked: AccountKey | None = None


@dataclass
class IdentityResolver:
    portfolio_id: UUID
    portfolio_accounts: list[AccountKey] = field(default_factory=list)
    tenant_accounts: list[AccountKey] = field(default_factory=list)

    @classmethod
    def from_accounts(
        cls,
        portfolio_id: UUID,
        portfolio_accounts: list[Account],
        tenant_accounts: list[Account],
    ) -> "IdentityResolver":
        return cls(
            portfolio_id=portfolio_id,
            portfolio_accounts=[AccountKey.from_account(a) for a in portfolio_accounts],
            tenant_accounts=[AccountKey.from_account(a) for a in tenant_accounts],
        )

    def match_existing(
        self, account_number: str | None, ssn: str | None
    ) -> AccountKey | None:
        """First account in the portfolio matching either key, in snapshot order."""
        for key in self.portfolio_accounts:
            if account_number and key.account_number == account_number:
                return key
            if ssn and key.ssn == ssn:
                return key
        return None

    def match_by_precedence(
        self, account_number: str | None, ssn: str | None
    ) -> AccountKey | None:
        """
        Account number decides when present; SSN is used only without one.

        A row whose account number is unknown is unmatched even if its SSN
        belongs to some account in the portfolio.
        """
        if account_number:
            return next(
                (k for k in self.portfolio_accounts if k.account_number == account_number),
                None,
            )
        if ssn:
            return next((k for k in self.portfolio_accounts if k.ssn == ssn), None)
        return None

    def find_linked(self, ssn: str | None) -> AccountKey | None:
        """Same SSN in a different portfolio of the tenant."""
        if not ssn:
            return None
        for key in self.tenant_accounts:
            if key.ssn == ssn and key.portfolio_id != self.portfolio_id:
                return key
        return None

    def resolve(self, record: CoercedRecord) -> Resolution:
        account_number = record.get("accountNumber")
        ssn = record.get("ssn")
        if not account_number and not ssn:
            return Resolution(ResolutionOutcome.REJECT)

        match = self.match_existing(account_number, ssn)
        if match:
            return Resolution(ResolutionOutcome.UPDATE, match=match)

        return Resolution(ResolutionOutcome.CREATE, linked=self.find_linked(ssn))

    def register_created(self, account: Account) -> None:
        """Make a just-created account matchable by later rows of the batch."""
        self.portfolio_accounts.append(AccountKey.from_account(account))
