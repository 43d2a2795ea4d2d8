"""Account-related enums."""

from enum import Enum


class AccountStatus(str, Enum):
    """
    Collection workflow status of an account.

    Collection desk statuses:
        newbiz → 1st_message → final → promise → payments_pending → decline

    Lifecycle statuses:
        open, in_payment, settled, closed, disputed, bankruptcy, legal
    """

    NEWBIZ = "newbiz"
    FIRST_MESSAGE = "1st_message"
    FINAL = "final"
    PROMISE = "promise"
    PAYMENTS_PENDING = "payments_pending"
    DECLINE = "decline"

    OPEN = "open"
    IN_PAYMENT = "in_payment"
    SETTLED = "settled"
    CLOSED = "closed"
    DISPUTED = "disputed"
    BANKRUPTCY = "bankruptcy"
    LEGAL = "legal"

    @classmethod
    def values(cls) -> set[str]:
        return {member.value for member in cls}


class ContactType(str, Enum):
    PHONE = "phone"
    EMAIL = "email"


class PortfolioStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    ARCHIVED = "archived"
