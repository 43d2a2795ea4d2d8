"""Import-related enums."""

from enum import Enum


class ImportType(str, Enum):
    """Which target field set a mapping/import works against."""

    ACCOUNTS = "accounts"
    CONTACTS = "contacts"


class ImportStatus(str, Enum):
    """Lifecycle of an import batch: processing → completed | failed."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class FanoutEntity(str, Enum):
    """Child entity types created alongside a new account."""

    PHONE = "phone"
    EMAIL = "email"
    EMPLOYMENT = "employment"
    REFERENCE = "reference"
