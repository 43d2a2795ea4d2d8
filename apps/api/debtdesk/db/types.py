"""Column types shared by the models: encrypted PII and portable JSON."""

from __future__ import annotations

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import Text, TypeDecorator

from debtdesk.core.encryption import decrypt_pii, encrypt_pii


# JSONB on PostgreSQL, plain JSON everywhere else (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class EncryptedString(TypeDecorator):
    """Text column holding Fernet ciphertext; blank values are stored as-is."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if not value:
            return value
        return encrypt_pii(str(value))

    def process_result_value(self, value, dialect):
        if not value:
            return value
        return decrypt_pii(value)
