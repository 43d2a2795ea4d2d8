"""Field-level encryption for debtor PII (SSN, date of birth)."""

from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from debtdesk.core.config import settings


PII_PREFIX = "pii:"


class PIIDecryptionError(ValueError):
    """Stored PII could not be decrypted with the configured key."""


@lru_cache(maxsize=1)
def pii_cipher() -> Fernet:
    key = settings.DATA_ENCRYPTION_KEY
    if not key:
        raise RuntimeError("DATA_ENCRYPTION_KEY must be set to store SSNs or dates of birth")
    return Fernet(key.encode())


def encrypt_pii(plaintext: str) -> str:
    """Return the prefixed ciphertext. Input is always treated as plaintext."""
    return PII_PREFIX + pii_cipher().encrypt(plaintext.encode()).decode()


def decrypt_pii(stored: str) -> str:
    if not stored.startswith(PII_PREFIX):
        raise PIIDecryptionError("Stored PII value is not encrypted")
    try:
        return pii_cipher().decrypt(stored[len(PII_PREFIX):].encode()).decode()
    except InvalidToken:
        raise PIIDecryptionError("Stored PII value could not be decrypted")
