"""Encryption utilities for connected account credentials."""

from cryptography.fernet import Fernet, InvalidToken

from connected_accounts.core.config import settings


_fernet: Fernet | None = None
_ENCRYPTED_PREFIX = "enc:"


def get_fernet() -> Fernet:
    """Get or create Fernet instance for encryption/decryption."""
    global _fernet
    if _fernet is None:
        if not settings.TOKEN_ENCRYPTION_KEY:
            raise RuntimeError(
                "TOKEN_ENCRYPTION_KEY not configured. "
                'Generate with: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"'
            )
        _fernet = Fernet(settings.TOKEN_ENCRYPTION_KEY.encode())
    return _fernet


def encrypt_token(token: str) -> str:
    """Encrypt a token for storage."""
    if token is None:
        return token
    if token == "":
        return ""
    if token.startswith(_ENCRYPTED_PREFIX):
        return token
    encrypted = get_fernet().encrypt(token.encode()).decode()
    return f"{_ENCRYPTED_PREFIX}{encrypted}"


def decrypt_token(encrypted: str) -> str:
    """Decrypt a stored token."""
    if encrypted is None:
        return encrypted
    if encrypted == "":
        return ""
    if not encrypted.startswith(_ENCRYPTED_PREFIX):
        raise ValueError("Encrypted token is missing prefix")
    try:
        return get_fernet().decrypt(encrypted[len(_ENCRYPTED_PREFIX) :].encode()).decode()
    except InvalidToken:
        raise ValueError("Invalid or corrupted encrypted token")
