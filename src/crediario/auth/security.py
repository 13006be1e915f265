"""Credential helpers: password hashing and generation of serial keys, tokens
and temporary passwords."""

import hashlib
import hmac
import secrets
import string
import uuid
from typing import Optional, Tuple

PASSWORD_SCHEME = "pbkdf2_sha256"

_TEMPORARY_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def _iterations() -> int:
    from ..config import get_config

    return get_config().app.password_hash_iterations


def hash_password(
    password: str, salt: Optional[bytes] = None, iterations: Optional[int] = None
) -> Tuple[str, str]:
    """
    Hash a password using PBKDF2-HMAC-SHA256.

    Args:
        password: The plain text password to hash
        salt: Optional salt bytes. If None, generates a secure random salt.
        iterations: Optional iteration count, defaults to the configured one

    Returns:
        tuple[str, str]: (salt_hex, hash_hex)
    """
    if salt is None:
        salt = secrets.token_bytes(16)
    if iterations is None:
        iterations = _iterations()

    password_hash = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, iterations
    )

    return salt.hex(), password_hash.hex()


def verify_password(
    password: str, salt_hex: str, hash_hex: str, iterations: Optional[int] = None
) -> bool:
    """Verify a password against a stored salt and hash."""
    if not password or not salt_hex or not hash_hex:
        return False

    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
        if iterations is None:
            iterations = _iterations()

        computed_hash = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt, iterations
        )

        return hmac.compare_digest(computed_hash, stored_hash)

    except (ValueError, TypeError):
        return False


def encode_password(password: str) -> str:
    """Hash a password into a single storable string.

    Format: ``pbkdf2_sha256$<iterations>$<salt_hex>$<hash_hex>``. The iteration
    count travels with the hash so stored passwords survive a config change.
    """
    iterations = _iterations()
    salt_hex, hash_hex = hash_password(password, iterations=iterations)
    return f"{PASSWORD_SCHEME}${iterations}${salt_hex}${hash_hex}"


def is_password_hash(value: str) -> bool:
    """Tell an encoded password apart from a plain one."""
    parts = (value or "").split("$")
    return len(parts) == 4 and parts[0] == PASSWORD_SCHEME and parts[1].isdigit()


def check_password(password: str, encoded: str) -> bool:
    """Verify a plain password against an encoded one."""
    if not is_password_hash(encoded):
        return False
    _, iterations, salt_hex, hash_hex = encoded.split("$")
    return verify_password(password, salt_hex, hash_hex, iterations=int(iterations))


def generate_serial_key() -> str:
    """A fresh opaque serial key (32 hex characters)."""
    return uuid.uuid4().hex


def generate_user_token() -> str:
    """A fresh URL-safe session token value."""
    return secrets.token_urlsafe(32)


def generate_temporary_password(length: Optional[int] = None) -> str:
    """A random alphanumeric password of the configured length."""
    if length is None:
        from ..config import get_config

        length = get_config().app.temporary_password_length
    if length < 1:
        raise ValueError("Temporary password length must be positive")
    return "".join(secrets.choice(_TEMPORARY_PASSWORD_ALPHABET) for _ in range(length))
