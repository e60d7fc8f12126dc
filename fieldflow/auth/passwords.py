"""bcrypt password hashing."""

from __future__ import annotations

import bcrypt

from fieldflow.core.errors import ValidationError

DEFAULT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72
PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"


def password_fits(password: str) -> bool:
    return len(password.encode()) <= MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a plaintext password.

    Returns:
        str: bcrypt hash (salt included), decoded for storage as text

    Raises:
        ValidationError: Password longer than bcrypt accepts
    """
    if not password_fits(password):
        raise ValidationError.for_field("password", PASSWORD_TOO_LONG)
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def hash_rounds(password_hash: str) -> int:
    """Cost factor recorded in a bcrypt hash (``$2b$<rounds>$...``)."""
    return int(password_hash.split("$")[2])


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    A malformed or empty stored hash never verifies, and neither does an
    over-long password.
    """
    if not password_hash or not password_fits(password):
        return False
    try:
        # Constant-time comparison inside bcrypt
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False
