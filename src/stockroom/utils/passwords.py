"""Password hashing.

PBKDF2-HMAC-SHA512, 10000 rounds, 64 byte key, hex encoded. Every user has
a random salt stored next to the hash.
"""

import hashlib
import hmac
import secrets

ITERATIONS = 10000
KEY_LENGTH = 64


def new_salt() -> str:
    return secrets.token_hex(16)


def hash_password(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac("sha512", password.encode(), salt.encode(), ITERATIONS, KEY_LENGTH).hex()


def verify_password(password: str, salt: str, expected: str) -> bool:
    """Constant-time comparison of a password against a stored hash."""
    return hmac.compare_digest(hash_password(password, salt), expected)
