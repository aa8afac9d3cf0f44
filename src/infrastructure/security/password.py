"""Password hashing with bcrypt."""

import hmac
import logging

import bcrypt

logger = logging.getLogger(__name__)

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_bcrypt_hash(stored: str) -> bool:
    return stored.startswith(_BCRYPT_PREFIXES)


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, stored: str) -> bool:
    """
    Check a password against the stored verifier.

    Verifiers written before hashing was introduced are plain text; those are
    compared in constant time and reported by needs_rehash() so the caller can
    upgrade them after a successful login.
    """
    if not stored:
        return False
    if not is_bcrypt_hash(stored):
        logger.warning("Legacy plain-text password verifier encountered")
        return hmac.compare_digest(plain_password.encode("utf-8"), stored.encode("utf-8"))
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        return False


def needs_rehash(stored: str) -> bool:
    return not is_bcrypt_hash(stored)
