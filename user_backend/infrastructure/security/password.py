from __future__ import annotations

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# One global context; bcrypt is the only scheme we use.
_pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")

DEFAULT_BCRYPT_ROUNDS = 12


def hash_password(plain: str, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt with a fresh salt."""
    return _pwd.hash(plain, rounds=rounds)


def verify_password(plain: str, password_hash: str | None) -> bool:
    """
    Verify a password against its bcrypt hash (safe timing).
    Malformed or foreign hashes never raise, they just don't match.
    """
    if not password_hash:
        _pwd.dummy_verify()
        return False
    try:
        return _pwd.verify(plain, password_hash)
    except (ValueError, TypeError):
        logger.warning("stored password hash is not a recognised bcrypt hash")
        return False


def burn_verify() -> None:
    """
    Spend one bcrypt round for nothing, so an unknown login identifier
    costs the same as a wrong password.
    """
    _pwd.dummy_verify()
