# user_backend/domain/services.py
from __future__ import annotations

import base64
import hashlib
import hmac
import os
import re
import secrets

from user_backend.domain.errors import InvalidEmail, InvalidPassword, InvalidUsername

REGEX_EMAIL_LOOSE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)*$"
)
REGEX_USERNAME = re.compile(r"^[a-zA-Z0-9_-]{3,16}$")
# ASCII classes only: a superscript digit does not count as a digit
REGEX_PASSWORD = re.compile(r"(?=.*[0-9])(?=.*[a-z])(?=.*[A-Z]).{8,}")


def generate_6digit_code() -> str:
    """Zero-padded 6-digit numeric code."""
    return f"{secrets.randbelow(1_000_000):06d}"


def secure_compare(a: str, b: str) -> bool:
    """
    Constant-time comparison for secrets.
    Accepts strings; falls back to bytes if needed.
    """
    try:
        return hmac.compare_digest(a, b)
    except TypeError:
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def _sha256_salt_plus_code(salt: bytes, code: str) -> bytes:
    h = hashlib.sha256()
    h.update(salt)
    h.update(code.encode("utf-8"))
    return h.digest()


def make_code_digest(code: str) -> tuple[str, str]:
    """
    Return (salt_b64, digest_b64) where digest = SHA256(salt || code).
    """
    salt = os.urandom(16)
    digest = _sha256_salt_plus_code(salt, code)
    return (
        base64.b64encode(salt).decode("utf-8"),
        base64.b64encode(digest).decode("utf-8"),
    )


def code_digest_b64(code: str, salt_b64: str) -> str | None:
    """Recompute the digest for ``code`` under a stored salt; None if the salt is garbage."""
    try:
        salt = base64.b64decode(salt_b64.encode("utf-8"), validate=True)
    except ValueError:
        return None
    return base64.b64encode(_sha256_salt_plus_code(salt, code)).decode("utf-8")


def assert_email(email: str) -> str:
    if len(email) > 255 or not REGEX_EMAIL_LOOSE.match(email):
        raise InvalidEmail(data={"email": email})
    return email


def assert_username(username: str) -> str:
    if not REGEX_USERNAME.fullmatch(username):
        raise InvalidUsername(data={"username": username})
    return username


def is_acceptable_password(password: str) -> bool:
    return REGEX_PASSWORD.fullmatch(password) is not None


def assert_password(password: str) -> str:
    if not is_acceptable_password(password):
        raise InvalidPassword()
    return password
