"""
Proof tokens: short-lived signed statements that "the OTP for this identity
was already verified".

A token is issued by ``POST /auth/verify-otp`` and redeemed by the mutating
call that follows (signup, change-email, reset-password). Tokens are
stateless HS256 JWTs; nothing is recorded server-side, so any instance that
shares the secret can verify them.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import jwt

from user_backend.domain.errors import ProofInvalid

ALGORITHM = "HS256"
PROOF_TOKEN_MAX_AGE_SECONDS = 10 * 60

_MISSING = object()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProofTokenIssuer:
    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int = PROOF_TOKEN_MAX_AGE_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("proof token secret must not be empty")
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def issue(self, email: str, username: Optional[str]) -> str:
        now = self._clock()
        payload: dict[str, Any] = {
            "email": email,
            "username": username,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, email: str, username: Optional[str], token: str) -> None:
        """
        Raise ProofInvalid unless ``token`` is authentic, unexpired and was
        issued for exactly ``(email, username)``. Every failure looks the same.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.InvalidTokenError:
            raise ProofInvalid() from None

        if payload.get("email", _MISSING) != email:
            raise ProofInvalid()
        if payload.get("username", _MISSING) != username:
            raise ProofInvalid()
