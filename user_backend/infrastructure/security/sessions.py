from __future__ import annotations

import logging
from typing import Optional, Sequence

from fastapi import Request, Response
from itsdangerous import BadData, URLSafeTimedSerializer
from pydantic import ValidationError

from user_backend.domain.entities import SessionRecord
from user_backend.domain.errors import Unauthorized

logger = logging.getLogger(__name__)

SESSION_MAX_AGE_SECONDS = 2419200  # 4 weeks


class CookieSessions:
    """
    Session identity kept entirely inside a signed cookie.

    ``secrets`` is ordered primary first. Only the primary signs; every
    secret in the list is accepted when reading, so a rotated-out secret keeps
    working until its cookies age out.
    """

    def __init__(
        self,
        secrets: Sequence[str],
        *,
        cookie_name: str = "user_backend_session",
        max_age_seconds: int = SESSION_MAX_AGE_SECONDS,
        secure: bool = False,
        salt: str = "user-backend-session",
    ) -> None:
        keys = [secret for secret in secrets if secret]
        if not keys:
            raise ValueError("at least one session secret is required")
        # itsdangerous signs with the last key and verifies against all of them
        self._serializer = URLSafeTimedSerializer(list(reversed(keys)), salt=salt)
        self._cookie_name = cookie_name
        self._max_age = max_age_seconds
        self._secure = secure

    def load(self, request: Request) -> Optional[SessionRecord]:
        raw = request.cookies.get(self._cookie_name)
        if not raw:
            return None
        try:
            payload = self._serializer.loads(raw, max_age=self._max_age)
        except BadData:
            logger.info("rejected session cookie with bad or expired signature")
            return None
        if not isinstance(payload, dict) or payload.get("user") is None:
            return None
        try:
            return SessionRecord.model_validate(payload["user"])
        except ValidationError:
            logger.warning("signed session cookie carried a malformed user record")
            return None

    def load_or_fail(self, request: Request) -> SessionRecord:
        user = self.load(request)
        if user is None:
            raise Unauthorized()
        return user

    def save(self, response: Response, user: Optional[SessionRecord]) -> None:
        """Write ``user`` into the cookie; None writes an explicitly cleared session."""
        payload = {"user": user.model_dump() if user is not None else None}
        response.set_cookie(
            key=self._cookie_name,
            value=self._serializer.dumps(payload),
            max_age=self._max_age,
            httponly=True,
            samesite="strict",
            secure=self._secure,
            path="/",
        )
