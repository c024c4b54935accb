from __future__ import annotations

import logging
from typing import Iterable, Optional

from user_backend.domain.entities import SessionRecord
from user_backend.domain.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)


class RoleGate:
    """Admin allow-list check, with a global bypass for non-production setups."""

    def __init__(self, admin_usernames: Iterable[str], *, disabled: bool = False) -> None:
        self._admins = frozenset(admin_usernames)
        self._disabled = disabled
        if disabled:
            logger.warning("role verification is disabled, every caller is treated as admin")

    @property
    def disabled(self) -> bool:
        return self._disabled

    def is_admin(self, username: str) -> bool:
        return username in self._admins

    def require_admin(self, session: Optional[SessionRecord]) -> None:
        if self._disabled:
            return
        if session is None:
            raise Unauthorized()
        if not self.is_admin(session.username):
            raise Forbidden(data={"username": session.username})
