from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from user_backend.domain.entities import User


class UserGatewayPort(Protocol):
    """Narrow view of the database gateway's user collection.

    Every method raises UpstreamError when the gateway fails or answers
    with a non-zero code.
    """

    async def find_user(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        id: int | None = None,
    ) -> Optional[User]:
        """Return the first user matching all given filters, or None."""

    async def create_user(self, values: Mapping[str, Any]) -> None:
        """Insert a new user record."""

    async def update_user(self, user_id: int, values: Mapping[str, Any]) -> None:
        """Patch the user identified by ``user_id``."""
