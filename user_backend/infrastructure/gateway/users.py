from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from user_backend.domain.entities import User
from user_backend.domain.errors import UpstreamError
from user_backend.domain.ports.user_gateway import UserGatewayPort
from user_backend.infrastructure.http.client import post_envelope

logger = logging.getLogger(__name__)


class _UserItem(BaseModel):
    id: int
    username: str = Field(..., min_length=1)
    email: Optional[str] = None
    full_name: str = ""
    school_name: str = ""
    rating: Optional[float] = None
    password: Optional[str] = None


class _UsersReadData(BaseModel):
    total: Optional[int] = None
    items: list[_UserItem]


class HttpUserGateway(UserGatewayPort):
    """Users collection of the database gateway (``/db/v2/users/*``)."""

    def __init__(self, base_url: str, *, client: httpx.AsyncClient) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client

    async def _call(self, action: str, body: dict) -> Any:
        url = f"{self._base_url}/db/v2/users/{action}"
        envelope, failure = await post_envelope(self._client, url, body)
        if envelope is None:
            logger.error(
                "database gateway unreachable", extra={"action": action, "reason": failure}
            )
            raise UpstreamError(
                f"Database Gateway failed when calling users/{action}",
                debug={"reason": failure},
            )
        if envelope.get("error"):
            logger.error(
                "database gateway returned non-zero code",
                extra={"action": action, "error": envelope.get("error")},
            )
            raise UpstreamError(
                f"Received non-zero code from Database Gateway when calling users/{action}",
                debug={"response": envelope},
            )
        return envelope.get("data")

    async def find_user(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        id: int | None = None,
    ) -> Optional[User]:
        where = {
            name: value
            for name, value in (("username", username), ("email", email), ("id", id))
            if value is not None
        }
        if not where:
            raise ValueError("find_user needs at least one filter")

        data = await self._call("read", {"where": where, "offset": 0, "limit": 1})
        try:
            parsed = _UsersReadData.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(
                "Database Gateway returned malformed users data",
                debug={"data": data, "errors": str(e)},
            ) from e
        if not parsed.items:
            return None
        return User(**parsed.items[0].model_dump())

    async def create_user(self, values: Mapping[str, Any]) -> None:
        await self._call("create", {"values": dict(values)})

    async def update_user(self, user_id: int, values: Mapping[str, Any]) -> None:
        await self._call("update", {"where": {"id": user_id}, "values": dict(values)})
