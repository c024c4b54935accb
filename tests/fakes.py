from typing import Any, Mapping, Optional

from user_backend.domain.entities import User
from user_backend.domain.errors import EmailServiceError, UpstreamError


class FakeUserGateway:
    def __init__(self, users: list[User] | None = None):
        self.users: list[User] = list(users or [])
        self.created: list[dict[str, Any]] = []
        self.updates: list[tuple[int, dict[str, Any]]] = []
        self.find_calls: list[dict[str, Any]] = []

    async def find_user(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        id: int | None = None,
    ) -> Optional[User]:
        filters = {"username": username, "email": email, "id": id}
        filters = {k: v for k, v in filters.items() if v is not None}
        self.find_calls.append(filters)
        for user in self.users:
            if all(getattr(user, k) == v for k, v in filters.items()):
                return user
        return None

    async def create_user(self, values: Mapping[str, Any]) -> None:
        self.created.append(dict(values))
        self.users.append(User(id=len(self.users) + 1, **dict(values)))

    async def update_user(self, user_id: int, values: Mapping[str, Any]) -> None:
        self.updates.append((user_id, dict(values)))
        for user in self.users:
            if user.id == user_id:
                for k, v in values.items():
                    setattr(user, k, v)


class FakeErroredUserGateway(FakeUserGateway):
    async def find_user(self, **filters) -> Optional[User]:
        raise UpstreamError(debug={"response": {"error": 99, "error_msg": "db down"}})


class FakeEmailOK:
    def __init__(self):
        self.calls: list[dict[str, Any]] = []

    async def send(
        self, *, recipient: str, template_id: int, params: Mapping[str, Any]
    ) -> None:
        self.calls.append(
            {"recipient": recipient, "template_id": template_id, "params": dict(params)}
        )

    @property
    def last_otp(self) -> str:
        return self.calls[-1]["params"]["otp"]


class FakeEmailDown:
    def __init__(self):
        self.calls: int = 0

    async def send(
        self, *, recipient: str, template_id: int, params: Mapping[str, Any]
    ) -> None:
        self.calls += 1
        raise EmailServiceError(debug={"response": {"error": 7, "error_msg": "quota"}})


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_user(
    id: int = 1,
    username: str = "alice",
    email: str = "alice@example.com",
    password: str | None = "hashed-Passw0rd!",
    **extra: Any,
) -> User:
    return User(
        id=id,
        username=username,
        email=email,
        full_name=extra.pop("full_name", "Alice Doe"),
        school_name=extra.pop("school_name", "High School"),
        password=password,
        **extra,
    )
