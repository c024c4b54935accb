from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from user_backend.domain.entities import SessionRecord
from user_backend.domain.ports.user_gateway import UserGatewayPort


async def login(
    users: UserGatewayPort,
    auth_key: str,
    password: str,
    verify_password: Callable[[str, Optional[str]], bool],
    burn_verify: Callable[[], None],
) -> Optional[SessionRecord]:
    """
    Resolve ``auth_key`` (a username, or an email when it contains "@") and
    check ``password``. Returns the session identity, or None when either the
    user is unknown or the password is wrong; both cost one bcrypt round.
    """
    auth_key = auth_key.strip()
    if "@" in auth_key:
        user = await users.find_user(email=auth_key)
    else:
        user = await users.find_user(username=auth_key)

    if user is None:
        await run_in_threadpool(burn_verify)
        return None
    if not await run_in_threadpool(verify_password, password, user.password):
        return None
    return SessionRecord(user_id=user.id, username=user.username)
