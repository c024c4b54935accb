from typing import Annotated

from fastapi import APIRouter, Depends

from user_backend.domain.entities import SessionRecord
from user_backend.domain.errors import UserNotFound
from user_backend.domain.ports.user_gateway import UserGatewayPort
from user_backend.presentation.dependencies import (
    get_user_gateway,
    require_current_user,
)
from user_backend.schemas.responses import ok

router = APIRouter(prefix="/me", tags=["Me"])


@router.get("")
async def get_me(
    current_user: Annotated[SessionRecord, Depends(require_current_user)],
    users: Annotated[UserGatewayPort, Depends(get_user_gateway)],
):
    user = await users.find_user(id=current_user.user_id)
    if user is None:
        raise UserNotFound(
            "Can not find any user match the given info",
            data={"user_id": current_user.user_id},
        )
    return ok("Me", {"user": user.public_profile()})
