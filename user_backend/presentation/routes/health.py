from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from user_backend.presentation.dependencies import get_app_settings, require_admin
from user_backend.schemas.responses import ok
from user_backend.settings import Settings

router = APIRouter()

_SECRET_SETTINGS = ("session_secret", "session_secret_alternative", "jwt_secret")


@router.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


@router.get("/timestamp")
async def timestamp() -> dict:
    return ok(
        "Current timestamp",
        {"timestamp": int(datetime.now(timezone.utc).timestamp())},
    )


@router.get("/settings", dependencies=[Depends(require_admin)])
async def settings(app_settings: Annotated[Settings, Depends(get_app_settings)]) -> dict:
    dumped = app_settings.model_dump()
    for name in _SECRET_SETTINGS:
        if dumped.get(name):
            dumped[name] = "********"
    return ok("Settings", {"settings": dumped})
