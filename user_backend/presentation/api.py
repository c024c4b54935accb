from fastapi import APIRouter

from user_backend.presentation.routers.v2.auth import router as auth_router
from user_backend.presentation.routers.v2.me import router as me_router
from user_backend.presentation.routes.health import router as health_router

api = APIRouter()

# Add all v2 routers here
routers = (auth_router, me_router, health_router)
for router in routers:
    api.include_router(router, prefix="/api/v2")
