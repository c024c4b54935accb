import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from redis.asyncio import Redis

from user_backend.application.role_gate import RoleGate
from user_backend.domain.ports.otp_store import OtpStorePort
from user_backend.infrastructure.email.email_service_adapter import (
    HttpEmailServiceAdapter,
)
from user_backend.infrastructure.gateway.users import HttpUserGateway
from user_backend.infrastructure.http.client import (
    close_http_client,
    open_http_client,
)
from user_backend.infrastructure.otp.memory_store import InMemoryOtpStore
from user_backend.infrastructure.redis_cache.otp_store import RedisOtpStore
from user_backend.infrastructure.security.proof_tokens import ProofTokenIssuer
from user_backend.infrastructure.security.sessions import CookieSessions
from user_backend.logging import setup_logging
from user_backend.presentation.api import api
from user_backend.presentation.error_handlers import register_error_handlers
from user_backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_otp_store(settings: Settings) -> tuple[OtpStorePort, Optional[Redis]]:
    if settings.otp_backend == "redis":
        redis = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
        store = RedisOtpStore(
            redis,
            ttl_seconds=settings.otp_ttl_seconds,
            consume_on_verify=settings.otp_consume_on_verify,
        )
        return store, redis
    store = InMemoryOtpStore(
        ttl_seconds=settings.otp_ttl_seconds,
        capacity=settings.otp_capacity,
        consume_on_verify=settings.otp_consume_on_verify,
    )
    return store, None


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    settings: Settings = app.state.settings
    client = await open_http_client(timeout=settings.http_timeout_seconds)

    # Both collaborators share the one HTTP client
    app.state.user_gateway = HttpUserGateway(
        settings.database_gateway_origin, client=client
    )
    email_adapter = HttpEmailServiceAdapter(
        base_url=settings.email_service_origin,
        sender_email=settings.sender_email,
        client=client,
    )
    app.state.email_adapter = email_adapter
    logger.info(
        "user backend started",
        extra={"app_env": settings.app_env, "otp_backend": settings.otp_backend},
    )

    try:
        yield
    finally:
        # shutdown
        await email_adapter.aclose()  # it won't close the shared client
        await close_http_client()
        if app.state.redis is not None:
            await app.state.redis.aclose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(title="User Backend", version="2.0.0", lifespan=lifespan)
    app.state.settings = settings

    app.state.otp_store, app.state.redis = build_otp_store(settings)
    app.state.proof_tokens = ProofTokenIssuer(
        settings.jwt_secret, ttl_seconds=settings.proof_token_ttl_seconds
    )
    app.state.sessions = CookieSessions(
        settings.session_secrets,
        cookie_name=settings.session_cookie_name,
        max_age_seconds=settings.session_max_age_seconds,
        secure=settings.is_production,
    )
    app.state.role_gate = RoleGate(
        settings.admin_usernames, disabled=settings.disable_role_verification
    )

    register_error_handlers(app)
    app.include_router(api)
    return app


app = create_app()
