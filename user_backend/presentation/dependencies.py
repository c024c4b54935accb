from functools import partial
from typing import Annotated, Callable, Optional

from fastapi import Depends, Request

from user_backend.application.role_gate import RoleGate
from user_backend.domain.entities import SessionRecord
from user_backend.domain.ports.email_port import EmailPort
from user_backend.domain.ports.otp_store import OtpStorePort
from user_backend.domain.ports.user_gateway import UserGatewayPort
from user_backend.infrastructure.security.password import (
    burn_verify,
    hash_password,
    verify_password,
)
from user_backend.infrastructure.security.proof_tokens import ProofTokenIssuer
from user_backend.infrastructure.security.sessions import CookieSessions
from user_backend.settings import Settings


# The stores below are built once in user_backend.main.create_app() and live on app.state.


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_otp_store(request: Request) -> OtpStorePort:
    return request.app.state.otp_store


def get_proof_tokens(request: Request) -> ProofTokenIssuer:
    return request.app.state.proof_tokens


def get_sessions(request: Request) -> CookieSessions:
    return request.app.state.sessions


def get_role_gate(request: Request) -> RoleGate:
    return request.app.state.role_gate


# These two are set in user_backend.main lifespan(), once the shared HTTP client is open.


def get_user_gateway(request: Request) -> UserGatewayPort:
    return request.app.state.user_gateway


def get_email_port(request: Request) -> EmailPort:
    return request.app.state.email_adapter


def get_hash_password(request: Request) -> Callable[[str], str]:
    return partial(hash_password, rounds=request.app.state.settings.bcrypt_rounds)


def get_verify_password() -> Callable[[str, Optional[str]], bool]:
    return verify_password


def get_burn_verify() -> Callable[[], None]:
    return burn_verify


def get_current_user(
    request: Request,
    sessions: Annotated[CookieSessions, Depends(get_sessions)],
) -> Optional[SessionRecord]:
    return sessions.load(request)


def require_current_user(
    request: Request,
    sessions: Annotated[CookieSessions, Depends(get_sessions)],
) -> SessionRecord:
    return sessions.load_or_fail(request)


def require_admin(
    current_user: Annotated[Optional[SessionRecord], Depends(get_current_user)],
    role_gate: Annotated[RoleGate, Depends(get_role_gate)],
) -> None:
    role_gate.require_admin(current_user)
