from typing import Annotated, Callable, Optional

from fastapi import APIRouter, Depends, Response

from user_backend.application.change_email import change_email, request_change_email
from user_backend.application.login import login
from user_backend.application.reset_password import (
    request_reset_password,
    reset_password,
)
from user_backend.application.signup import request_signup, signup
from user_backend.application.verify_otp import verify_otp
from user_backend.domain.entities import SessionRecord
from user_backend.domain.errors import Unauthorized
from user_backend.domain.ports.email_port import EmailPort
from user_backend.domain.ports.otp_store import OtpStorePort
from user_backend.domain.ports.user_gateway import UserGatewayPort
from user_backend.infrastructure.security.proof_tokens import ProofTokenIssuer
from user_backend.infrastructure.security.sessions import CookieSessions
from user_backend.presentation.dependencies import (
    get_app_settings,
    get_burn_verify,
    get_current_user,
    get_email_port,
    get_hash_password,
    get_otp_store,
    get_proof_tokens,
    get_sessions,
    get_user_gateway,
    get_verify_password,
    require_current_user,
)
from user_backend.schemas.requests import (
    ChangeEmailIn,
    LoginIn,
    RequestChangeEmailIn,
    RequestResetPasswordIn,
    RequestSignupIn,
    ResetPasswordIn,
    SignupIn,
    VerifyOtpIn,
)
from user_backend.schemas.responses import failure, ok
from user_backend.settings import Settings

router = APIRouter(prefix="/auth", tags=["Auth"])

Users = Annotated[UserGatewayPort, Depends(get_user_gateway)]
Otp = Annotated[OtpStorePort, Depends(get_otp_store)]
ProofTokens = Annotated[ProofTokenIssuer, Depends(get_proof_tokens)]
Sessions = Annotated[CookieSessions, Depends(get_sessions)]
Email = Annotated[EmailPort, Depends(get_email_port)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
CurrentUser = Annotated[SessionRecord, Depends(require_current_user)]


@router.get("/login-status")
async def get_login_status(
    current_user: Annotated[Optional[SessionRecord], Depends(get_current_user)],
):
    return ok(
        "Login status",
        {
            "is_logged_in": current_user is not None,
            "username": current_user.username if current_user else None,
        },
    )


@router.post("/login")
async def post_login(
    body: LoginIn,
    response: Response,
    users: Users,
    sessions: Sessions,
    verify_password: Annotated[
        Callable[[str, Optional[str]], bool], Depends(get_verify_password)
    ],
    burn_verify: Annotated[Callable[[], None], Depends(get_burn_verify)],
):
    user = await login(
        users=users,
        auth_key=body.auth_key,
        password=body.password,
        verify_password=verify_password,
        burn_verify=burn_verify,
    )
    if user is None:
        # same shape for unknown user and wrong password, and no cookie
        return failure(Unauthorized("Unauthorized"))

    sessions.save(response, user)
    return ok("Logged in successfully", {"username": user.username})


@router.post("/logout")
async def post_logout(response: Response, sessions: Sessions):
    sessions.save(response, None)
    return ok("Logout successfully")


@router.post("/request-signup")
async def post_request_signup(
    body: RequestSignupIn,
    users: Users,
    otp_store: Otp,
    email_port: Email,
    settings: AppSettings,
):
    email = await request_signup(
        users=users,
        otp_store=otp_store,
        email_port=email_port,
        email=body.email,
        username=body.username,
        full_name=body.full_name,
        template_id=settings.signup_email_template_id,
    )
    return ok("OTP has been sent", {"email": email})


@router.post("/verify-otp")
async def post_verify_otp(body: VerifyOtpIn, otp_store: Otp, proof_tokens: ProofTokens):
    token = await verify_otp(
        otp_store=otp_store,
        proof_tokens=proof_tokens,
        email=body.email,
        username=body.username,
        otp=body.otp,
    )
    return ok("OTP is correct", {"token": token})


@router.post("/signup")
async def post_signup(
    body: SignupIn,
    users: Users,
    proof_tokens: ProofTokens,
    hash_password: Annotated[Callable[[str], str], Depends(get_hash_password)],
):
    await signup(
        users=users,
        proof_tokens=proof_tokens,
        token=body.token,
        email=body.email,
        username=body.username,
        password=body.password,
        full_name=body.full_name,
        school_name=body.school_name,
        hash_password=hash_password,
    )
    return ok("Signed up successfully", {"username": body.username, "email": body.email})


@router.post("/request-change-email")
async def post_request_change_email(
    body: RequestChangeEmailIn,
    current_user: CurrentUser,
    users: Users,
    otp_store: Otp,
    email_port: Email,
    settings: AppSettings,
):
    new_email = await request_change_email(
        users=users,
        otp_store=otp_store,
        email_port=email_port,
        current_user=current_user,
        new_email=body.new_email,
        template_id=settings.change_email_email_template_id,
    )
    return ok("OTP has been sent", {"email": new_email})


@router.post("/change-email")
async def post_change_email(
    body: ChangeEmailIn,
    current_user: CurrentUser,
    users: Users,
    proof_tokens: ProofTokens,
):
    new_email = await change_email(
        users=users,
        proof_tokens=proof_tokens,
        current_user=current_user,
        new_email=body.new_email,
        token=body.token,
    )
    return ok(
        "Successfully changed email",
        {"new_email": new_email, "username": current_user.username},
    )


@router.post("/request-reset-password")
async def post_request_reset_password(
    body: RequestResetPasswordIn,
    users: Users,
    otp_store: Otp,
    email_port: Email,
    settings: AppSettings,
):
    email = await request_reset_password(
        users=users,
        otp_store=otp_store,
        email_port=email_port,
        email=body.email,
        template_id=settings.reset_password_email_template_id,
    )
    return ok("OTP has been sent", {"email": email})


@router.post("/reset-password")
async def post_reset_password(
    body: ResetPasswordIn,
    users: Users,
    proof_tokens: ProofTokens,
    hash_password: Annotated[Callable[[str], str], Depends(get_hash_password)],
):
    user = await reset_password(
        users=users,
        proof_tokens=proof_tokens,
        email=body.email,
        new_password=body.new_password,
        token=body.token,
        hash_password=hash_password,
    )
    return ok(
        "Successfully reset password",
        {"email": body.email, "username": user.username},
    )
