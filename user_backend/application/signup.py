import logging
from typing import Callable

from fastapi.concurrency import run_in_threadpool

import user_backend.domain.services as domain_services
from user_backend.domain.errors import EmailExisted, UsernameExisted
from user_backend.domain.ports.email_port import EmailPort
from user_backend.domain.ports.otp_store import OtpStorePort
from user_backend.domain.ports.user_gateway import UserGatewayPort
from user_backend.infrastructure.security.proof_tokens import ProofTokenIssuer

logger = logging.getLogger(__name__)


async def ensure_identity_is_free(
    users: UserGatewayPort, *, username: str, email: str
) -> None:
    if await users.find_user(username=username) is not None:
        raise UsernameExisted(data={"username": username})
    if await users.find_user(email=email) is not None:
        raise EmailExisted(data={"email": email})


async def request_signup(
    users: UserGatewayPort,
    otp_store: OtpStorePort,
    email_port: EmailPort,
    email: str,
    username: str,
    full_name: str,
    template_id: int,
) -> str:
    email = domain_services.assert_email(email)
    username = domain_services.assert_username(username)

    await ensure_identity_is_free(users, username=username, email=email)

    otp = await otp_store.create(email, username)
    await email_port.send(
        recipient=email,
        template_id=template_id,
        params={"displayed_name": full_name, "otp": otp},
    )
    logger.info("signup otp sent", extra={"username": username})
    return email


async def signup(
    users: UserGatewayPort,
    proof_tokens: ProofTokenIssuer,
    token: str,
    email: str,
    username: str,
    password: str,
    full_name: str,
    school_name: str,
    hash_password: Callable[[str], str],
) -> None:
    email = domain_services.assert_email(email)
    username = domain_services.assert_username(username)
    password = domain_services.assert_password(password)

    proof_tokens.verify(email, username, token)

    # someone may have taken the name between request-signup and now
    await ensure_identity_is_free(users, username=username, email=email)

    hashed_password = await run_in_threadpool(hash_password, password)
    await users.create_user(
        {
            "username": username,
            "full_name": full_name,
            "email": email,
            "school_name": school_name,
            "password": hashed_password,
        }
    )
    logger.info("user signed up", extra={"username": username})
