import logging
from typing import Callable

from fastapi.concurrency import run_in_threadpool

import user_backend.domain.services as domain_services
from user_backend.domain.entities import User
from user_backend.domain.errors import UserNotFound
from user_backend.domain.ports.email_port import EmailPort
from user_backend.domain.ports.otp_store import OtpStorePort
from user_backend.domain.ports.user_gateway import UserGatewayPort
from user_backend.infrastructure.security.proof_tokens import ProofTokenIssuer

logger = logging.getLogger(__name__)


async def _get_user_with_email(users: UserGatewayPort, email: str) -> User:
    user = await users.find_user(email=email)
    if user is None:
        raise UserNotFound(data={"email": email})
    return user


async def request_reset_password(
    users: UserGatewayPort,
    otp_store: OtpStorePort,
    email_port: EmailPort,
    email: str,
    template_id: int,
) -> str:
    email = domain_services.assert_email(email)
    user = await _get_user_with_email(users, email)

    # recovery codes are bound to the email alone
    otp = await otp_store.create(email, None)
    await email_port.send(
        recipient=email,
        template_id=template_id,
        params={
            "displayed_name": user.full_name,
            "username": user.username,
            "otp": otp,
        },
    )
    return email


async def reset_password(
    users: UserGatewayPort,
    proof_tokens: ProofTokenIssuer,
    email: str,
    new_password: str,
    token: str,
    hash_password: Callable[[str], str],
) -> User:
    email = domain_services.assert_email(email)
    new_password = domain_services.assert_password(new_password)
    proof_tokens.verify(email, None, token)

    user = await _get_user_with_email(users, email)
    hashed_password = await run_in_threadpool(hash_password, new_password)
    await users.update_user(user.id, {"password": hashed_password})
    logger.info("password reset", extra={"username": user.username})
    return user
