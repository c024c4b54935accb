import logging

import user_backend.domain.services as domain_services
from user_backend.domain.entities import SessionRecord
from user_backend.domain.errors import EmailExisted, UserNotFound
from user_backend.domain.ports.email_port import EmailPort
from user_backend.domain.ports.otp_store import OtpStorePort
from user_backend.domain.ports.user_gateway import UserGatewayPort
from user_backend.infrastructure.security.proof_tokens import ProofTokenIssuer

logger = logging.getLogger(__name__)


async def _ensure_email_is_free(users: UserGatewayPort, email: str) -> None:
    if await users.find_user(email=email) is not None:
        raise EmailExisted(data={"email": email})


async def request_change_email(
    users: UserGatewayPort,
    otp_store: OtpStorePort,
    email_port: EmailPort,
    current_user: SessionRecord,
    new_email: str,
    template_id: int,
) -> str:
    new_email = domain_services.assert_email(new_email)
    username = current_user.username

    user = await users.find_user(username=username)
    if user is None:
        raise UserNotFound(data={"username": username})
    await _ensure_email_is_free(users, new_email)

    otp = await otp_store.create(new_email, username)
    await email_port.send(
        recipient=new_email,
        template_id=template_id,
        params={
            "displayed_name": user.full_name,
            "username": username,
            "new_email": new_email,
            "otp": otp,
        },
    )
    return new_email


async def change_email(
    users: UserGatewayPort,
    proof_tokens: ProofTokenIssuer,
    current_user: SessionRecord,
    new_email: str,
    token: str,
) -> str:
    new_email = domain_services.assert_email(new_email)
    proof_tokens.verify(new_email, current_user.username, token)

    await _ensure_email_is_free(users, new_email)
    await users.update_user(current_user.user_id, {"email": new_email})
    logger.info("email changed", extra={"username": current_user.username})
    return new_email
