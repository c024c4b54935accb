from typing import Optional

from user_backend.domain.errors import OtpIncorrect
from user_backend.domain.ports.otp_store import OtpStorePort
from user_backend.infrastructure.security.proof_tokens import ProofTokenIssuer


async def verify_otp(
    otp_store: OtpStorePort,
    proof_tokens: ProofTokenIssuer,
    email: str,
    username: Optional[str],
    otp: str,
) -> str:
    """Exchange a correct OTP for a proof token bound to ``(email, username)``."""
    if not await otp_store.verify(email, username, otp):
        raise OtpIncorrect()
    return proof_tokens.issue(email, username)
