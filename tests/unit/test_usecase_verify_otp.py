import pytest

from user_backend.application.verify_otp import verify_otp
from user_backend.domain.errors import OtpIncorrect


@pytest.mark.asyncio
async def test_correct_code_returns_bound_proof_token(otp_store, proof_tokens):
    code = await otp_store.create("a@x.com", "alice")

    token = await verify_otp(
        otp_store=otp_store,
        proof_tokens=proof_tokens,
        email="a@x.com",
        username="alice",
        otp=code,
    )

    proof_tokens.verify("a@x.com", "alice", token)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,username,otp",
    [
        ("a@x.com", "alice", "000000"),
        ("a@x.com", "bob", "123456"),
        ("a@x.com", None, "123456"),
        ("b@x.com", "alice", "123456"),
    ],
)
async def test_mismatch_raises_otp_incorrect(otp_store, proof_tokens, email, username, otp):
    await otp_store.create("a@x.com", "alice")

    with pytest.raises(OtpIncorrect):
        await verify_otp(
            otp_store=otp_store,
            proof_tokens=proof_tokens,
            email=email,
            username=username,
            otp=otp,
        )


@pytest.mark.asyncio
async def test_expired_code_is_rejected(otp_store, proof_tokens, clock):
    await otp_store.create("a@x.com", None)
    clock.advance(600)

    with pytest.raises(OtpIncorrect):
        await verify_otp(
            otp_store=otp_store,
            proof_tokens=proof_tokens,
            email="a@x.com",
            username=None,
            otp="123456",
        )
