import pytest

from user_backend.infrastructure.otp.memory_store import InMemoryOtpStore
from user_backend.infrastructure.security.proof_tokens import ProofTokenIssuer
from tests.fakes import FakeClock, FakeEmailOK, FakeUserGateway, make_user

TEST_JWT_SECRET = "test-jwt-secret-0123456789abcdef0123456789"


@pytest.fixture()
def users():
    return FakeUserGateway([make_user()])


@pytest.fixture()
def email_port():
    return FakeEmailOK()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def otp_store(clock):
    return InMemoryOtpStore(ttl_seconds=600, capacity=100, clock=clock)


@pytest.fixture()
def proof_tokens():
    return ProofTokenIssuer(TEST_JWT_SECRET, ttl_seconds=600)


@pytest.fixture()
def hash_password_stub():
    return lambda p: "hashed-" + p


@pytest.fixture()
def verify_password_stub():
    return lambda plain, hashed: hashed == "hashed-" + plain


@pytest.fixture(autouse=True)
def patch_code(monkeypatch):
    """
    Make the 6-digit code deterministic in all tests.
    You can override in a specific test by re-monkeypatching.
    """
    from user_backend.domain import services as domain_services

    monkeypatch.setattr(domain_services, "generate_6digit_code", lambda: "123456")
    yield
