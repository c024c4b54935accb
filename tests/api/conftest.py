import pytest
from fastapi.testclient import TestClient

from user_backend.main import create_app
from user_backend.presentation.dependencies import (
    get_burn_verify,
    get_email_port,
    get_hash_password,
    get_user_gateway,
    get_verify_password,
)
from user_backend.settings import Settings
from tests.conftest import TEST_JWT_SECRET
from tests.fakes import FakeEmailOK, FakeUserGateway, make_user


def make_settings(**overrides) -> Settings:
    values = dict(
        jwt_secret=TEST_JWT_SECRET,
        session_secret="test-session-secret",
        admin_username_list="root;alice",
        log_level="WARNING",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def build_app(settings: Settings, users, email_port):
    app = create_app(settings)
    app.dependency_overrides[get_user_gateway] = lambda: users
    app.dependency_overrides[get_email_port] = lambda: email_port
    app.dependency_overrides[get_hash_password] = lambda: (lambda plain: "hashed-" + plain)
    app.dependency_overrides[get_verify_password] = lambda: (
        lambda plain, hashed: hashed == "hashed-" + plain
    )
    app.dependency_overrides[get_burn_verify] = lambda: (lambda: None)
    return app


@pytest.fixture()
def api_users():
    return FakeUserGateway(
        [make_user(), make_user(id=2, username="bob", email="bob@example.com")]
    )


@pytest.fixture()
def api_email():
    return FakeEmailOK()


@pytest.fixture()
def app(api_users, api_email):
    app = build_app(make_settings(), api_users, api_email)
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    # no context manager: the lifespan (real HTTP collaborators) stays off
    return TestClient(app, raise_server_exceptions=False)


def login_as(client: TestClient, auth_key: str, password: str = "Passw0rd!") -> None:
    r = client.post("/api/v2/auth/login", json={"auth_key": auth_key, "password": password})
    assert r.json()["error"] == 0, r.json()
