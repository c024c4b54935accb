import pytest
from pydantic import ValidationError

from user_backend.settings import Settings, get_settings


def test_get_settings_is_cached():
    get_settings.cache_clear()
    s1 = get_settings()
    s2 = get_settings()
    assert s1 is s2  # lru_cache returns the same instance


def test_env_overrides_and_cache_clear(monkeypatch):
    # override via env and ensure cache is respected
    monkeypatch.setenv("OTP_TTL_SECONDS", "123")
    get_settings.cache_clear()
    s = get_settings()
    assert s.otp_ttl_seconds == 123

    # cleanup: remove env and reset cache
    monkeypatch.delenv("OTP_TTL_SECONDS", raising=False)
    get_settings.cache_clear()
    s2 = get_settings()
    assert s2.otp_ttl_seconds != 123  # back to default or another env value


def test_defaults_match_the_auth_policy():
    s = Settings(_env_file=None)
    assert s.otp_ttl_seconds == 600
    assert s.otp_capacity == 10000
    assert s.proof_token_ttl_seconds == 600
    assert s.session_max_age_seconds == 4 * 7 * 24 * 3600
    assert s.otp_consume_on_verify is False


def test_admin_username_list_is_semicolon_delimited():
    s = Settings(_env_file=None, admin_username_list="admin;johndoe123;;janedoe456;")
    assert s.admin_usernames == frozenset({"admin", "johndoe123", "janedoe456"})


def test_disable_role_verification_from_env(monkeypatch):
    monkeypatch.setenv("DISABLE_ROLE_VERIFICATION", "true")
    assert Settings(_env_file=None).disable_role_verification is True


def test_session_secrets_primary_first_and_skip_empty():
    s = Settings(_env_file=None, session_secret="new", session_secret_alternative="old")
    assert s.session_secrets == ["new", "old"]
    assert Settings(_env_file=None, session_secret="new").session_secrets == ["new"]


def test_production_refuses_dev_secrets():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="production")

    s = Settings(
        _env_file=None,
        app_env="production",
        session_secret="5c4ea279-314c-460b-a61f-6b4923dcd6b3",
        jwt_secret="ff0e8077-f2d2-4bb5-ae09-8b7e03cafe8f",
    )
    assert s.is_production is True
