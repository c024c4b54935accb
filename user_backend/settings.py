from functools import lru_cache
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"
    show_debug: bool = False

    # Collaborators
    database_gateway_origin: str = "http://database-gateway:8010"
    email_service_origin: str = "http://email-service:8025"
    sender_email: str = "no-reply@freecontest.net"
    http_timeout_seconds: float = 10.0
    redis_url: str = "redis://redis:6379/0"

    # Email templates
    signup_email_template_id: int = 10001
    change_email_email_template_id: int = 10002
    reset_password_email_template_id: int = 10003

    # Sessions
    session_secret: str = "dev-session-secret"
    session_secret_alternative: str = ""
    session_cookie_name: str = "user_backend_session"
    session_max_age_seconds: int = 2419200  # 4 weeks

    # Proof tokens
    jwt_secret: str = "dev-jwt-secret-please-change-me-0123456789"
    proof_token_ttl_seconds: int = 600

    # OTP
    otp_backend: Literal["memory", "redis"] = "memory"
    otp_ttl_seconds: int = 600
    otp_capacity: int = 10000
    otp_consume_on_verify: bool = False

    # Security / policies
    bcrypt_rounds: int = 12
    admin_username_list: str = ""
    disable_role_verification: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_secrets_in_production(self) -> "Settings":
        if self.is_production:
            missing = [
                name
                for name in ("session_secret", "jwt_secret")
                if not getattr(self, name)
                or getattr(self, name).startswith("dev-")
            ]
            if missing:
                raise ValueError(
                    "missing production secrets: " + ", ".join(sorted(missing))
                )
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() in ("prod", "production")

    @property
    def admin_usernames(self) -> frozenset[str]:
        """Semicolon-delimited allow-list, empty items dropped."""
        return frozenset(
            name.strip() for name in self.admin_username_list.split(";") if name.strip()
        )

    @property
    def session_secrets(self) -> list[str]:
        """Accepted session secrets, primary first."""
        return [
            secret
            for secret in (self.session_secret, self.session_secret_alternative)
            if secret
        ]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
