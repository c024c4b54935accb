from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Stable codes carried in the ``error`` field of every response envelope."""

    OK = 0
    UNKNOWN_ERROR = 1
    ROUTE_NOT_FOUND = 2
    JSON_SCHEMA_VALIDATION_FAILED = 3
    DATABASE_GATEWAY_ERROR = 4
    EMAIL_SERVICE_ERROR = 5
    UNAUTHORIZED = 10
    ROLE_MUST_BE_ADMIN = 11
    USER_NOT_FOUND = 20
    USERNAME_EXISTED = 21
    EMAIL_EXISTED = 22
    INVALID_EMAIL = 30
    INVALID_USERNAME = 31
    INVALID_PASSWORD = 32
    OTP_INCORRECT = 40
    JWT_INVALID = 41


class DomainError(Exception):
    """Base class for all domain-level errors.

    ``data`` is safe to show to the caller. ``debug`` holds collaborator
    payloads and is only rendered when SHOW_DEBUG is on.
    """

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    message: str = "Unknown error"

    def __init__(
        self,
        message: str | None = None,
        *,
        data: Any = None,
        debug: Any = None,
    ) -> None:
        self.message = message or self.message
        self.data = data
        self.debug = debug
        super().__init__(self.message)


class ValidationFailed(DomainError):
    """Request body does not have the expected shape."""

    code = ErrorCode.JSON_SCHEMA_VALIDATION_FAILED
    message = "JSON schema validation failed"


class InvalidEmail(DomainError):
    code = ErrorCode.INVALID_EMAIL
    message = "Invalid email"


class InvalidUsername(DomainError):
    code = ErrorCode.INVALID_USERNAME
    message = "Invalid username"


class InvalidPassword(DomainError):
    code = ErrorCode.INVALID_PASSWORD
    message = (
        "Password must be at least 8 characters long and contain a digit, "
        "a lowercase letter and an uppercase letter"
    )


class OtpIncorrect(DomainError):
    """Wrong or expired OTP. Reported as a normal result, not a failure."""

    code = ErrorCode.OTP_INCORRECT
    message = "OTP is incorrect"


class ProofInvalid(DomainError):
    """Proof token missing, expired, forged or bound to another identity."""

    code = ErrorCode.JWT_INVALID
    message = "Invalid token"


class Unauthorized(DomainError):
    code = ErrorCode.UNAUTHORIZED
    message = "User is not logged in"


class Forbidden(DomainError):
    code = ErrorCode.ROLE_MUST_BE_ADMIN
    message = (
        "User is not an admin. "
        "Set DISABLE_ROLE_VERIFICATION=true to bypass this check."
    )


class UserNotFound(DomainError):
    """No user matches the lookup criteria (e.g., email)."""

    code = ErrorCode.USER_NOT_FOUND
    message = "User not found"


class UsernameExisted(DomainError):
    code = ErrorCode.USERNAME_EXISTED
    message = "Username already existed"


class EmailExisted(DomainError):
    code = ErrorCode.EMAIL_EXISTED
    message = "Email already existed"


class UpstreamError(DomainError):
    """Database gateway failed or answered with a non-zero code."""

    code = ErrorCode.DATABASE_GATEWAY_ERROR
    message = "Received non-zero code from Database Gateway"


class EmailServiceError(DomainError):
    code = ErrorCode.EMAIL_SERVICE_ERROR
    message = "Received non-zero code from Email Service"


class RouteNotFound(DomainError):
    code = ErrorCode.ROUTE_NOT_FOUND
    message = "You are sending a request to an undefined route."
