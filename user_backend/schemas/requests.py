from typing import Optional

from pydantic import BaseModel, Field


class LoginIn(BaseModel):
    auth_key: str = Field(..., description="Username or email", max_length=255)
    password: str = Field(..., max_length=1024)


class RequestSignupIn(BaseModel):
    email: str = Field(..., max_length=255)
    username: str = Field(..., max_length=255)
    full_name: str = Field(..., max_length=255)


class VerifyOtpIn(BaseModel):
    email: str = Field(..., max_length=255)
    username: Optional[str] = Field(..., max_length=255)
    otp: str = Field(..., min_length=6, max_length=6)


class SignupIn(BaseModel):
    token: str
    username: str = Field(..., max_length=255)
    full_name: str = Field(..., max_length=255)
    school_name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=1024)


class RequestChangeEmailIn(BaseModel):
    new_email: str = Field(..., max_length=255)


class ChangeEmailIn(BaseModel):
    token: str
    new_email: str = Field(..., max_length=255)


class RequestResetPasswordIn(BaseModel):
    email: str = Field(..., max_length=255)


class ResetPasswordIn(BaseModel):
    token: str
    email: str = Field(..., max_length=255)
    new_password: str = Field(..., max_length=1024)
