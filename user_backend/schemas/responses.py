from typing import Any

from pydantic import BaseModel, Field

from user_backend.domain.errors import DomainError, ErrorCode


class Envelope(BaseModel):
    """Every response body, success or failure."""

    error: int = Field(0, description="0 on success, an ErrorCode otherwise")
    error_msg: str = ""
    data: Any = None


def ok(error_msg: str, data: Any = None) -> dict:
    return Envelope(error=int(ErrorCode.OK), error_msg=error_msg, data=data).model_dump()


def failure(exc: DomainError, *, show_debug: bool = False) -> dict:
    body = Envelope(error=int(exc.code), error_msg=exc.message, data=exc.data).model_dump()
    if show_debug and exc.debug is not None:
        body["debug"] = exc.debug
    return body
