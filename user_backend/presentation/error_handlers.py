"""
Exception handlers turning every failure into the response envelope.

The HTTP status of a domain error comes from one table keyed by its
ErrorCode; nothing else decides it.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_backend.domain.errors import (
    DomainError,
    ErrorCode,
    RouteNotFound,
    ValidationFailed,
)
from user_backend.schemas.responses import Envelope, failure

logger = logging.getLogger(__name__)

HTTP_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.OK: status.HTTP_200_OK,
    ErrorCode.UNKNOWN_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.ROUTE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.JSON_SCHEMA_VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DATABASE_GATEWAY_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.EMAIL_SERVICE_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.ROLE_MUST_BE_ADMIN: status.HTTP_403_FORBIDDEN,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USERNAME_EXISTED: status.HTTP_409_CONFLICT,
    ErrorCode.EMAIL_EXISTED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_USERNAME: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PASSWORD: status.HTTP_400_BAD_REQUEST,
    # a wrong OTP is an answer, not a failure: the client re-prompts
    ErrorCode.OTP_INCORRECT: status.HTTP_200_OK,
    ErrorCode.JWT_INVALID: status.HTTP_400_BAD_REQUEST,
}


def http_status_for(code: ErrorCode) -> int:
    return HTTP_STATUS_BY_CODE[code]


def _show_debug(request: Request) -> bool:
    return bool(request.app.state.settings.show_debug)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code = http_status_for(exc.code)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            exc.message,
            extra={
                "error_code": exc.code.name,
                "path": request.url.path,
                "debug": exc.debug,
            },
        )
        return JSONResponse(
            status_code=status_code,
            content=failure(exc, show_debug=_show_debug(request)),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
            for e in exc.errors()
        ]
        return await domain_error_handler(request, ValidationFailed(data={"errors": errors}))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return await domain_error_handler(
                request,
                RouteNotFound(data={"method": request.method, "url": request.url.path}),
            )
        body = Envelope(
            error=int(ErrorCode.UNKNOWN_ERROR), error_msg=str(exc.detail)
        ).model_dump()
        return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unknown_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error", extra={"path": request.url.path})
        body = Envelope(error=int(ErrorCode.UNKNOWN_ERROR), error_msg="Unknown error")
        content = body.model_dump()
        if _show_debug(request):
            content["data"] = repr(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content
        )
