"""Exception handlers rendering domain errors as the response envelope"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from paywise_gateway.domain.exceptions import (
    AIRefreshError,
    NotFoundError,
    PaymentLinkError,
    ProviderError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "data": None, "error": error, "message": None, "warnings": []},
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in jsonable_encoder(exc.errors())
    )
    return error_response(status.HTTP_400_BAD_REQUEST, f"Invalid request: {details}")


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, f"{exc.entity} not found")


async def ai_refresh_handler(request: Request, exc: AIRefreshError) -> JSONResponse:
    logger.error(f"AI refresh failed: {exc.cause}", extra={"request_id": _request_id(request), "client_id": exc.client_id})
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to refresh AI insights: {exc.cause}")


async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    logger.error(f"{exc.provider} error: {exc}", extra={"request_id": _request_id(request)})
    if isinstance(exc, PaymentLinkError):
        return error_response(status.HTTP_502_BAD_GATEWAY, f"Failed to create payment request: {exc}")
    return error_response(status.HTTP_502_BAD_GATEWAY, f"Provider unavailable: {exc.provider}")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unexpected error: {type(exc).__name__}: {exc}",
        exc_info=exc,
        extra={"request_id": _request_id(request), "request_path": request.url.path},
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(AIRefreshError, ai_refresh_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
