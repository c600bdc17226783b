import logging
import traceback

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from shared.core.config import settings
from shared.core.errors import AppError, ErrorKind
from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)

ERROR_KIND_HTTP_STATUS = {
    ErrorKind.validation: 400,
    ErrorKind.not_found: 404,
    ErrorKind.forbidden: 403,
    ErrorKind.conflict: 409,
    ErrorKind.upstream: 502,
    ErrorKind.partial_batch: 500,
}


def failure_content(message: str, status_code: str, data=None) -> dict:
    return JsonOutResult(
        data=data,
        status="Failure",
        status_code=status_code,
        message=message
    ).model_dump()


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        http_status = ERROR_KIND_HTTP_STATUS.get(exc.kind, 500)
        if http_status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind.value, exc.message)
        return JSONResponse(
            content=failure_content(exc.message, exc.status_code),
            status_code=http_status
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() already builds the envelope
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = failure_content(str(exc.detail), str(exc.status_code))
        return JSONResponse(content=content, status_code=exc.status_code or 400, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            content=failure_content(str(exc), AppStatusCode.INVALID_INPUT),
            status_code=422
        )

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

        data = None
        if settings.is_development:
            data = {"trace": traceback.format_exception(type(exc), exc, exc.__traceback__)}

        return JSONResponse(
            content=failure_content(str(exc), AppStatusCode.OPERATION_FAILED, data=data),
            status_code=500
        )
