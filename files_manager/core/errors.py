# files_manager/core/errors.py
import logging

import redis
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FilesManagerError(Exception):
    """Base class for errors reported to API clients as ``{"error": message}``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class ConflictError(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already exist"


class AuthError(FilesManagerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFoundError(FilesManagerError):
    # also used when the caller may not see the node, so existence never leaks
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class NoContentError(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "A folder doesn't have content"


class InternalError(FilesManagerError):
    pass


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FilesManagerError)
    async def files_manager_error_handler(request: Request, exc: FilesManagerError):
        if isinstance(exc, InternalError):
            # the detail names server paths, keep it in the log
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
            return error_response(exc.status_code, InternalError.default_message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    # store failures surface as a generic 500
    @app.exception_handler(SQLAlchemyError)
    @app.exception_handler(redis.RedisError)
    @app.exception_handler(BotoCoreError)
    @app.exception_handler(ClientError)
    async def store_error_handler(request: Request, exc: Exception):
        logger.exception("Store error on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
