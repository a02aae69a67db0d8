"""Translation of repository errors into HTTP responses"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from nuleaf.errors import (
    DependencyMissing,
    InternalError,
    InvalidIdentifier,
    NotFound,
    RepositoryError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[RepositoryError], int] = {
    InvalidIdentifier: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DependencyMissing: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: RepositoryError) -> int:
    for error_class, status_code in STATUS_CODES.items():
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"error": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
