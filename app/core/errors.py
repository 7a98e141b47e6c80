"""Domain errors raised by services and their HTTP mapping.

Services never build HTTP responses; they raise one of the errors below and
``register_exception_handlers`` turns it into ``{"detail": ...}`` with the
matching status code.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger


class AppError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = 'Bad request'

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class BadRequestError(AppError):
    pass


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Not allowed'


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Not authenticated'


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict'


class DuplicateReportError(AppError):
    default_detail = 'You have already reported this photo'


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {'WWW-Authenticate': 'Bearer'} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail}, headers=headers)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('request.unhandled_error', method=request.method, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error'},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
