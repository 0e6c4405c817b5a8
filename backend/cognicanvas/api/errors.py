"""Mapping of domain exceptions to JSON error responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cognicanvas.config import sanitize_error
from cognicanvas.db.crud import (
    BatchLimitExceeded,
    DataAccessError,
    NotFoundError,
    ParentMismatchError,
)
from cognicanvas.editor import FragmentNotFound, InvalidFragment
from cognicanvas.services.chat_service import ChatError
from cognicanvas.services.navigation import NavigationError
from cognicanvas.services.notifications import NotificationNotFound

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers to the application."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        logger.warning("Validation error on %s: %s", request.url.path, errors)
        message = errors[0]["msg"] if errors else "Invalid request"
        return _error(status.HTTP_400_BAD_REQUEST, message, detail=errors)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(FragmentNotFound)
    async def fragment_not_found_handler(request: Request, exc: FragmentNotFound):
        return _error(status.HTTP_404_NOT_FOUND, "Fragment not found")

    @app.exception_handler(NotificationNotFound)
    async def notification_not_found_handler(request: Request, exc: NotificationNotFound):
        return _error(status.HTTP_404_NOT_FOUND, "Notification not found")

    @app.exception_handler(ParentMismatchError)
    async def parent_mismatch_handler(request: Request, exc: ParentMismatchError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(InvalidFragment)
    async def invalid_fragment_handler(request: Request, exc: InvalidFragment):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(NavigationError)
    async def navigation_error_handler(request: Request, exc: NavigationError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(BatchLimitExceeded)
    async def batch_limit_handler(request: Request, exc: BatchLimitExceeded):
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(ChatError)
    async def chat_error_handler(request: Request, exc: ChatError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(DataAccessError)
    async def data_access_handler(request: Request, exc: DataAccessError):
        # Already logged where it was raised
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            sanitize_error(exc, generic_message="A database error occurred."),
        )
