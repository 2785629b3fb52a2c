"""Domain errors and their HTTP mapping."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import structlog

from campuscircle.config import settings

logger = structlog.get_logger(__name__)


class CampusCircleError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(CampusCircleError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class EmptyContent(ValidationError):
    default_detail = "Content is required"


class SelfFollowForbidden(ValidationError):
    default_detail = "Cannot follow yourself"


class AuthError(CampusCircleError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


class InvalidCredentials(AuthError):
    default_detail = "Invalid credentials"


class InvalidOrExpiredCredential(AuthError):
    default_detail = "Invalid or expired token"


class ForbiddenError(CampusCircleError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Unauthorized"


class NotFoundError(CampusCircleError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class TargetNotFound(NotFoundError):
    default_detail = "User not found"


class ConflictError(CampusCircleError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource was modified concurrently, please retry"


async def campuscircle_error_handler(request: Request, exc: CampusCircleError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=headers,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.exception(
        "unhandled_error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
    )
    content = {"error": "Internal server error"}
    if settings.DEBUG:
        content["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CampusCircleError, campuscircle_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
