"""Workspace error taxonomy and FastAPI exception handlers.

Services raise the errors below; the handlers render every failure in the
response envelope ``{"success": false, "error": "..."}``.
"""
import loguru
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.utils import PathEscapeError


class WorkspaceError(Exception):
    """Base class for workspace operation failures.

    Args:
        message: Advisory message safe to show to the client.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(WorkspaceError):
    """Raised when the target file, directory or project does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class AlreadyExistsError(WorkspaceError):
    """Raised by create-only operations when the target already exists."""

    status_code = status.HTTP_409_CONFLICT


class IsDirectoryError(WorkspaceError):
    """Raised when a file operation targets a directory."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotDirectoryError(WorkspaceError):
    """Raised when a folder operation targets something that is not a directory."""

    status_code = status.HTTP_400_BAD_REQUEST


class FileTooLargeError(WorkspaceError):
    """Raised when a file exceeds the read size cap."""

    status_code = 413


class InvalidContentError(WorkspaceError):
    """Raised when a write payload is not a string."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidNameError(WorkspaceError):
    """Raised when a folder or project name fails validation."""

    status_code = status.HTTP_400_BAD_REQUEST


class ProtectedPathError(WorkspaceError):
    """Raised when an operation would remove the root it is scoped to."""

    status_code = status.HTTP_403_FORBIDDEN


class UnexpectedIOError(WorkspaceError):
    """Catch-all for permission errors, disk full and other I/O failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _envelope(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, **extra},
    )


async def workspace_error_handler(request: Request, exc: WorkspaceError):
    """Render a taxonomy error with its own status code."""
    return _envelope(exc.status_code, exc.message)


async def path_escape_handler(request: Request, exc: PathEscapeError):
    """Confinement failures are always access-denied, never 400/404."""
    loguru.logger.warning(f"Rejected path outside workspace: {exc.relative_path!r}")
    return _envelope(
        status.HTTP_403_FORBIDDEN,
        "Access denied: path outside workspace directory",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and explicit HTTPExceptions in envelope form."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return _envelope(exc.status_code, f"API endpoint {request.url.path} not found")
    return _envelope(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400) like the rest of the taxonomy."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    return _envelope(
        status.HTTP_400_BAD_REQUEST,
        f"{location}: {message}" if location else message,
    )


def make_generic_exception_handler(expose_details: bool):
    """Build the catch-all handler; details are only exposed in development."""

    async def generic_exception_handler(request: Request, exc: Exception):
        loguru.logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        extra = {"details": str(exc)} if expose_details else {}
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            **extra,
        )

    return generic_exception_handler


def register_exception_handlers(app: FastAPI, expose_details: bool = False) -> None:
    """Attach all handlers to the application."""
    app.add_exception_handler(WorkspaceError, workspace_error_handler)
    app.add_exception_handler(PathEscapeError, path_escape_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, make_generic_exception_handler(expose_details))
