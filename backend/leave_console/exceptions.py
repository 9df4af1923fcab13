from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class FormValidationError(AppError):
    """Input rejected before any upstream call was made."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


class UpstreamError(AppError):
    """The upstream HR backend answered with an error status.

    ``message`` is the backend's own ``message`` field, forwarded unmodified,
    or the generic :func:`status_text` when the body carried none.
    """

    def __init__(self, message: str, status_code: int = status.HTTP_502_BAD_GATEWAY) -> None:
        super().__init__(message, status_code=status_code)


class UpstreamUnavailableError(UpstreamError):
    """The upstream HR backend could not be reached."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY)


class UnexpectedResponseError(AppError):
    """The upstream response did not have the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY)


class ActionInProgressError(AppError):
    """A console action was started while another one is still running."""

    def __init__(self, message: str = "Another action is in progress") -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class ConfirmationRequiredError(AppError):
    """A destructive action was not confirmed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


def status_text(status_code: int) -> str:
    """Generic text for an upstream error status whose body had no message."""
    return f"Request failed with status code {status_code}"


def error_message(exc: BaseException, fallback: str) -> str:
    """Return the human-readable message for a failed console action.

    Server-reported messages win, then the exception text, then ``fallback``.
    """
    if isinstance(exc, AppError):
        return exc.message or fallback
    return str(exc) or fallback


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
