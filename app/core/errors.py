# app/core/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import RedCapError, InternalStorageError, UnauthorizedError
from app.shared.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def _error_body(message: str, code: str, details=None) -> dict:
    return ErrorResponse(message=message, error_code=code, details=details).model_dump(mode="json", by_alias=True)


def _field_name(loc) -> str:
    # ("body", "fullName") -> "fullName"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(RedCapError)
    async def redcap_exception_handler(request: Request, exc: RedCapError):
        if isinstance(exc, UnauthorizedError):
            # El tipo concreto solo queda en el log
            logger.info(f"Rejected session token on {request.url.path}: {type(exc).__name__}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.code, exc.details),
            headers=exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail), "HTTP_ERROR"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors, reporting every offending field at once.
        """
        fields = []
        for error in exc.errors():
            name = _field_name(error.get("loc", ()))
            if name not in fields:
                fields.append(name)
        return JSONResponse(
            status_code=422,
            content=_error_body(
                f"Invalid fields: {', '.join(fields)}",
                "VALIDATION_ERROR",
                {"fields": fields},
            ),
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"Storage error on {request.method} {request.url.path}")
        error = InternalStorageError()
        return JSONResponse(status_code=error.status_code, content=_error_body(error.message, error.code))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {exc!s}",
            extra={
                "method": request.method,
                "url": str(request.url),
            },
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("An internal error occurred. Please try again later.", "INTERNAL_ERROR"),
        )
