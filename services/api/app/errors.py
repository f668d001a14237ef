"""Error taxonomy and the JSON error envelope.

Every error body is ``{"success": false, "message": ..., "errors"?: [...], "error"?: ...}``.
Extraction failures use the ``error`` key only, matching the extraction client.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("cooklog.errors")

GENERIC_SERVER_ERROR = "Server error."


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, *, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_body(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class AuthenticationRequired(AppError):
    status_code = 401

    def __init__(self, message: str = "Authentication required."):
        super().__init__(message)


class AuthorizationDenied(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class ValidationFailed(AppError):
    status_code = 400

    def __init__(self, errors: list[str], message: str = "Invalid input data."):
        super().__init__(message, errors=errors)


class BadRequest(AppError):
    status_code = 400


# --- Extraction pipeline ---

class ExtractionError(AppError):
    """Terminal extraction failure. Never retried."""

    def to_body(self) -> dict:
        return {"success": False, "error": self.message}


class RecoverableInputError(ExtractionError):
    """The caller supplied something we cannot read (no transcript, bad page, no text)."""
    status_code = 400


class ConfigurationError(ExtractionError):
    """Operator error, e.g. no language-model credential."""
    status_code = 500


class UpstreamError(ExtractionError):
    """The language-model provider failed or returned something unusable."""
    status_code = 500


def format_validation_error(err: dict) -> str:
    """Render one pydantic error as a human-readable message."""
    if err.get("type") == "json_invalid":
        return "Request body is not valid JSON."

    field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
    if err.get("type") == "value_error":
        ctx_error = (err.get("ctx") or {}).get("error")
        if ctx_error is not None:
            return f"{field}: {ctx_error}" if field else str(ctx_error)
    if err.get("type") == "missing":
        return f"{field} is required." if field else "Request body is required."
    return f"{field}: {err.get('msg')}" if field else str(err.get("msg"))


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [format_validation_error(e) for e in exc.errors()]
    return JSONResponse(status_code=400, content=ValidationFailed(errors).to_body())


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": f"Rate limit exceeded: {exc.detail}"},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": GENERIC_SERVER_ERROR, "error": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
