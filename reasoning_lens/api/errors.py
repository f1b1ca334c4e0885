"""RFC 7807 Problem Details for the reasoning API.

Every error body names its problem type under PROBLEM_BASE and carries a
request_id, echoed in the X-Request-ID header, for log correlation.
"""

import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field

PROBLEM_BASE = "https://reasoning-lens.dev/errors"

# status -> (type slug, title)
_PROBLEMS: dict[int, tuple[str, str]] = {
    400: ("bad-request", "Bad Request"),
    404: ("not-found", "Not Found"),
    405: ("method-not-allowed", "Method Not Allowed"),
    413: ("content-too-large", "Content Too Large"),
    422: ("validation-error", "Validation Error"),
    500: ("internal-error", "Internal Server Error"),
}


class ProblemDetail(BaseModel):
    """RFC 7807 error body."""

    type: str = Field(default="about:blank", description="Problem type URI")
    title: str = Field(description="Short summary of the problem type")
    status: int = Field(description="HTTP status code")
    detail: str | None = Field(default=None, description="What went wrong in this request")
    instance: str | None = Field(default=None, description="Request path")
    request_id: str = Field(description="Correlates the response with server logs")

    # 413 only
    max_chars: int | None = Field(default=None, description="Accepted content size")
    # 422 only
    errors: list[dict[str, Any]] | None = Field(default=None, description="Invalid fields")


class ContentTooLargeError(HTTPException):
    """A model response longer than the server accepts for analysis."""

    def __init__(self, length: int, max_chars: int) -> None:
        super().__init__(
            status_code=413,
            detail=f"Content is {length} characters; at most {max_chars} are accepted",
        )
        self.length = length
        self.max_chars = max_chars


def generate_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


def problem_response(
    request: Request,
    status: int,
    detail: str | None,
    **extra: Any,
) -> tuple[str, JSONResponse]:
    """Build a Problem Details response for ``status``.

    Returns:
        The generated request id and the response
    """
    request_id = generate_request_id()
    slug, title = _PROBLEMS.get(status, ("", "Error"))
    problem = ProblemDetail(
        type=f"{PROBLEM_BASE}/{slug}" if slug else "about:blank",
        title=title,
        status=status,
        detail=detail,
        instance=request.url.path,
        request_id=request_id,
        **extra,
    )
    response = JSONResponse(
        status_code=status,
        content=problem.model_dump(exclude_none=True),
        headers={"X-Request-ID": request_id},
    )
    return request_id, response


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    extra = {"max_chars": exc.max_chars} if isinstance(exc, ContentTooLargeError) else {}
    request_id, response = problem_response(
        request, exc.status_code, str(exc.detail) if exc.detail else None, **extra
    )
    logger.warning(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail} [{request_id}]")
    return response


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """422 listing each invalid field as a dotted path."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    request_id, response = problem_response(
        request, 422, f"{len(errors)} invalid field(s)", errors=errors
    )
    logger.warning(f"Rejected request to {request.url.path}: {errors} [{request_id}]")
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500 without internals; the traceback only goes to the log."""
    request_id, response = problem_response(
        request, 500, "Reasoning analysis failed unexpectedly"
    )
    logger.opt(exception=exc).error(
        f"Unhandled {type(exc).__name__} on {request.url.path} [{request_id}]"
    )
    return response


def register_error_handlers(app: FastAPI) -> None:
    # FastAPI's stubs type handlers as taking Exception
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, validation_exception_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, generic_exception_handler)
