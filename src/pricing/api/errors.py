"""Exception handlers mapping pricing errors onto HTTP responses.

Every error body has the shape ``{"error": "<message>"}``. Unexpected
failures are logged with their traceback and reported generically.
"""

from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from pricing.exceptions import InternalError, flatten_messages
from pricing.utils.logging import get_logger

logger = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@contextmanager
def internal_errors(operation: str):
    """Convert anything but validation and lookup failures into ``InternalError``."""
    try:
        yield
    except (ValidationError, ObjectNotFoundError):
        raise
    except Exception as exc:
        logger.exception("operation_failed", operation=operation)
        raise InternalError(operation) from exc


def _request_validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info("request_rejected", path=request.url.path, messages=exc.messages)
        return _error(400, flatten_messages(exc.messages))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(400, _request_validation_message(exc))

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError):
        return _error(404, "Promotion not found")

    @app.exception_handler(InternalError)
    async def internal_error_handler(request: Request, exc: InternalError):
        return _error(500, "Internal server error")
