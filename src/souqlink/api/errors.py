"""Map domain and framework exceptions onto ``{"error": "..."}`` JSON responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from pydantic import ValidationError as SchemaValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from souqlink.shared.exceptions import SouqLinkError
from souqlink.utils.logging import get_logger

logger = get_logger(__name__)


def _format_messages(messages):
    if isinstance(messages, dict):
        parts = []
        for field, errors in messages.items():
            text = "; ".join(str(e) for e in errors) if isinstance(errors, (list, tuple)) else str(errors)
            # Protean uses "_entity" for errors that belong to no single field
            parts.append(text if field.startswith("_") else f"{field}: {text}")
        return ", ".join(parts)
    return str(messages)


def _format_schema_errors(errors):
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", "Invalid request"))
    return ", ".join(parts) or "Invalid request"


def _error(status_code, message):
    return JSONResponse(status_code=status_code, content={"error": message})


async def _validation_error(request: Request, exc: ValidationError):
    return _error(400, _format_messages(exc.messages))


async def _request_validation_error(request: Request, exc: RequestValidationError):
    return _error(400, _format_schema_errors(exc.errors()))


async def _schema_validation_error(request: Request, exc: SchemaValidationError):
    return _error(400, _format_schema_errors(exc.errors()))


async def _not_found(request: Request, exc: ObjectNotFoundError):
    return _error(404, _format_messages(exc.args[0]) if exc.args else "Not found")


async def _domain_error(request: Request, exc: SouqLinkError):
    return _error(exc.status_code, exc.message)


async def _http_error(request: Request, exc: StarletteHTTPException):
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return _error(exc.status_code, message)


async def _unhandled_error(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return _error(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(SchemaValidationError, _schema_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(SouqLinkError, _domain_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)
