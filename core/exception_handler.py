import logging

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from core.exceptions import BaseCustomException

logger = logging.getLogger("wallet")


def _error_response(status_code: int, message: str, errors: list | None = None) -> JSONResponse:
    content = {"status": "error", "message": message}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def _format_errors(raw_errors: list[dict]) -> list[dict]:
    errors = []
    for error in raw_errors:
        field_path = ".".join(
            str(x) for x in error["loc"] if not isinstance(x, int) and x != "body"
        )
        errors.append({
            "field": field_path or "body",
            "message": error["msg"],
            "type": error["type"]
        })
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation errors.

    Parameters
    ----------
    request : Request
        FastAPI request
    exc : RequestValidationError
        Validation error

    Returns
    -------
    JSONResponse
        Error response
    """
    return _error_response(422, "Validation error", _format_errors(exc.errors()))


async def entity_validation_exception_handler(request: Request, exc: ValidationError):
    """
    Handler for domain entities rejecting malformed data (e.g. stored records).

    Parameters
    ----------
    request : Request
        FastAPI request
    exc : ValidationError
        Pydantic validation error raised outside request parsing

    Returns
    -------
    JSONResponse
        Error response
    """
    return _error_response(400, "error.entity.invalid", _format_errors(exc.errors()))


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handler for HTTP exceptions.

    Parameters
    ----------
    request : Request
        FastAPI request
    exc : HTTPException
        HTTP exception

    Returns
    -------
    JSONResponse
        Error response
    """
    return _error_response(exc.status_code, exc.detail)


async def starlette_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for Starlette HTTP exceptions.
    """
    return await http_exception_handler(request, HTTPException(status_code=exc.status_code, detail=exc.detail))


async def custom_exception_handler(request: Request, exc: Exception):
    """
    Handler for custom and unexpected exceptions.

    Parameters
    ----------
    request : Request
        FastAPI request
    exc : Exception
        Exception

    Returns
    -------
    JSONResponse
        Error response
    """
    if isinstance(exc, BaseCustomException):
        return _error_response(exc.get_status_code(), exc.message)

    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error_response(500, "Internal server error")
