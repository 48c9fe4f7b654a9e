"""
Exception types and handlers shaping every error body as
``{"message": ..., ["fields": ...,] ["errors": [...]]}``.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas import error_kind, error_message
from domain.errors import PersistenceError

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Erro de validação."
INTERNAL_ERROR_MESSAGE = "Erro interno do servidor."

_LOCATION_PREFIXES = ("body", "query", "path")


class ApiError(Exception):
    """An error a route has already classified into a status code and message."""

    def __init__(self, status_code: int, message: str, fields: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.fields = fields

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"message": self.message}
        if self.fields is not None:
            result["fields"] = self.fields
        return result


def _field_from_loc(loc) -> Optional[str]:
    """Last named part of ``loc``; model-level errors fall back to their location."""
    names = [str(part) for part in loc if not isinstance(part, int)]
    location = None
    if names and names[0] in _LOCATION_PREFIXES:
        location, names = names[0], names[1:]
    return names[-1] if names else location


def describe_validation_errors(errors) -> List[Dict[str, Any]]:
    described = []
    for err in errors:
        field = _field_from_loc(err.get("loc", ()))
        error_type = err.get("type", "")
        described.append({
            "field": field,
            "kind": error_kind(error_type),
            "message": error_message(field, error_type, err.get("msg", "")),
        })
    return described


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with one entry per failed check."""
    return JSONResponse(
        status_code=400,
        content={"message": VALIDATION_MESSAGE, "errors": describe_validation_errors(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def persistence_exception_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Anything a route did not classify is logged and hidden behind a generic 500."""
    logger.error(
        "Unhandled persistence error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PersistenceError, persistence_exception_handler)
