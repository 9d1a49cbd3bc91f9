"""
Translation of persona errors into HTTP responses.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from personalab.domain.exceptions import (
    FieldError,
    Forbidden,
    NotFound,
    PersonaLabError,
    StoreFailure,
    Unauthenticated,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationFailure: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    StoreFailure: status.HTTP_502_BAD_GATEWAY,
}


def status_for(error: PersonaLabError) -> int:
    for error_type, http_status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(error: PersonaLabError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error.message}
    if isinstance(error, ValidationFailure):
        body["fields"] = [field.to_dict() for field in error.errors]
    return body


async def persona_error_handler(request: Request, exc: PersonaLabError) -> JSONResponse:
    http_status = status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    if http_status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=http_status, content=error_body(exc), headers=headers)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies and parameters use the same shape as ValidationFailure."""
    errors = []
    for item in exc.errors():
        loc = [str(part) for part in item.get("loc", ()) if part != "body"]
        errors.append(FieldError(path=".".join(loc) or "__root__", reason=item.get("msg", "")))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(ValidationFailure(errors, "Invalid request.")),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PersonaLabError, persona_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
