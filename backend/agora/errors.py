# backend/agora/errors.py
"""
Exception handlers.

Every error response carries ``{"message": str}``; domain errors add their
``code`` so clients can branch without parsing text.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)


def _error_body(
    message: str, code: Optional[str] = None, errors: Optional[Any] = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    if code:
        body["code"] = code
    if errors is not None:
        body["errors"] = errors
    return body


def _parse_detail(detail: Any) -> tuple[str, Optional[str]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        return (message if isinstance(message, str) else ""), code
    if isinstance(detail, str):
        return detail, None
    if detail is None:
        return "", None
    return str(detail), None


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
        return JSONResponse(_error_body(exc.message, exc.code), status_code=exc.status_code)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        message, code = _parse_detail(exc.detail)
        return JSONResponse(
            _error_body(message, code), status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message, code = _parse_detail(exc.detail)
        return JSONResponse(
            _error_body(message, code), status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid {location}: {first.get('msg')}" if location else "Invalid request."
        return JSONResponse(
            _error_body(message, "validation_error", errors),
            status_code=422,
        )
