"""Translate pipeline errors into JSON error responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.printscript.errors import PrintScriptError
from models.schemas import ErrorResponse

from .dependencies import get_config, rate_limit_headers


def error_response(request: Request, exc: PrintScriptError) -> JSONResponse:
    body = ErrorResponse(error=exc.public_message)
    detail = str(exc)
    if get_config(request).runtime.expose_error_details and detail != exc.public_message:
        body.message = detail
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=rate_limit_headers(request),
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PrintScriptError)
    async def _handle_pipeline_error(request: Request, exc: PrintScriptError) -> JSONResponse:
        return error_response(request, exc)


__all__ = ["error_response", "register_exception_handlers"]
