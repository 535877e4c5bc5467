from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware

from core.printscript.config import AppConfig

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """CORS middleware whose successful preflight answers carry no body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in {"content-length", "content-type"}
        }
        return Response(status_code=200, headers=headers)


def install_middleware(app: FastAPI, config: AppConfig) -> None:
    app.add_middleware(
        EmptyPreflightCORSMiddleware,
        allow_origins=list(config.api.cors_origins),
        allow_credentials=True,
        allow_methods=list(config.api.cors_allow_methods),
        allow_headers=list(config.api.cors_allow_headers),
    )

    # Registered last so it wraps the CORS layer and also covers preflight answers.
    @app.middleware("http")
    async def _security_headers(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        for key, value in SECURITY_HEADERS.items():
            response.headers.setdefault(key, value)
        return response


__all__ = ["EmptyPreflightCORSMiddleware", "SECURITY_HEADERS", "install_middleware"]
