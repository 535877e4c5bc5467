from __future__ import annotations

from fastapi import FastAPI

from core.printscript import __version__
from core.printscript.config import AppConfig, apply_settings, load_config
from core.printscript.core import ConversionService
from core.printscript.ratelimit import FixedWindowRateLimiter
from core.printscript.renderer import RenderingBackend
from core.settings import Settings, get_settings

from .errors import register_exception_handlers
from .middleware import install_middleware
from .routers import generate, health


def create_app(
    config: AppConfig | None = None,
    *,
    backend: RenderingBackend | None = None,
    rate_limiter: FixedWindowRateLimiter | None = None,
) -> FastAPI:
    config = config or _prepare_config(get_settings())

    app = FastAPI(title="PrintScript", version=__version__)
    app.state.config = config
    app.state.service = ConversionService(config, backend=backend)
    if rate_limiter is None and config.rate_limit.enabled:
        rate_limiter = FixedWindowRateLimiter(config.rate_limit.max_requests, config.rate_limit.window_s)
    app.state.rate_limiter = rate_limiter

    install_middleware(app, config)
    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(generate.router)
    return app


def _prepare_config(settings: Settings) -> AppConfig:
    return apply_settings(load_config(settings.config_path), settings)


__all__ = ["create_app"]
