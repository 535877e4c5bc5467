from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from ..constraint import DEFAULT_CONFIG_PATH, MAX_BODY_BYTES, MAX_MARKDOWN_BYTES
from ..settings import Settings

SERVER_RENDER = "server-render"
CLIENT_PRINT = "client-print"

DEFAULT_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--single-process",
    "--disable-gpu",
)

DEFAULT_CORS_ORIGINS: tuple[str, ...] = ("http://localhost:3000", "http://localhost:3001")

DEFAULT_CORS_HEADERS: tuple[str, ...] = (
    "X-CSRF-Token",
    "X-Requested-With",
    "Accept",
    "Accept-Version",
    "Content-Length",
    "Content-MD5",
    "Content-Type",
    "Date",
    "X-Api-Version",
)

DEFAULT_CORS_METHODS: tuple[str, ...] = ("GET", "OPTIONS", "PATCH", "DELETE", "POST", "PUT")


@dataclass(slots=True)
class RuntimeConfig:
    strategy: str = SERVER_RENDER
    max_markdown_bytes: int = MAX_MARKDOWN_BYTES
    max_body_bytes: int = MAX_BODY_BYTES
    request_timeout_s: float = 15.0
    expose_error_details: bool = False
    request_log: Path | None = None


@dataclass(slots=True)
class RendererConfig:
    launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    headless: bool = True
    load_timeout_s: float = 10.0
    wait_until: str = "networkidle"
    print_background: bool = True


@dataclass(slots=True)
class RateLimitConfig:
    enabled: bool = True
    max_requests: int = 20
    window_s: float = 60.0


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 4000
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    cors_allow_headers: tuple[str, ...] = DEFAULT_CORS_HEADERS
    cors_allow_methods: tuple[str, ...] = DEFAULT_CORS_METHODS


@dataclass(slots=True)
class AppConfig:
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    renderer: RendererConfig = field(default_factory=RendererConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    api: APIConfig = field(default_factory=APIConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    value = raw.get(name)
    return value if isinstance(value, Mapping) else None


def _tuple_of_strings(value: object | None, default: Iterable[str]) -> tuple[str, ...]:
    if not value:
        return tuple(default)
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(str(item) for item in value)
    raise TypeError(f"Unsupported list configuration: {value!r}")


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    strategy = str(data.get("strategy", SERVER_RENDER))
    if strategy not in {SERVER_RENDER, CLIENT_PRINT}:
        raise ValueError(f"Unknown render strategy: {strategy!r}")
    request_log = data.get("request_log")
    return RuntimeConfig(
        strategy=strategy,
        max_markdown_bytes=int(data.get("max_markdown_bytes", MAX_MARKDOWN_BYTES)),
        max_body_bytes=int(data.get("max_body_bytes", MAX_BODY_BYTES)),
        request_timeout_s=float(data.get("request_timeout_s", 15.0)),
        expose_error_details=bool(data.get("expose_error_details", False)),
        request_log=Path(str(request_log)) if request_log else None,
    )


def _build_renderer(data: Mapping[str, object] | None) -> RendererConfig:
    if not data:
        return RendererConfig()
    return RendererConfig(
        launch_args=_tuple_of_strings(data.get("launch_args"), DEFAULT_LAUNCH_ARGS),
        headless=bool(data.get("headless", True)),
        load_timeout_s=float(data.get("load_timeout_s", 10.0)),
        wait_until=str(data.get("wait_until", "networkidle")),
        print_background=bool(data.get("print_background", True)),
    )


def _build_rate_limit(data: Mapping[str, object] | None) -> RateLimitConfig:
    if not data:
        return RateLimitConfig()
    return RateLimitConfig(
        enabled=bool(data.get("enabled", True)),
        max_requests=int(data.get("max_requests", 20)),
        window_s=float(data.get("window_s", 60.0)),
    )


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    return APIConfig(
        host=str(data.get("host", "127.0.0.1")),
        port=int(data.get("port", 4000)),
        cors_origins=_tuple_of_strings(data.get("cors_origins"), DEFAULT_CORS_ORIGINS),
        cors_allow_headers=_tuple_of_strings(data.get("cors_allow_headers"), DEFAULT_CORS_HEADERS),
        cors_allow_methods=_tuple_of_strings(data.get("cors_allow_methods"), DEFAULT_CORS_METHODS),
    )


def load_config(path: Path | None = None) -> AppConfig:
    raw = _read_toml(path or DEFAULT_CONFIG_PATH)
    return AppConfig(
        runtime=_build_runtime(_section(raw, "runtime")),
        renderer=_build_renderer(_section(raw, "renderer")),
        rate_limit=_build_rate_limit(_section(raw, "rate_limit")),
        api=_build_api(_section(raw, "api")),
    )


def apply_settings(config: AppConfig, settings: Settings) -> AppConfig:
    """Overlay environment settings on top of the file configuration."""

    if settings.strategy is not None:
        if settings.strategy not in {SERVER_RENDER, CLIENT_PRINT}:
            raise ValueError(f"Unknown render strategy: {settings.strategy!r}")
        config.runtime.strategy = settings.strategy
    if settings.request_timeout_s is not None:
        config.runtime.request_timeout_s = settings.request_timeout_s
    if settings.expose_error_details is not None:
        config.runtime.expose_error_details = settings.expose_error_details
    if settings.rate_limit_max is not None:
        config.rate_limit.max_requests = settings.rate_limit_max
    if settings.rate_limit_window_s is not None:
        config.rate_limit.window_s = settings.rate_limit_window_s
    if settings.host is not None:
        config.api.host = settings.host
    if settings.port is not None:
        config.api.port = settings.port
    origins = settings.cors_origin_list()
    if origins is not None:
        config.api.cors_origins = tuple(origins)
    return config


def dump_config(config: AppConfig) -> str:
    payload = {
        "runtime": {
            "strategy": config.runtime.strategy,
            "max_markdown_bytes": config.runtime.max_markdown_bytes,
            "max_body_bytes": config.runtime.max_body_bytes,
            "request_timeout_s": config.runtime.request_timeout_s,
            "expose_error_details": config.runtime.expose_error_details,
            "request_log": str(config.runtime.request_log) if config.runtime.request_log else None,
        },
        "renderer": {
            "launch_args": list(config.renderer.launch_args),
            "headless": config.renderer.headless,
            "load_timeout_s": config.renderer.load_timeout_s,
            "wait_until": config.renderer.wait_until,
            "print_background": config.renderer.print_background,
        },
        "rate_limit": {
            "enabled": config.rate_limit.enabled,
            "max_requests": config.rate_limit.max_requests,
            "window_s": config.rate_limit.window_s,
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
            "cors_origins": list(config.api.cors_origins),
            "cors_allow_headers": list(config.api.cors_allow_headers),
            "cors_allow_methods": list(config.api.cors_allow_methods),
        },
    }
    return json.dumps(payload, indent=2)


__all__ = [
    "APIConfig",
    "AppConfig",
    "CLIENT_PRINT",
    "RateLimitConfig",
    "RendererConfig",
    "RuntimeConfig",
    "SERVER_RENDER",
    "apply_settings",
    "dump_config",
    "load_config",
]
