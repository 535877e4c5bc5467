from __future__ import annotations

from ..config import CLIENT_PRINT, SERVER_RENDER, AppConfig
from ..renderer import ChromiumBackend, RenderingBackend
from .base import RenderStrategy
from .client_print import ClientPrintStrategy
from .server_render import ServerRenderStrategy


def get_strategy(config: AppConfig, backend: RenderingBackend | None = None) -> RenderStrategy:
    """Resolve the deployment's single render strategy from configuration."""

    name = config.runtime.strategy
    if name == CLIENT_PRINT:
        return ClientPrintStrategy()
    if name == SERVER_RENDER:
        return ServerRenderStrategy(backend or ChromiumBackend(config.renderer), config.renderer)
    raise KeyError(f"No render strategy registered for {name!r}")


__all__ = [
    "ClientPrintStrategy",
    "RenderStrategy",
    "ServerRenderStrategy",
    "get_strategy",
]
