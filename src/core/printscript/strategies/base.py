from __future__ import annotations

from typing import Protocol

from ..models import ComposeMode, ConversionOptions, ConversionResult


class RenderStrategy(Protocol):
    name: str
    compose_mode: ComposeMode

    async def render(self, document: str, options: ConversionOptions) -> ConversionResult:  # pragma: no cover - interface
        ...


__all__ = ["RenderStrategy"]
