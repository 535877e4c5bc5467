from __future__ import annotations

from ..config import CLIENT_PRINT
from ..models import ComposeMode, ConversionOptions, HtmlResult


class ClientPrintStrategy:
    """Hand the interactive document back; the caller's browser prints it."""

    name = CLIENT_PRINT
    compose_mode = ComposeMode.INTERACTIVE

    async def render(self, document: str, options: ConversionOptions) -> HtmlResult:
        return HtmlResult(document=document)
