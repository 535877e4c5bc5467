from __future__ import annotations

from ..config import SERVER_RENDER, RendererConfig
from ..errors import RenderError, RenderStage
from ..models import ComposeMode, ConversionOptions, PdfLayout, PdfResult
from ..renderer import RenderingBackend, acquire_renderer


class ServerRenderStrategy:
    """Rasterize the static document with a freshly launched headless browser."""

    name = SERVER_RENDER
    compose_mode = ComposeMode.STATIC

    def __init__(self, backend: RenderingBackend, config: RendererConfig) -> None:
        self._backend = backend
        self._config = config

    async def render(self, document: str, options: ConversionOptions) -> PdfResult:
        layout = PdfLayout.from_options(options, print_background=self._config.print_background)
        stage: RenderStage = "launch"
        try:
            async with acquire_renderer(self._backend) as handle:
                stage = "load"
                await handle.set_content(document, timeout_s=self._config.load_timeout_s)
                stage = "export"
                data = await handle.export_pdf(layout)
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(stage, str(exc) or type(exc).__name__) from exc
        return PdfResult(data=bytes(data))
