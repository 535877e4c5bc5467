from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field

from .composer import compose
from .config import AppConfig
from .errors import PipelineTimeoutError, PrintScriptError
from .logging import RequestLogEntry, RequestLogger, StageTimings
from .models import ConversionRequest, ConversionResult, PdfResult, PipelineStage
from .renderer import RenderingBackend
from .sanitizer import sanitize
from .strategies import RenderStrategy, get_strategy
from .transformer import to_html
from .utils import elapsed_ms, generate_request_id

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _PipelineContext:
    request_id: str
    request: ConversionRequest
    stage: PipelineStage = PipelineStage.VALIDATED
    timings: StageTimings = field(default_factory=StageTimings)


class ConversionService:
    """Sanitize, transform, compose and render a markdown document.

    Steps run strictly in that order inside a single coroutine. The service
    holds no per-request state, so one instance serves every request of the
    process.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        backend: RenderingBackend | None = None,
        strategy: RenderStrategy | None = None,
    ) -> None:
        self._config = config
        self._strategy = strategy or get_strategy(config, backend)
        self._log = RequestLogger(config.runtime.request_log)

    @property
    def strategy(self) -> RenderStrategy:
        return self._strategy

    def parse_request(self, payload: object) -> ConversionRequest:
        return ConversionRequest.from_payload(payload, max_bytes=self._config.runtime.max_markdown_bytes)

    async def convert_with_timeout(
        self, request: ConversionRequest, *, request_id: str | None = None
    ) -> ConversionResult:
        timeout = self._config.runtime.request_timeout_s
        try:
            return await asyncio.wait_for(self.convert(request, request_id=request_id), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise PipelineTimeoutError(f"pipeline exceeded {timeout:.1f}s") from exc

    async def convert(self, request: ConversionRequest, *, request_id: str | None = None) -> ConversionResult:
        context = _PipelineContext(request_id=request_id or generate_request_id(), request=request)
        try:
            result = await self._run(context)
        except asyncio.CancelledError:
            await self._log_failure(context, PipelineTimeoutError.code)
            raise
        except PrintScriptError as exc:
            await self._log_failure(context, exc.code)
            raise
        except Exception as exc:
            logger.exception("Unexpected failure in stage %s of %s", context.stage.value, context.request_id)
            await self._log_failure(context, PrintScriptError.code)
            raise PrintScriptError(str(exc)) from exc
        await self._log_success(context, result)
        return result

    async def _run(self, context: _PipelineContext) -> ConversionResult:
        request = context.request

        start = time.perf_counter()
        sanitized = sanitize(request.markdown)
        context.timings.sanitize_ms = elapsed_ms(start)
        context.stage = PipelineStage.SANITIZED

        start = time.perf_counter()
        fragment = to_html(sanitized)
        context.timings.transform_ms = elapsed_ms(start)
        context.stage = PipelineStage.TRANSFORMED

        start = time.perf_counter()
        document = compose(fragment, self._strategy.compose_mode)
        context.timings.compose_ms = elapsed_ms(start)
        context.stage = PipelineStage.COMPOSED

        start = time.perf_counter()
        result = await self._strategy.render(document, request.options)
        context.timings.render_ms = elapsed_ms(start)
        context.stage = PipelineStage.RENDERED
        return result

    async def _log_success(self, context: _PipelineContext, result: ConversionResult) -> None:
        output_bytes = len(result.data) if isinstance(result, PdfResult) else len(result.document.encode("utf-8"))
        logger.info(
            "Converted %s via %s: %d bytes in, %d bytes out",
            context.request_id,
            self._strategy.name,
            context.request.size_bytes,
            output_bytes,
        )
        await self._record(self._entry(context, "success", None, output_bytes))

    async def _log_failure(self, context: _PipelineContext, code: str) -> None:
        logger.warning("Conversion %s failed in stage %s: %s", context.request_id, context.stage.value, code)
        await self._record(self._entry(context, "failure", code, 0))

    async def _record(self, entry: RequestLogEntry) -> None:
        # File I/O stays off the event loop.
        if self._log.enabled:
            await asyncio.to_thread(self._log.append, entry)

    def _entry(
        self, context: _PipelineContext, status: str, error_code: str | None, output_bytes: int
    ) -> RequestLogEntry:
        return RequestLogEntry(
            request_id=context.request_id,
            strategy=self._strategy.name,
            status=status,
            stage=context.stage.value,
            error_code=error_code,
            size_bytes=context.request.size_bytes,
            output_bytes=output_bytes,
            timings=context.timings,
        )


__all__ = ["ConversionService"]
