"""Headless browser rendering backend.

A backend launches one independent browser per call; nothing is pooled. The
handle it returns owns that browser until ``close`` is awaited. Callers go
through :func:`acquire_renderer`, which releases the handle on every exit
path, including cancellation by the request timeout.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .config import RendererConfig
from .errors import RenderError
from .models import PdfLayout

logger = logging.getLogger(__name__)


class RendererHandle(Protocol):
    async def set_content(self, html: str, *, timeout_s: float) -> None:  # pragma: no cover - interface
        ...

    async def export_pdf(self, layout: PdfLayout) -> bytes:  # pragma: no cover - interface
        ...

    async def close(self) -> None:  # pragma: no cover - interface
        ...

    async def terminate(self) -> None:  # pragma: no cover - interface
        """Forcefully tear the renderer down after ``close`` failed."""


class RenderingBackend(Protocol):
    async def launch(self) -> RendererHandle:  # pragma: no cover - interface
        ...


class ChromiumHandle:
    def __init__(self, playwright, browser, page, config: RendererConfig) -> None:  # type: ignore[no-untyped-def]
        self._playwright = playwright
        self._browser = browser
        self._page = page
        self._config = config

    async def set_content(self, html: str, *, timeout_s: float) -> None:
        try:
            await self._page.set_content(
                html,
                wait_until=self._config.wait_until,
                timeout=timeout_s * 1000,
            )
        except PlaywrightTimeoutError as exc:
            raise RenderError("load", f"content did not settle within {timeout_s:.1f}s") from exc
        except PlaywrightError as exc:
            raise RenderError("load", str(exc)) from exc

    async def export_pdf(self, layout: PdfLayout) -> bytes:
        try:
            return await self._page.pdf(
                format=layout.format,
                landscape=layout.landscape,
                margin=layout.margin,
                print_background=layout.print_background,
            )
        except PlaywrightError as exc:
            raise RenderError("export", str(exc)) from exc

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()

    async def terminate(self) -> None:
        # Stopping the driver kills every browser process it spawned.
        await self._playwright.stop()


class ChromiumBackend:
    def __init__(self, config: RendererConfig | None = None) -> None:
        self._config = config or RendererConfig()

    async def launch(self) -> ChromiumHandle:
        try:
            playwright = await async_playwright().start()
        except Exception as exc:
            raise RenderError("launch", f"playwright driver unavailable: {exc}") from exc
        browser = None
        try:
            browser = await playwright.chromium.launch(
                headless=self._config.headless,
                args=list(self._config.launch_args),
            )
            page = await browser.new_page()
        except BaseException as exc:
            await self._abandon(playwright, browser)
            if isinstance(exc, PlaywrightError):
                raise RenderError("launch", str(exc)) from exc
            raise
        return ChromiumHandle(playwright, browser, page, self._config)

    async def _abandon(self, playwright, browser) -> None:  # type: ignore[no-untyped-def]
        if browser is not None:
            try:
                await browser.close()
            except Exception:
                logger.warning("Failed to close partially launched browser", exc_info=True)
        try:
            await playwright.stop()
        except Exception:
            logger.warning("Failed to stop playwright driver after launch failure", exc_info=True)


async def _terminate(handle: RendererHandle) -> None:
    try:
        await handle.terminate()
    except Exception:
        logger.error("Renderer termination failed; process may be orphaned", exc_info=True)


async def release_renderer(handle: RendererHandle) -> None:
    """Close *handle*; on failure, log and fall back to forced termination."""

    try:
        await handle.close()
    except asyncio.CancelledError:
        await _terminate(handle)
        raise
    except Exception:
        logger.warning("Renderer close failed; forcing termination", exc_info=True)
        await _terminate(handle)


@asynccontextmanager
async def acquire_renderer(backend: RenderingBackend) -> AsyncIterator[RendererHandle]:
    handle = await backend.launch()
    try:
        yield handle
    finally:
        await release_renderer(handle)


__all__ = [
    "ChromiumBackend",
    "ChromiumHandle",
    "RendererHandle",
    "RenderingBackend",
    "acquire_renderer",
    "release_renderer",
]
