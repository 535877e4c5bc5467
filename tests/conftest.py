from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from core.printscript.config import CLIENT_PRINT, SERVER_RENDER, AppConfig, RuntimeConfig
from core.printscript.errors import RenderError
from core.printscript.models import PdfLayout

FAKE_PDF = b"%PDF-1.7\n% fake renderer output\n%%EOF\n"


class FakeHandle:
    def __init__(self, backend: "FakeBackend") -> None:
        self._backend = backend

    async def set_content(self, html: str, *, timeout_s: float) -> None:
        self._backend.documents.append(html)
        if self._backend.load_delay:
            await asyncio.sleep(self._backend.load_delay)
        if self._backend.fail_on == "load":
            raise RenderError("load", "content did not settle")

    async def export_pdf(self, layout: PdfLayout) -> bytes:
        self._backend.layouts.append(layout)
        if self._backend.fail_on == "export":
            raise RuntimeError("printer on fire")
        return FAKE_PDF

    async def close(self) -> None:
        self._backend.close_calls += 1
        if self._backend.close_fails:
            raise RuntimeError("browser refused to close")

    async def terminate(self) -> None:
        self._backend.terminate_calls += 1


class FakeBackend:
    """In-memory stand-in for the headless browser that records its lifecycle."""

    def __init__(
        self,
        *,
        fail_on: str | None = None,
        load_delay: float = 0.0,
        close_fails: bool = False,
    ) -> None:
        self.fail_on = fail_on
        self.load_delay = load_delay
        self.close_fails = close_fails
        self.launch_calls = 0
        self.close_calls = 0
        self.terminate_calls = 0
        self.documents: list[str] = []
        self.layouts: list[PdfLayout] = []

    async def launch(self) -> FakeHandle:
        self.launch_calls += 1
        if self.fail_on == "launch":
            raise RenderError("launch", "chromium executable not found")
        return FakeHandle(self)


def build_config(
    strategy: str = SERVER_RENDER,
    *,
    request_log: Path | None = None,
    request_timeout_s: float = 15.0,
    expose_error_details: bool = False,
) -> AppConfig:
    runtime = RuntimeConfig(
        strategy=strategy,
        request_timeout_s=request_timeout_s,
        expose_error_details=expose_error_details,
        request_log=request_log,
    )
    return AppConfig(runtime=runtime)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client_print_config() -> AppConfig:
    return build_config(CLIENT_PRINT)
