from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console

from ...settings import get_settings
from ..client import ClientError, PrintScriptClient
from ..config import CLIENT_PRINT, SERVER_RENDER, AppConfig, apply_settings, dump_config, load_config
from ..core import ConversionService
from ..errors import PrintScriptError
from ..models import ConversionOptions, ConversionResult, PdfResult
from ..utils import atomic_write_bytes

console = Console()

app = typer.Typer(help="Markdown to PDF conversion service")


def _load_config(path: Path | None) -> AppConfig:
    settings = get_settings()
    return apply_settings(load_config(path or settings.config_path), settings)


def _options(page_size: str, orientation: str, margin: int) -> ConversionOptions:
    return ConversionOptions.from_payload({"pageSize": page_size, "orientation": orientation, "margin": margin})


def _write_result(result: ConversionResult, source: Path, output: Path | None) -> Path:
    if isinstance(result, PdfResult):
        destination = output or source.with_suffix(".pdf")
        atomic_write_bytes(destination, result.data)
    else:
        destination = output or source.with_suffix(".html")
        atomic_write_bytes(destination, result.document.encode("utf-8"))
    return destination


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", help="Path to printscript.toml"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from api.app import create_app

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    cfg = _load_config(config)
    uvicorn.run(create_app(cfg), host=cfg.api.host, port=cfg.api.port)


@app.command()
def render(
    file: Path,
    output: Path | None = typer.Option(None, "--output", "-o", help="Destination file"),
    strategy: str | None = typer.Option(None, "--strategy", help=f"{SERVER_RENDER} or {CLIENT_PRINT}"),
    page_size: str = typer.Option("A4", "--page-size"),
    orientation: str = typer.Option("portrait", "--orientation"),
    margin: int = typer.Option(20, "--margin", min=0, help="Uniform margin in px"),
    config: Path | None = typer.Option(None, "--config", help="Path to printscript.toml"),
) -> None:
    """Convert a markdown file in-process."""
    cfg = _load_config(config)
    if strategy is not None:
        if strategy not in {SERVER_RENDER, CLIENT_PRINT}:
            console.print(f"[red]Unknown strategy[/red]: {strategy}")
            raise typer.Exit(2)
        cfg.runtime.strategy = strategy
    service = ConversionService(cfg)
    try:
        request = service.parse_request(
            {"markdown": file.read_text(encoding="utf-8"), "options": _options(page_size, orientation, margin).as_dict()}
        )
        result = asyncio.run(service.convert_with_timeout(request))
    except PrintScriptError as exc:
        console.print(f"[red]Conversion failed[/red]: {exc.code} - {exc.public_message}")
        raise typer.Exit(1) from exc
    destination = _write_result(result, file, output)
    console.print(f"[green]Success[/green]: {file} -> {destination}")


@app.command()
def request(
    file: Path,
    url: str = typer.Option("http://localhost:4000", "--url", help="Server base URL"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Destination file"),
    retries: int = typer.Option(0, "--retries", min=0, help="Retries for retryable failures"),
    page_size: str = typer.Option("A4", "--page-size"),
    orientation: str = typer.Option("portrait", "--orientation"),
    margin: int = typer.Option(20, "--margin", min=0, help="Uniform margin in px"),
) -> None:
    """Convert a markdown file through a running server."""
    with PrintScriptClient(url) as client:
        try:
            result = client.generate(
                file.read_text(encoding="utf-8"),
                _options(page_size, orientation, margin),
                retries=retries,
            )
        except ClientError as exc:
            hint = "retryable" if exc.retryable else "fix the input and retry"
            console.print(f"[red]{exc.kind} error[/red]: {exc} ({hint})")
            raise typer.Exit(1) from exc
    destination = _write_result(result, file, output)
    console.print(f"[green]Success[/green]: {file} -> {destination}")


@app.command("config")
def show_config(
    config: Path | None = typer.Option(None, "--config", help="Path to printscript.toml"),
) -> None:
    """Print the effective configuration."""
    console.print_json(dump_config(_load_config(config)))


if __name__ == "__main__":
    app()
