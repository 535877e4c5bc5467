"""Markdown to PDF conversion pipeline."""

from .config import AppConfig, load_config
from .core import ConversionService
from .errors import PrintScriptError, RenderError, ValidationError
from .models import ConversionOptions, ConversionRequest, ConversionResult, HtmlResult, PdfResult

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "ConversionOptions",
    "ConversionRequest",
    "ConversionResult",
    "ConversionService",
    "HtmlResult",
    "PdfResult",
    "PrintScriptError",
    "RenderError",
    "ValidationError",
    "__version__",
    "load_config",
]
