"""Domain models for the markdown to PDF pipeline."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Mapping, Union

from ..constraint import MAX_MARKDOWN_BYTES
from .errors import ValidationError
from .utils import format_size

DEFAULT_MARGIN_PX = 20

_MARGIN_RE = re.compile(r"^\s*(\d+)\s*(px)?\s*$", re.IGNORECASE)


class PageSize(str, Enum):
    A4 = "A4"
    LETTER = "Letter"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class ComposeMode(str, Enum):
    INTERACTIVE = "interactive"
    STATIC = "static"


class PipelineStage(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    SANITIZED = "sanitized"
    TRANSFORMED = "transformed"
    COMPOSED = "composed"
    RENDERED = "rendered"
    RESPONDED = "responded"
    FAILED = "failed"


def _pick_enum(enum_cls: type[Enum], value: object, default: Enum) -> Any:
    if not isinstance(value, str):
        return default
    wanted = value.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return default


def _parse_margin(value: object) -> int:
    if isinstance(value, bool) or value is None:
        return DEFAULT_MARGIN_PX
    if isinstance(value, int):
        return value if value >= 0 else DEFAULT_MARGIN_PX
    if isinstance(value, float):
        if math.isfinite(value) and value >= 0:
            return int(value)
        return DEFAULT_MARGIN_PX
    if isinstance(value, str):
        match = _MARGIN_RE.match(value)
        if match:
            return int(match.group(1))
    return DEFAULT_MARGIN_PX


@dataclass(slots=True, frozen=True)
class ConversionOptions:
    """Layout options; malformed values fall back to defaults instead of failing."""

    page_size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    margin_px: int = DEFAULT_MARGIN_PX

    @classmethod
    def from_payload(cls, payload: object) -> "ConversionOptions":
        if not isinstance(payload, Mapping):
            return cls()
        return cls(
            page_size=_pick_enum(PageSize, payload.get("pageSize"), PageSize.A4),
            orientation=_pick_enum(Orientation, payload.get("orientation"), Orientation.PORTRAIT),
            margin_px=_parse_margin(payload.get("margin")),
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "pageSize": self.page_size.value,
            "orientation": self.orientation.value,
            "margin": self.margin_px,
        }


@dataclass(slots=True, frozen=True)
class ConversionRequest:
    markdown: str
    options: ConversionOptions = field(default_factory=ConversionOptions)

    @property
    def size_bytes(self) -> int:
        return len(self.markdown.encode("utf-8"))

    @classmethod
    def from_payload(
        cls, payload: object, *, max_bytes: int = MAX_MARKDOWN_BYTES
    ) -> "ConversionRequest":
        if not isinstance(payload, Mapping):
            raise ValidationError()
        markdown = payload.get("markdown")
        if not isinstance(markdown, str) or not markdown:
            raise ValidationError()
        request = cls(markdown=markdown, options=ConversionOptions.from_payload(payload.get("options")))
        if request.size_bytes > max_bytes:
            raise ValidationError(f"Markdown content exceeds the {format_size(max_bytes)} limit.")
        return request


@dataclass(slots=True, frozen=True)
class PdfLayout:
    """Renderer-facing layout derived from ``ConversionOptions``."""

    format: str
    landscape: bool
    margin: dict[str, str]
    print_background: bool = True

    @classmethod
    def from_options(cls, options: ConversionOptions, *, print_background: bool = True) -> "PdfLayout":
        edge = f"{options.margin_px}px"
        return cls(
            format=options.page_size.value,
            landscape=options.orientation is Orientation.LANDSCAPE,
            margin={"top": edge, "right": edge, "bottom": edge, "left": edge},
            print_background=print_background,
        )


@dataclass(slots=True, frozen=True)
class HtmlResult:
    document: str
    kind: Literal["html"] = "html"


@dataclass(slots=True, frozen=True)
class PdfResult:
    data: bytes
    kind: Literal["pdf"] = "pdf"


ConversionResult = Union[HtmlResult, PdfResult]


__all__ = [
    "ComposeMode",
    "ConversionOptions",
    "ConversionRequest",
    "ConversionResult",
    "DEFAULT_MARGIN_PX",
    "HtmlResult",
    "Orientation",
    "PageSize",
    "PdfLayout",
    "PdfResult",
    "PipelineStage",
]
