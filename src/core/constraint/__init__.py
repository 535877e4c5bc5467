from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_PATH = Path("printscript.toml")
ENV_PREFIX = "PRINTSCRIPT_"
MAX_MARKDOWN_BYTES = 2 * 1024 * 1024
# JSON escaping can double the markdown on the wire; the rest covers options.
MAX_BODY_BYTES = 2 * MAX_MARKDOWN_BYTES + 64 * 1024
GENERATE_PATH = "/api/generate-pdf"

__all__ = ["DEFAULT_CONFIG_PATH", "ENV_PREFIX", "MAX_MARKDOWN_BYTES", "MAX_BODY_BYTES", "GENERATE_PATH"]
