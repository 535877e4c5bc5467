"""Removal of executable markup from raw markdown text.

Markdown passes raw HTML through to the rendered fragment, and in the
server-render path that fragment is loaded into a real browser engine. The
patterns below strip the constructs that would execute there while leaving
ordinary markdown syntax untouched.
"""

from __future__ import annotations

import re

_FLAGS = re.IGNORECASE | re.DOTALL

_EXECUTABLE_TAGS = ("script", "iframe", "object", "embed")

_BLOCK_PATTERNS = tuple(
    re.compile(rf"<{tag}\b[^>]*>.*?</{tag}\s*>", _FLAGS) for tag in _EXECUTABLE_TAGS
)
_DANGLING_PATTERNS = tuple(
    re.compile(rf"</?{tag}\b[^>]*>", _FLAGS) for tag in _EXECUTABLE_TAGS
)


def _strip_once(text: str) -> str:
    for pattern in _BLOCK_PATTERNS:
        text = pattern.sub("", text)
    for pattern in _DANGLING_PATTERNS:
        text = pattern.sub("", text)
    return text


def sanitize(markdown: str) -> str:
    """Return *markdown* with script-like blocks and stray tags removed.

    Removal repeats until nothing changes, so fragments such as
    ``<scr<script></script>ipt>`` cannot reassemble into a live tag and the
    function is idempotent.
    """

    current = markdown
    while True:
        cleaned = _strip_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


__all__ = ["sanitize"]
