from __future__ import annotations

import bleach
from bleach.css_sanitizer import CSSSanitizer
from markdown_it import MarkdownIt

_ALLOWED_TAGS = set(bleach.sanitizer.ALLOWED_TAGS).union(
    {
        "p",
        "br",
        "hr",
        "pre",
        "code",
        "del",
        "s",
        "span",
        "div",
        "sup",
        "sub",
        "img",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
        "ul",
        "ol",
        "li",
        "blockquote",
    }
)

_ALLOWED_ATTRIBUTES = {
    **bleach.sanitizer.ALLOWED_ATTRIBUTES,
    "a": ["href", "title"],
    "img": ["src", "alt", "title"],
    "code": ["class"],
    "span": ["class"],
    "ol": ["start"],
    "th": ["style"],
    "td": ["style"],
}

_ALLOWED_PROTOCOLS = list(bleach.sanitizer.ALLOWED_PROTOCOLS) + ["http", "https", "mailto"]

# Table cell alignment arrives as style="text-align:..." from the table rule.
_CSS_SANITIZER = CSSSanitizer(allowed_css_properties=["text-align"])


# Parser configuration:
# - html=True: inline HTML survives parsing and is filtered by the whitelist.
# - breaks=True: single newlines become <br>.
# - typographer=False: output stays byte-for-byte deterministic.
_MD = MarkdownIt(
    "commonmark",
    {
        "html": True,
        "linkify": False,
        "typographer": False,
        "breaks": True,
    },
).enable(["table", "strikethrough"])


def to_html(markdown: str) -> str:
    """Convert sanitized markdown into a whitelisted HTML fragment."""

    if not markdown:
        return ""
    rendered = _MD.render(markdown)
    return bleach.clean(
        rendered,
        tags=_ALLOWED_TAGS,
        attributes=_ALLOWED_ATTRIBUTES,
        protocols=_ALLOWED_PROTOCOLS,
        css_sanitizer=_CSS_SANITIZER,
        strip=True,
    )


__all__ = ["to_html"]
