"""Wrap an HTML fragment into a complete, styled document.

``interactive`` documents are opened by the browser client, which prints them
to PDF itself: they carry a visible print button and trigger the print dialog
shortly after loading. ``static`` documents go to the headless renderer, so
they carry no controls that would end up in the rasterized output.
"""

from __future__ import annotations

from jinja2 import Environment

from .models import ComposeMode

PRINT_DELAY_MS = 1500

_DEFAULT_CSS = """
@media print {
  body { margin: 0; }
  .no-print { display: none; }
}
body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', 'Helvetica Neue', Arial, sans-serif;
  line-height: 1.6;
  color: #333;
  max-width: 800px;
  margin: 0 auto;
  padding: 40px 20px;
  background: white;
}
h1, h2, h3, h4, h5, h6 { color: #2c3e50; margin-top: 32px; margin-bottom: 16px; font-weight: 600; }
h1 { font-size: 2.5em; border-bottom: 2px solid #eee; padding-bottom: 10px; }
h2 { font-size: 2em; border-bottom: 1px solid #eee; padding-bottom: 8px; }
h3 { font-size: 1.5em; }
h4 { font-size: 1.25em; }
h5 { font-size: 1.1em; }
h6 { font-size: 1em; color: #6a737d; }
p { margin-bottom: 16px; }
code {
  background-color: #f6f8fa;
  padding: 2px 6px;
  border-radius: 4px;
  font-family: 'Monaco', 'Consolas', monospace;
  font-size: 0.9em;
}
pre {
  background-color: #f6f8fa;
  padding: 20px;
  border-radius: 8px;
  overflow-x: auto;
  margin: 16px 0;
  border: 1px solid #e1e4e8;
}
pre code { background: none; padding: 0; border-radius: 0; }
a { color: #0366d6; text-decoration: none; }
a:hover { text-decoration: underline; }
strong { font-weight: 600; }
em { font-style: italic; }
blockquote { border-left: 4px solid #dfe2e5; margin: 16px 0; padding: 0 16px; color: #6a737d; }
table { border-collapse: collapse; margin: 16px 0; width: 100%; }
th, td { border: 1px solid #dfe2e5; padding: 6px 13px; }
th { background: #f6f8fa; font-weight: 600; }
img { max-width: 100%; }
"""

_INTERACTIVE_CSS = """
.print-button {
  position: fixed;
  top: 20px;
  right: 20px;
  background: #0366d6;
  color: white;
  border: none;
  padding: 12px 24px;
  border-radius: 6px;
  cursor: pointer;
  font-size: 14px;
  font-weight: 600;
  box-shadow: 0 2px 4px rgba(0,0,0,0.1);
}
.print-button:hover { background: #0256cc; }
"""

_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{ title|e }}</title>
  <style>
{{ css }}
{% if interactive %}{{ interactive_css }}{% endif %}
  </style>
</head>
<body>
{% if interactive %}  <button class="print-button no-print" onclick="window.print()">Save as PDF</button>
{% endif %}{{ body }}
{% if interactive %}  <script>
    setTimeout(function() { window.print(); }, {{ print_delay_ms }});
  </script>
{% endif %}</body>
</html>
"""

_TEMPLATE = Environment(autoescape=False).from_string(_HTML_TEMPLATE)


def compose(fragment: str, mode: ComposeMode = ComposeMode.STATIC, *, title: str = "Document") -> str:
    return _TEMPLATE.render(
        title=title,
        css=_DEFAULT_CSS,
        interactive_css=_INTERACTIVE_CSS,
        interactive=mode is ComposeMode.INTERACTIVE,
        print_delay_ms=PRINT_DELAY_MS,
        body=fragment,
    )


__all__ = ["PRINT_DELAY_MS", "compose"]
