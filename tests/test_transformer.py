from core.printscript.transformer import to_html


def test_heading_levels() -> None:
    assert "<h1>Hello</h1>" in to_html("# Hello")
    assert "<h6>Deep</h6>" in to_html("###### Deep")


def test_inline_emphasis_and_code() -> None:
    html = to_html("**bold** *italic* `code` ~~gone~~")
    assert "<strong>bold</strong>" in html
    assert "<em>italic</em>" in html
    assert "<code>code</code>" in html
    assert "<s>gone</s>" in html


def test_paragraphs_and_line_breaks() -> None:
    html = to_html("first line\nsecond line\n\nnext paragraph")
    assert html.count("<p>") == 2
    assert "<br" in html


def test_fenced_code_keeps_language_class() -> None:
    html = to_html("```python\nprint(1)\n```")
    assert '<pre><code class="language-python">' in html
    assert "print(1)" in html


def test_links_lists_blockquotes_tables() -> None:
    html = to_html(
        "[site](https://example.com)\n\n"
        "- one\n- two\n\n"
        "1. first\n\n"
        "> quoted\n\n"
        "| a | b |\n|---|---|\n| 1 | 2 |\n"
    )
    assert '<a href="https://example.com">site</a>' in html
    assert "<ul>" in html and "<li>one</li>" in html
    assert "<ol>" in html
    assert "<blockquote>" in html
    assert "<table>" in html and "<th>a</th>" in html and "<td>2</td>" in html


def test_unsafe_html_and_links_are_neutralized() -> None:
    html = to_html('<img src="x.png" onerror="alert(1)">\n\n[x](javascript:alert(1))')
    assert "onerror" not in html
    assert 'href="javascript' not in html


def test_empty_input() -> None:
    assert to_html("") == ""


def test_output_is_deterministic() -> None:
    text = "# T\n\n| a |\n|---|\n| b |\n\n```\nx\n```"
    assert to_html(text) == to_html(text)
