from __future__ import annotations

import httpx
import pytest

from core.constraint import GENERATE_PATH
from core.printscript.client import ClientError, PrintScriptClient, classify_error, is_retryable
from core.printscript.models import ConversionOptions, HtmlResult, PdfResult


def client_for(*responses: httpx.Response | Exception) -> tuple[PrintScriptClient, list[httpx.Request]]:
    queue = list(responses)
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return PrintScriptClient("http://printscript.test", transport=httpx.MockTransport(handler)), seen


def test_pdf_response() -> None:
    client, seen = client_for(
        httpx.Response(200, content=b"%PDF-1.7", headers={"content-type": "application/pdf"})
    )
    result = client.generate("# Hi", ConversionOptions.from_payload({"orientation": "landscape"}))
    assert isinstance(result, PdfResult)
    assert result.data == b"%PDF-1.7"
    assert seen[0].url.path == GENERATE_PATH
    assert b'"landscape"' in seen[0].content


def test_html_envelope() -> None:
    client, _ = client_for(httpx.Response(200, json={"success": True, "htmlContent": "<html></html>"}))
    result = client.generate("# Hi")
    assert isinstance(result, HtmlResult)
    assert result.document == "<html></html>"


def test_unexpected_body_is_a_server_error() -> None:
    client, _ = client_for(httpx.Response(200, json={"success": False}))
    with pytest.raises(ClientError) as exc:
        client.generate("# Hi")
    assert exc.value.kind == "server"


def test_validation_failure_is_not_retried() -> None:
    sleeps: list[float] = []
    client, seen = client_for(httpx.Response(400, json={"error": "Invalid or missing markdown content."}))
    with pytest.raises(ClientError) as exc:
        client.generate("# Hi", retries=3, sleep=sleeps.append)
    assert exc.value.kind == "validation"
    assert exc.value.status == 400
    assert not exc.value.retryable
    assert len(seen) == 1
    assert sleeps == []


def test_server_failure_is_retried_with_backoff() -> None:
    sleeps: list[float] = []
    client, seen = client_for(
        httpx.Response(500, json={"error": "Failed to generate PDF."}),
        httpx.Response(200, content=b"%PDF", headers={"content-type": "application/pdf"}),
    )
    result = client.generate("# Hi", retries=2, backoff_s=0.5, sleep=sleeps.append)
    assert isinstance(result, PdfResult)
    assert len(seen) == 2
    assert sleeps == [0.5]


def test_quota_response_honours_retry_after() -> None:
    sleeps: list[float] = []
    client, _ = client_for(
        httpx.Response(429, json={"error": "Too many requests"}, headers={"Retry-After": "7"}),
        httpx.Response(200, json={"success": True, "htmlContent": "<p></p>"}),
    )
    client.generate("# Hi", retries=1, sleep=sleeps.append)
    assert sleeps == [7.0]


def test_connection_failure_is_a_network_error() -> None:
    client, _ = client_for(httpx.ConnectError("connection refused"))
    with pytest.raises(ClientError) as exc:
        client.generate("# Hi")
    assert exc.value.kind == "network"
    assert exc.value.retryable


def test_empty_markdown_is_rejected_locally() -> None:
    client, seen = client_for()
    with pytest.raises(ClientError) as exc:
        client.generate("   \n")
    assert exc.value.kind == "validation"
    assert seen == []


@pytest.mark.parametrize(
    ("message", "status", "kind"),
    [
        ("anything", 413, "file"),
        ("anything", 422, "validation"),
        ("anything", 503, "server"),
        ("Invalid options.allowedHosts value", None, "configuration"),
        ("Failed to fetch", None, "network"),
        ("Internal server error", None, "server"),
        ("Markdown content is empty", None, "validation"),
        ("File too large", None, "file"),
        ("something odd", None, "unknown"),
    ],
)
def test_classify_error(message: str, status: int | None, kind: str) -> None:
    assert classify_error(message, status) == kind


def test_retryable_kinds() -> None:
    assert is_retryable("network")
    assert is_retryable("server")
    assert is_retryable("unknown")
    assert not is_retryable("validation")
    assert not is_retryable("configuration")
