from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from conftest import FAKE_PDF, FakeBackend, build_config
from core.constraint import GENERATE_PATH
from core.printscript.config import CLIENT_PRINT
from core.printscript.ratelimit import FixedWindowRateLimiter


def make_client(config=None, backend: FakeBackend | None = None, **kwargs) -> TestClient:
    return TestClient(create_app(config or build_config(), backend=backend or FakeBackend(), **kwargs))


def test_generate_returns_pdf_attachment(backend: FakeBackend) -> None:
    client = make_client(backend=backend)
    response = client.post(GENERATE_PATH, json={"markdown": "# Hello World"})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="document.pdf"'
    assert response.content == FAKE_PDF
    assert backend.close_calls == 1


def test_generate_returns_html_envelope_for_client_print() -> None:
    client = make_client(build_config(CLIENT_PRINT))
    response = client.post(GENERATE_PATH, json={"markdown": "# Hello", "options": {"pageSize": "Letter"}})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "HTML content generated successfully"
    assert "<h1>Hello</h1>" in body["htmlContent"]
    assert "window.print()" in body["htmlContent"]


@pytest.mark.parametrize(
    "payload",
    [{}, {"markdown": ""}, {"markdown": 42}, {"markdown": None}],
)
def test_missing_or_invalid_markdown_is_rejected(backend: FakeBackend, payload: dict) -> None:
    client = make_client(backend=backend)
    response = client.post(GENERATE_PATH, json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid or missing markdown content."}
    assert backend.launch_calls == 0


def test_oversized_markdown_is_rejected(backend: FakeBackend) -> None:
    client = make_client(backend=backend)
    response = client.post(GENERATE_PATH, json={"markdown": "a" * (2 * 1024 * 1024 + 1)})
    assert response.status_code == 400
    assert backend.launch_calls == 0


def test_oversized_body_is_rejected_before_parsing(backend: FakeBackend) -> None:
    client = make_client(backend=backend)
    response = client.post(GENERATE_PATH, json={"markdown": "# x", "pad": "a" * (20 * 1024 * 1024)})
    assert response.status_code == 400
    assert response.json() == {"error": "Request body exceeds the 4.1 MiB limit."}
    assert backend.launch_calls == 0


def test_chunked_body_is_capped_while_streaming(backend: FakeBackend) -> None:
    config = build_config()
    config.runtime.max_body_bytes = 64
    client = make_client(config, backend)
    chunks = iter([b'{"markdown": "', b"a" * 100, b'"}'])
    response = client.post(GENERATE_PATH, content=chunks, headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": "Request body exceeds the 64 bytes limit."}
    assert backend.launch_calls == 0


def test_invalid_json_is_rejected(backend: FakeBackend) -> None:
    client = make_client(backend=backend)
    response = client.post(
        GENERATE_PATH, content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be valid JSON."}


def test_quota_exhaustion_returns_429() -> None:
    client = make_client()
    for _ in range(20):
        assert client.post(GENERATE_PATH, json={"markdown": "# ok"}).status_code == 200
    response = client.post(GENERATE_PATH, json={"markdown": "# ok"})
    assert response.status_code == 429
    assert response.json() == {"error": "Too many requests, please try again later."}
    assert int(response.headers["retry-after"]) >= 1
    assert response.headers["x-ratelimit-remaining"] == "0"


def test_rate_limit_headers_on_success() -> None:
    client = make_client(rate_limiter=FixedWindowRateLimiter(5, 60.0))
    response = client.post(GENERATE_PATH, json={"markdown": "# ok"})
    assert response.headers["x-ratelimit-limit"] == "5"
    assert response.headers["x-ratelimit-remaining"] == "4"


def test_cors_preflight_is_empty_success() -> None:
    client = make_client()
    response = client.options(
        GENERATE_PATH,
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"
    assert response.headers["x-content-type-options"] == "nosniff"


def test_bare_options_is_empty_success() -> None:
    response = make_client().options(GENERATE_PATH)
    assert response.status_code == 200
    assert response.content == b""


def test_simple_options_with_origin_carries_cors_headers() -> None:
    response = make_client().options(GENERATE_PATH, headers={"Origin": "http://localhost:3001"})
    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "http://localhost:3001"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_unlisted_origin_gets_no_cors_grant() -> None:
    response = make_client().post(
        GENERATE_PATH, json={"markdown": "# ok"}, headers={"Origin": "http://evil.example"}
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
def test_other_methods_are_not_allowed(method: str) -> None:
    response = make_client().request(method, GENERATE_PATH)
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}


def test_render_failure_hides_detail_by_default() -> None:
    client = make_client(backend=FakeBackend(fail_on="export"))
    response = client.post(GENERATE_PATH, json={"markdown": "# boom"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate PDF."}


def test_render_failure_exposes_detail_when_enabled() -> None:
    client = make_client(build_config(expose_error_details=True), FakeBackend(fail_on="export"))
    response = client.post(GENERATE_PATH, json={"markdown": "# boom"})
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to generate PDF."
    assert "printer on fire" in body["message"]


def test_timeout_returns_503() -> None:
    backend = FakeBackend(load_delay=5.0)
    client = make_client(build_config(request_timeout_s=0.05), backend)
    response = client.post(GENERATE_PATH, json={"markdown": "# slow"})
    assert response.status_code == 503
    assert response.json() == {"error": "Request timed out."}
    assert backend.close_calls == 1


def test_root_and_health() -> None:
    client = make_client()
    root = client.get("/")
    assert root.status_code == 200
    assert root.text == "PDF Converter API is running"
    health = client.get("/health").json()
    assert health["status"] == "ok"
    assert health["strategy"] == "server-render"


def test_security_headers_are_set() -> None:
    response = make_client().get("/")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "SAMEORIGIN"
    assert response.headers["referrer-policy"] == "no-referrer"
