"""HTTP client for the ``/api/generate-pdf`` endpoint.

Errors are classified the same way the browser UI classifies them, so
scripted callers get the same retry semantics: network and server failures
are retried, validation failures are not.
"""

from __future__ import annotations

import time
from typing import Literal, Mapping

import httpx

from ..constraint import GENERATE_PATH
from .models import ConversionOptions, ConversionResult, HtmlResult, PdfResult

ErrorKind = Literal["network", "validation", "server", "configuration", "file", "unknown"]

_CONFIGURATION_MARKERS = ("allowedhosts", "webpack", "dev server", "cannot resolve module", "module not found")
_NETWORK_MARKERS = ("network error", "fetch", "cors", "connection", "timeout", "timed out", "econnrefused")
_SERVER_MARKERS = ("500", "502", "503", "504", "server error", "internal server")
_VALIDATION_MARKERS = ("invalid", "required", "empty", "format", "validation", "missing")
_FILE_MARKERS = ("file", "upload", "size", "type")


def classify_error(message: str, status: int | None = None) -> ErrorKind:
    if status is not None:
        if status == 413:
            return "file"
        if status in {400, 422}:
            return "validation"
        if status == 429 or status >= 500:
            return "server"
    lowered = message.lower()
    for kind, markers in (
        ("configuration", _CONFIGURATION_MARKERS),
        ("network", _NETWORK_MARKERS),
        ("server", _SERVER_MARKERS),
        ("validation", _VALIDATION_MARKERS),
        ("file", _FILE_MARKERS),
    ):
        if any(marker in lowered for marker in markers):
            return kind  # type: ignore[return-value]
    return "unknown"


def is_retryable(kind: ErrorKind) -> bool:
    return kind not in {"validation", "file", "configuration"}


class ClientError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        status: int | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.retry_after = retry_after

    @property
    def retryable(self) -> bool:
        return is_retryable(self.kind)


class PrintScriptClient:
    def __init__(
        self,
        base_url: str = "http://localhost:4000",
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "PrintScriptClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def generate(
        self,
        markdown: str,
        options: ConversionOptions | Mapping[str, object] | None = None,
        *,
        retries: int = 0,
        backoff_s: float = 1.0,
        sleep=time.sleep,  # type: ignore[no-untyped-def]
    ) -> ConversionResult:
        if not markdown.strip():
            raise ClientError("Markdown content is empty.", kind="validation")
        payload: dict[str, object] = {"markdown": markdown}
        if isinstance(options, ConversionOptions):
            payload["options"] = options.as_dict()
        elif options is not None:
            payload["options"] = dict(options)

        attempt = 0
        while True:
            try:
                return self._post(payload)
            except ClientError as exc:
                if not exc.retryable or attempt >= retries:
                    raise
                attempt += 1
                sleep(exc.retry_after if exc.retry_after is not None else backoff_s * attempt)

    def _post(self, payload: Mapping[str, object]) -> ConversionResult:
        try:
            response = self._client.post(GENERATE_PATH, json=payload)
        except httpx.TimeoutException as exc:
            raise ClientError("Request timed out. Please try again.", kind="network") from exc
        except httpx.TransportError as exc:
            raise ClientError(f"Network connection failed: {exc}", kind="network") from exc
        if response.status_code >= 400:
            raise self._error_from(response)
        content_type = response.headers.get("content-type", "")
        if content_type.startswith("application/pdf"):
            return PdfResult(data=response.content)
        body = response.json()
        if isinstance(body, dict) and body.get("success") and isinstance(body.get("htmlContent"), str):
            return HtmlResult(document=body["htmlContent"])
        raise ClientError("Invalid response format from server", kind="server", status=response.status_code)

    def _error_from(self, response: httpx.Response) -> ClientError:
        message = f"Request failed with status {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            message = body["error"]
        retry_after = response.headers.get("retry-after")
        return ClientError(
            message,
            kind=classify_error(message, response.status_code),
            status=response.status_code,
            retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
        )


__all__ = ["ClientError", "ErrorKind", "PrintScriptClient", "classify_error", "is_retryable"]
