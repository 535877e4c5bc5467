"""Error taxonomy for the conversion pipeline.

Each error carries the HTTP status it maps to and a message that is safe to
show to the caller. The exception text itself may hold internal detail.
"""

from __future__ import annotations

from typing import Literal

RenderStage = Literal["launch", "load", "export"]


class PrintScriptError(RuntimeError):
    code = "INTERNAL"
    status_code = 500
    default_message = "Server error during PDF generation. Please try again later."

    def __init__(self, message: str | None = None, *, public_message: str | None = None) -> None:
        super().__init__(message or public_message or self.default_message)
        self.public_message = public_message or self.default_message


class ValidationError(PrintScriptError):
    code = "INVALID_REQUEST"
    status_code = 400
    default_message = "Invalid or missing markdown content."

    def __init__(self, message: str | None = None) -> None:
        # Validation messages are user facing as-is.
        super().__init__(message, public_message=message or self.default_message)


class RenderError(PrintScriptError):
    code = "RENDER_FAILED"
    status_code = 500
    default_message = "Failed to generate PDF."

    def __init__(self, stage: RenderStage, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class PipelineTimeoutError(PrintScriptError):
    code = "TIMEOUT"
    status_code = 503
    default_message = "Request timed out."


class QuotaError(PrintScriptError):
    code = "RATE_LIMITED"
    status_code = 429
    default_message = "Too many requests, please try again later."

    def __init__(self, retry_after: float) -> None:
        super().__init__(f"quota exhausted, retry in {retry_after:.1f}s")
        self.retry_after = retry_after


class UnsupportedMethodError(PrintScriptError):
    code = "METHOD_NOT_ALLOWED"
    status_code = 405
    default_message = "Method not allowed"

    def __init__(self, method: str) -> None:
        super().__init__(f"{method} is not supported")
        self.method = method


__all__ = [
    "PipelineTimeoutError",
    "PrintScriptError",
    "QuotaError",
    "RenderError",
    "RenderStage",
    "UnsupportedMethodError",
    "ValidationError",
]
