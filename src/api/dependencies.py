"""FastAPI dependency providers for application services."""

from __future__ import annotations

from fastapi import HTTPException, Request

from core.printscript.config import AppConfig
from core.printscript.core import ConversionService
from core.printscript.errors import QuotaError
from core.printscript.ratelimit import FixedWindowRateLimiter, RateDecision


def get_config(request: Request) -> AppConfig:
    config = getattr(request.app.state, "config", None)
    if config is None:
        raise HTTPException(status_code=503, detail="CONFIG_UNAVAILABLE")
    return config


def get_service(request: Request) -> ConversionService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="SERVICE_UNAVAILABLE")
    return service


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter | None:
    return getattr(request.app.state, "rate_limiter", None)


def client_key(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


async def enforce_quota(request: Request) -> RateDecision | None:
    limiter = get_rate_limiter(request)
    if limiter is None:
        return None
    decision = limiter.hit(client_key(request))
    request.state.rate_decision = decision
    if not decision.allowed:
        raise QuotaError(decision.reset_after)
    return decision


def rate_limit_headers(request: Request) -> dict[str, str]:
    decision: RateDecision | None = getattr(request.state, "rate_decision", None)
    if decision is None:
        return {}
    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
    }
    if not decision.allowed:
        headers["Retry-After"] = str(decision.retry_after)
    return headers


__all__ = [
    "client_key",
    "enforce_quota",
    "get_config",
    "get_rate_limiter",
    "get_service",
    "rate_limit_headers",
]
