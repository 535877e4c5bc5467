from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from core.printscript import __version__
from core.printscript.core import ConversionService
from models.schemas import HealthStatus

from ..dependencies import get_service

router = APIRouter(tags=["health"])


@router.get("/", summary="Liveness banner", response_class=PlainTextResponse)
def root() -> str:
    return "PDF Converter API is running"


@router.get("/health", summary="Health check", response_model=HealthStatus)
def health(service: ConversionService = Depends(get_service)) -> HealthStatus:
    return HealthStatus(status="ok", version=__version__, strategy=service.strategy.name)


__all__ = ["router"]
