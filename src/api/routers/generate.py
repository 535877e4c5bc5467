from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from core.constraint import GENERATE_PATH
from core.printscript.config import AppConfig
from core.printscript.core import ConversionService
from core.printscript.errors import UnsupportedMethodError, ValidationError
from core.printscript.models import ConversionResult, PdfResult
from core.printscript.ratelimit import RateDecision
from core.printscript.utils import format_size
from models.schemas import ErrorResponse, GenerateHtmlResponse

from ..dependencies import enforce_quota, get_config, get_service, rate_limit_headers

router = APIRouter(tags=["conversion"])

PDF_FILENAME = "document.pdf"

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing, non-string or oversized markdown"},
    429: {"model": ErrorResponse, "description": "Request quota exceeded"},
    500: {"model": ErrorResponse, "description": "Rendering failed"},
    503: {"model": ErrorResponse, "description": "Request timed out"},
}


@router.options(GENERATE_PATH, include_in_schema=False)
async def preflight() -> Response:
    return Response(status_code=200)


@router.post(
    GENERATE_PATH,
    summary="Convert markdown to a PDF or print-ready HTML document",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "model": GenerateHtmlResponse,
            "description": "PDF bytes, or the HTML envelope for client-side printing",
        },
        **_ERROR_RESPONSES,
    },
)
async def generate_pdf(
    request: Request,
    config: AppConfig = Depends(get_config),
    service: ConversionService = Depends(get_service),
    _quota: RateDecision | None = Depends(enforce_quota),
) -> Response:
    payload = await _read_json(request, config.runtime.max_body_bytes)
    conversion = service.parse_request(payload)
    result = await service.convert_with_timeout(conversion)
    response = serialize_result(result)
    response.headers.update(rate_limit_headers(request))
    return response


@router.api_route(
    GENERATE_PATH,
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def unsupported_method(request: Request) -> Response:
    raise UnsupportedMethodError(request.method)


async def _read_json(request: Request, limit: int) -> object:
    too_large = f"Request body exceeds the {format_size(limit)} limit."
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise ValidationError(too_large)
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise ValidationError(too_large)
    try:
        return json.loads(body)
    except ValueError as exc:
        raise ValidationError("Request body must be valid JSON.") from exc


def serialize_result(result: ConversionResult) -> Response:
    if isinstance(result, PdfResult):
        return Response(
            content=result.data,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{PDF_FILENAME}"'},
        )
    body = GenerateHtmlResponse(
        success=True,
        htmlContent=result.document,
        message="HTML content generated successfully",
    )
    return JSONResponse(content=body.model_dump())


__all__ = ["router", "serialize_result"]
