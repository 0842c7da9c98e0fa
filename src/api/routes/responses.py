"""Tradução de resultados de serviço em respostas HTTP."""

from __future__ import annotations

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from app.services.results import ActionResult, ErrorCode

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EXPIRED: status.HTTP_410_GONE,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.TOO_LARGE: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ErrorCode.STORAGE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.EXTERNAL: status.HTTP_502_BAD_GATEWAY,
}


def result_response(result: ActionResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """ActionResult -> JSONResponse com o status correspondente."""
    if result.success:
        return JSONResponse(content=result.to_dict(), status_code=success_status)
    code = ERROR_STATUS.get(result.error_code) if result.error_code else None
    return JSONResponse(
        content=result.to_dict(),
        status_code=code or status.HTTP_400_BAD_REQUEST,
    )


def not_found(message: str) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, message)


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        content={"success": False, "message": message, **extra},
        status_code=status_code,
    )
