"""Login e logout administrativos."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from api.routes.admin.session import credentials_match, issue_session_token
from api.routes.dependencies import admin_settings
from api.routes.responses import error_response
from config.settings import AdminSettings

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    user: str = ""
    password: str = Field(default="", alias="pass")


@router.post("/login")
async def login(
    body: LoginRequest,
    settings: AdminSettings = Depends(admin_settings),
) -> JSONResponse:
    if not credentials_match(settings, body.user, body.password):
        logger.warning("admin_login_rejected")
        return error_response(status.HTTP_401_UNAUTHORIZED, "Credenciais inválidas")

    response = JSONResponse(content={"success": True})
    response.set_cookie(
        settings.session_cookie_name,
        issue_session_token(settings),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.secure_cookie,
        samesite="lax",
        path="/",
    )
    logger.info("admin_login_succeeded")
    return response


@router.post("/logout")
async def logout(settings: AdminSettings = Depends(admin_settings)) -> JSONResponse:
    response = JSONResponse(content={"success": True})
    response.delete_cookie(settings.session_cookie_name, path="/")
    return response
