"""Sessão administrativa: cookie assinado com HMAC-SHA256.

Valor do cookie: "<expira_em_epoch>.<assinatura>". A assinatura usa a
senha administrativa como segredo, então trocar a senha invalida todas
as sessões. Não há estado no servidor.
"""

from __future__ import annotations

import hashlib
import hmac
import time

from fastapi import Depends, HTTPException, Request, status

from api.routes.dependencies import admin_settings
from config.settings import AdminSettings


def _sign(settings: AdminSettings, expires_at: int) -> str:
    message = f"{settings.username}:{expires_at}".encode()
    return hmac.new(settings.password.encode(), message, hashlib.sha256).hexdigest()


def credentials_match(settings: AdminSettings, username: str, password: str) -> bool:
    """Compara credenciais em tempo constante. Sem credencial configurada, nega."""
    if not settings.username or not settings.password:
        return False
    user_ok = hmac.compare_digest(username.encode(), settings.username.encode())
    pass_ok = hmac.compare_digest(password.encode(), settings.password.encode())
    return user_ok and pass_ok


def issue_session_token(settings: AdminSettings, now: float | None = None) -> str:
    expires_at = int((now if now is not None else time.time()) + settings.session_ttl_seconds)
    return f"{expires_at}.{_sign(settings, expires_at)}"


def is_session_valid(
    token: str | None,
    settings: AdminSettings,
    now: float | None = None,
) -> bool:
    if not token or not settings.password:
        return False
    expires_raw, _, signature = token.partition(".")
    if not expires_raw.isdigit() or not signature:
        return False
    expires_at = int(expires_raw)
    if expires_at < (now if now is not None else time.time()):
        return False
    return hmac.compare_digest(signature, _sign(settings, expires_at))


def require_admin_session(
    request: Request,
    settings: AdminSettings = Depends(admin_settings),
) -> None:
    """Dependência das rotas administrativas: 401 sem sessão válida."""
    token = request.cookies.get(settings.session_cookie_name)
    if not is_session_valid(token, settings):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sessão administrativa ausente ou expirada",
        )
