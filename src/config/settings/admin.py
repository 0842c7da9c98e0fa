"""Settings do back-office administrativo.

Credencial única compartilhada; a sessão é um cookie assinado (HMAC).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class AdminSettings:
    """Configurações do acesso administrativo.

    Attributes:
        username: Usuário administrativo
        password: Senha administrativa
        session_cookie_name: Nome do cookie de sessão
        session_ttl_seconds: Validade da sessão
        secure_cookie: Envia o cookie apenas via HTTPS
    """

    username: str = ""
    password: str = ""
    session_cookie_name: str = "admin_session"
    session_ttl_seconds: int = 24 * 60 * 60
    secure_cookie: bool = True

    def validate(self) -> list[str]:
        """Valida configurações administrativas."""
        errors: list[str] = []
        if not self.username or not self.password:
            errors.append("ADMIN_USERNAME e ADMIN_PASSWORD devem estar configurados")
        return errors


def _load_admin_from_env() -> AdminSettings:
    """Carrega AdminSettings de variáveis de ambiente."""
    return AdminSettings(
        username=os.getenv("ADMIN_USERNAME", ""),
        password=os.getenv("ADMIN_PASSWORD", ""),
        session_ttl_seconds=int(os.getenv("ADMIN_SESSION_TTL_SECONDS", str(24 * 60 * 60))),
        secure_cookie=os.getenv("ADMIN_SECURE_COOKIE", "true").lower() in ("true", "1"),
    )


@lru_cache(maxsize=1)
def get_admin_settings() -> AdminSettings:
    """Retorna instância cacheada de AdminSettings."""
    return _load_admin_from_env()
