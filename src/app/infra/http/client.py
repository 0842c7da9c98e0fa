"""Cliente HTTP base para integrações externas (CRM, relay, downloads).

Sem retry automático: reenvios são sempre ação manual do administrador.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    transport: httpx.AsyncBaseTransport | None = None


class HttpError(Exception):
    """Erro de transporte (timeout, conexão) sem dados sensíveis."""

    def __init__(self, message: str, is_timeout: bool = False) -> None:
        super().__init__(message)
        self.is_timeout = is_timeout


class HttpClient:
    """Cliente HTTP simples; respostas não-2xx são devolvidas ao chamador."""

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._config = config or HttpClientConfig()

    def build_request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Request:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        return httpx.Request(method, url, headers=merged_headers, **kwargs)

    async def send(self, request: httpx.Request, follow_redirects: bool = False) -> httpx.Response:
        """Envia request já montado (permite medir o corpo antes do envio)."""
        try:
            async with httpx.AsyncClient(
                verify=self._config.verify_ssl,
                timeout=self._config.timeout_seconds,
                transport=self._config.transport,
            ) as client:
                response = await client.send(request, follow_redirects=follow_redirects)
                await response.aread()
                return response
        except httpx.TimeoutException as exc:
            logger.warning("http_timeout", extra={"method": request.method})
            raise HttpError("http_timeout", is_timeout=True) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "http_transport_error",
                extra={"method": request.method, "error_type": type(exc).__name__},
            )
            raise HttpError(f"http_transport_error: {type(exc).__name__}") from exc

    async def get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        return await self.send(self.build_request("GET", url, headers=headers), follow_redirects=True)

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.send(self.build_request("POST", url, json=payload, headers=headers))
