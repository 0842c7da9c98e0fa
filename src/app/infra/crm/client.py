"""Cliente HTTP do CRM da cooperativa.

Envia o cadastro como multipart/form-data para o endpoint de criação
de cooperado convidado. Qualquer 2xx é sucesso.
"""

from __future__ import annotations

import json
import logging

import httpx

from app.infra.http.client import HttpClient, HttpClientConfig, HttpError
from app.protocols.crm_client import CrmClientProtocol, CrmFilePart, CrmSubmitResult
from config.settings import CRMSettings, get_crm_settings

logger = logging.getLogger(__name__)

_BYTES_PER_MB = 1024 * 1024
_MAX_BODY_CHARS = 2000


def format_megabytes(size_bytes: int) -> str:
    return f"{size_bytes / _BYTES_PER_MB:.2f} MB"


def describe_error_body(body: str) -> str | None:
    """Extrai detail/title/errors de um corpo JSON de erro, se houver."""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    parts: list[str] = []
    for key in ("title", "detail"):
        if data.get(key):
            parts.append(str(data[key]))
    errors = data.get("errors")
    if isinstance(errors, dict):
        for field_name, messages in errors.items():
            if isinstance(messages, list):
                messages = "; ".join(str(message) for message in messages)
            parts.append(f"{field_name}: {messages}")
    elif errors:
        parts.append(str(errors))
    return " | ".join(parts) or None


class CrmHttpClient(CrmClientProtocol):
    """POST multipart com header X-API-KEY."""

    def __init__(
        self,
        settings: CRMSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_crm_settings()
        self._http = HttpClient(
            HttpClientConfig(
                timeout_seconds=self._settings.request_timeout_seconds,
                default_headers={
                    "X-API-KEY": self._settings.api_key,
                    "Accept": "text/plain",
                },
                transport=transport,
            )
        )

    async def submit(
        self,
        fields: dict[str, str],
        files: list[CrmFilePart],
    ) -> CrmSubmitResult:
        multipart: list[tuple[str, tuple[str, bytes, str]]] = [
            (part.field_name, (part.filename, part.content, part.content_type)) for part in files
        ]
        request = self._http.build_request(
            "POST",
            self._settings.create_endpoint,
            data=fields,
            files=multipart,
        )
        payload_bytes = len(request.read())

        logger.info(
            "crm_submit_started",
            extra={"payload_bytes": payload_bytes, "file_count": len(files)},
        )
        try:
            response = await self._http.send(request)
        except HttpError as exc:
            logger.error("crm_submit_transport_failed", extra={"error": str(exc)})
            return CrmSubmitResult(
                success=False,
                error="Tempo limite excedido ao enviar ao CRM"
                if exc.is_timeout
                else "Falha de conexão com o CRM",
                payload_bytes=payload_bytes,
            )

        return self._to_result(response, payload_bytes)

    def _to_result(self, response: httpx.Response, payload_bytes: int) -> CrmSubmitResult:
        body = response.text[:_MAX_BODY_CHARS]
        if response.is_success:
            logger.info("crm_submit_succeeded", extra={"status_code": response.status_code})
            return CrmSubmitResult(
                success=True,
                status_code=response.status_code,
                body=body,
                payload_bytes=payload_bytes,
            )

        error = self._error_message(response.status_code, body, payload_bytes)
        logger.warning(
            "crm_submit_rejected",
            extra={"status_code": response.status_code, "payload_bytes": payload_bytes},
        )
        return CrmSubmitResult(
            success=False,
            status_code=response.status_code,
            body=body,
            error=error,
            payload_bytes=payload_bytes,
        )

    @staticmethod
    def _error_message(status_code: int, body: str, payload_bytes: int) -> str:
        if status_code == httpx.codes.REQUEST_ENTITY_TOO_LARGE:
            return f"Payload muito grande para o CRM ({format_megabytes(payload_bytes)})"
        details = describe_error_body(body) or body or "sem corpo"
        return f"CRM respondeu {status_code}: {details}"
