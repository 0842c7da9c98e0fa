"""Download de arquivos por URL pública (documentos já enviados)."""

from __future__ import annotations

import logging

from app.infra.http.client import HttpClient, HttpClientConfig, HttpError
from app.protocols.file_fetcher import FetchedFile, FileFetcherProtocol

logger = logging.getLogger(__name__)


class HttpFileFetcher(FileFetcherProtocol):
    """Baixa arquivos via GET; falhas viram `error` no resultado."""

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._http = HttpClient(config)

    async def fetch(self, url: str) -> FetchedFile:
        if not url:
            return FetchedFile(content=None, content_type=None, error="missing_url")
        try:
            response = await self._http.get(url)
        except HttpError as exc:
            return FetchedFile(
                content=None,
                content_type=None,
                error="timeout" if exc.is_timeout else "download_failed",
            )

        if not response.is_success:
            logger.warning("file_fetch_http_error", extra={"status_code": response.status_code})
            return FetchedFile(
                content=None,
                content_type=None,
                error=f"http_{response.status_code}",
            )

        content_type = response.headers.get("content-type", "").split(";")[0].strip() or None
        return FetchedFile(content=response.content, content_type=content_type)
