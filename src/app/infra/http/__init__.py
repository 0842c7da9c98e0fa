"""Clientes HTTP de saída."""

from app.infra.http.client import HttpClient, HttpClientConfig, HttpError
from app.infra.http.file_fetcher import HttpFileFetcher

__all__ = ["HttpClient", "HttpClientConfig", "HttpError", "HttpFileFetcher"]
