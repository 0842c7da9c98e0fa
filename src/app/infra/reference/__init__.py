"""Dados de referência (municípios IBGE)."""

from app.infra.reference.municipalities import (
    current_municipality_codes,
    download_municipality_codes,
    load_municipality_codes,
    municipality_key,
    normalize_city_name,
    refresh_municipality_codes,
    reset_municipality_codes,
    resolve_municipality_code,
)

__all__ = [
    "current_municipality_codes",
    "download_municipality_codes",
    "load_municipality_codes",
    "municipality_key",
    "normalize_city_name",
    "refresh_municipality_codes",
    "reset_municipality_codes",
    "resolve_municipality_code",
]
