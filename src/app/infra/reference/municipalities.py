"""Tabela de códigos IBGE de municípios.

Chave "{UF}-{cidade normalizada}", gerada por scripts/fetch_ibge.py.
O JSON empacotado é lido uma única vez por processo. Quando ele não traz
a tabela completa, o startup baixa a lista do IBGE e passa a usá-la.
"""

from __future__ import annotations

import json
import logging
import unicodedata
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_CITIES_PATH = Path(__file__).resolve().parents[2] / "data" / "ibge_cities.json"
# O IBGE lista ~5.570 municípios; abaixo disso o JSON é só a semente
COMPLETE_TABLE_MIN_ENTRIES = 5000

_downloaded_codes: dict[str, str] = {}


def normalize_city_name(name: str | None) -> str:
    """Minúsculas, sem acentos e sem espaços nas pontas ("São Paulo" -> "sao paulo")."""
    decomposed = unicodedata.normalize("NFD", (name or "").lower())
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.strip()


def municipality_key(state: str | None, city: str | None) -> str:
    return f"{(state or '').strip().upper()}-{normalize_city_name(city)}"


@lru_cache(maxsize=4)
def load_municipality_codes(path: Path = DEFAULT_CITIES_PATH) -> dict[str, str]:
    """Lê o JSON de códigos; arquivo ausente resulta em tabela vazia."""
    try:
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        logger.warning("ibge_cities_file_missing", extra={"path": str(path)})
        return {}
    logger.debug("ibge_cities_loaded", extra={"count": len(data)})
    return {str(key): str(value) for key, value in data.items()}


def resolve_municipality_code(
    state: str | None,
    city: str | None,
    codes: dict[str, str] | None = None,
) -> str | None:
    """Código IBGE do município ou None quando não encontrado."""
    if not state or not city:
        return None
    table = codes if codes is not None else current_municipality_codes()
    return table.get(municipality_key(state, city))


def _state_of(item: dict[str, Any]) -> str:
    """UF do município; a API traz a sigla em regiao-imediata ou microrregiao."""
    immediate = item.get("regiao-imediata") or {}
    uf = (immediate.get("regiao-intermediaria") or {}).get("UF") or {}
    if not uf:
        micro = item.get("microrregiao") or {}
        uf = (micro.get("mesorregiao") or {}).get("UF") or {}
    return str(uf.get("sigla") or "")


def build_reference_tables(
    items: list[dict[str, Any]],
) -> tuple[dict[str, str], dict[str, list[str]]]:
    """Converte a resposta de /localidades/municipios nas duas tabelas.

    Returns:
        (chave UF-cidade -> código IBGE, UF -> nomes em maiúsculas ordenados)
    """
    codes: dict[str, str] = {}
    cities_by_state: dict[str, list[str]] = {}
    for item in items:
        state = _state_of(item)
        name = item.get("nome")
        if not state or not name or item.get("id") is None:
            continue
        codes[municipality_key(state, name)] = str(item["id"])
        cities_by_state.setdefault(state, []).append(str(name).upper())

    for names in cities_by_state.values():
        names.sort()
    return codes, cities_by_state


def current_municipality_codes() -> dict[str, str]:
    """Tabela baixada do IBGE, se houver; senão a empacotada."""
    return _downloaded_codes or load_municipality_codes()


def reset_municipality_codes() -> None:
    """Descarta a tabela baixada e o cache do JSON."""
    _downloaded_codes.clear()
    load_municipality_codes.cache_clear()


async def refresh_municipality_codes(client: httpx.AsyncClient, url: str) -> int:
    """Baixa /localidades/municipios quando a tabela empacotada é incompleta.

    Falha de rede ou resposta inesperada mantém a tabela atual.

    Returns:
        Quantidade de municípios em uso após a tentativa.
    """
    bundled = load_municipality_codes()
    if len(bundled) >= COMPLETE_TABLE_MIN_ENTRIES:
        return len(bundled)

    try:
        response = await client.get(url)
        response.raise_for_status()
        items = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning(
            "ibge_refresh_failed",
            extra={"error_type": type(exc).__name__, "bundled_count": len(bundled)},
        )
        return len(current_municipality_codes())

    codes, _ = build_reference_tables(items if isinstance(items, list) else [])
    if len(codes) <= len(bundled):
        logger.warning(
            "ibge_refresh_incomplete",
            extra={"downloaded_count": len(codes), "bundled_count": len(bundled)},
        )
        return len(current_municipality_codes())

    _downloaded_codes.clear()
    _downloaded_codes.update({**bundled, **codes})
    logger.info("ibge_refreshed", extra={"count": len(_downloaded_codes)})
    return len(_downloaded_codes)


async def download_municipality_codes(url: str, timeout_seconds: float = 60.0) -> int:
    """Task de startup: baixa a tabela do IBGE com um cliente próprio."""
    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        return await refresh_municipality_codes(client, url)
