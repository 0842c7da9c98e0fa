"""Testes da tabela de municípios IBGE."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from app.infra.reference.municipalities import (
    build_reference_tables,
    current_municipality_codes,
    load_municipality_codes,
    municipality_key,
    normalize_city_name,
    refresh_municipality_codes,
    reset_municipality_codes,
    resolve_municipality_code,
)

IBGE_URL = "https://ibge.example.com/localidades/municipios"


@pytest.fixture(autouse=True)
def _clean_tables():
    reset_municipality_codes()
    yield
    reset_municipality_codes()


def _ibge_item(code: int, name: str, uf: str, *, legacy: bool = False) -> dict:
    uf_block = {"UF": {"sigla": uf}}
    if legacy:
        return {"id": code, "nome": name, "microrregiao": {"mesorregiao": uf_block}}
    return {"id": code, "nome": name, "regiao-imediata": {"regiao-intermediaria": uf_block}}


def test_normalize_city_name() -> None:
    assert normalize_city_name("  São João del-Rei ") == "sao joao del-rei"
    assert normalize_city_name(None) == ""


def test_municipality_key() -> None:
    assert municipality_key(" sp", "São Paulo") == "SP-sao paulo"


def test_resolve_with_explicit_table() -> None:
    codes = {"SP-sao paulo": "3550308"}

    assert resolve_municipality_code("SP", "SÃO PAULO", codes) == "3550308"
    assert resolve_municipality_code("RJ", "São Paulo", codes) is None
    assert resolve_municipality_code(None, "São Paulo", codes) is None


def test_build_reference_tables() -> None:
    codes, cities = build_reference_tables(
        [
            _ibge_item(3550308, "São Paulo", "SP"),
            _ibge_item(3509502, "Campinas", "SP", legacy=True),
            _ibge_item(4314902, "Porto Alegre", "RS"),
            {"id": 1, "nome": "Sem UF"},
        ]
    )

    assert codes == {
        "SP-sao paulo": "3550308",
        "SP-campinas": "3509502",
        "RS-porto alegre": "4314902",
    }
    assert cities == {"SP": ["CAMPINAS", "SÃO PAULO"], "RS": ["PORTO ALEGRE"]}


def test_load_codes_from_file(tmp_path: Path) -> None:
    path = tmp_path / "ibge_cities.json"
    path.write_text(json.dumps({"SP-sao paulo": 3550308}), encoding="utf-8")

    assert load_municipality_codes(path) == {"SP-sao paulo": "3550308"}


def test_missing_file_gives_empty_table(tmp_path: Path) -> None:
    assert load_municipality_codes(tmp_path / "absent.json") == {}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_refresh_replaces_seed_with_downloaded_table() -> None:
    bundled_count = len(load_municipality_codes())
    items = [_ibge_item(5200000 + index, f"Cidade {index}", "GO") for index in range(bundled_count + 10)]
    items.append(_ibge_item(5200100, "Abadia de Goiás", "GO"))
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, json=items)

    async with _client(handler) as client:
        count = await refresh_municipality_codes(client, IBGE_URL)

    assert requested == [IBGE_URL]
    assert count == len(current_municipality_codes())
    assert count > bundled_count
    assert resolve_municipality_code("GO", "ABADIA DE GOIÁS") == "5200100"
    assert resolve_municipality_code("SP", "São Paulo") == "3550308"


@pytest.mark.asyncio
async def test_refresh_failure_keeps_bundled_table() -> None:
    bundled = load_municipality_codes()

    async with _client(lambda request: httpx.Response(503, text="indisponível")) as client:
        count = await refresh_municipality_codes(client, IBGE_URL)

    assert count == len(bundled)
    assert current_municipality_codes() == bundled


@pytest.mark.asyncio
async def test_refresh_ignores_shorter_download() -> None:
    bundled = load_municipality_codes()

    async with _client(lambda request: httpx.Response(200, json=[_ibge_item(1, "X", "AC")])) as client:
        await refresh_municipality_codes(client, IBGE_URL)

    assert current_municipality_codes() == bundled
