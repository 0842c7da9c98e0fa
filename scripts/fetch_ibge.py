#!/usr/bin/env python3
"""Regenera as tabelas IBGE de municípios a partir da API de localidades.

Uso:
    python scripts/fetch_ibge.py
    python scripts/fetch_ibge.py --output-dir /tmp/ibge

Escreve:
- ibge_cities.json: "{UF}-{cidade normalizada}" -> código IBGE (envio ao CRM)
- ibge_states_cities.json: UF -> cidades em maiúsculas (formulários)
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import httpx

from app.infra.reference.municipalities import DEFAULT_CITIES_PATH, build_reference_tables
from config.settings.crm import IBGE_MUNICIPALITIES_URL

REQUEST_TIMEOUT_SECONDS = 60.0


def fetch_municipalities(url: str) -> list[dict]:
    response = httpx.get(url, timeout=REQUEST_TIMEOUT_SECONDS)
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, list):
        raise ValueError("Resposta inesperada da API do IBGE")
    return data


def write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2, sort_keys=True)
        handle.write("\n")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_CITIES_PATH.parent,
        help="Diretório de saída. Padrão: src/app/data.",
    )
    parser.add_argument("--url", default=IBGE_MUNICIPALITIES_URL)
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    print(f"Buscando municípios em {args.url} ...")
    try:
        items = fetch_municipalities(args.url)
    except (httpx.HTTPError, ValueError) as exc:
        print(f"Falha ao buscar dados do IBGE: {exc}", file=sys.stderr)
        return 1

    codes, cities_by_state = build_reference_tables(items)
    write_json(args.output_dir / "ibge_cities.json", codes)
    write_json(args.output_dir / "ibge_states_cities.json", cities_by_state)
    print(f"{len(codes)} municípios em {len(cities_by_state)} UFs gravados em {args.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
