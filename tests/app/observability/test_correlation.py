"""Testes do correlation id por contexto."""

from __future__ import annotations

from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id


def test_inbound_id_is_kept() -> None:
    token = set_correlation_id("req-42")
    try:
        assert get_correlation_id() == "req-42"
    finally:
        reset_correlation_id(token)


def test_missing_id_is_generated() -> None:
    token = set_correlation_id("  ")
    try:
        assert len(get_correlation_id()) == 32
    finally:
        reset_correlation_id(token)


def test_oversized_id_is_replaced() -> None:
    token = set_correlation_id("x" * 129)
    try:
        assert get_correlation_id() != "x" * 129
        assert len(get_correlation_id()) == 32
    finally:
        reset_correlation_id(token)


def test_reset_restores_previous_value() -> None:
    outer = set_correlation_id("outer")
    inner = set_correlation_id("inner")
    reset_correlation_id(inner)
    try:
        assert get_correlation_id() == "outer"
    finally:
        reset_correlation_id(outer)
