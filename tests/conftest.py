"""Configuração do pytest para o serviço de onboarding."""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from tests.fakes.harness import Harness  # noqa: E402


@pytest.fixture
def harness() -> Iterator[Harness]:
    """Serviços reais sobre stores em memória; fecha corrotinas não executadas."""
    harness = Harness()
    yield harness
    harness.scheduler.discard()
