"""Base dos modelos persistidos no Firestore.

Atributos em snake_case no Python, chaves camelCase no documento
(mesmo formato consumido pelo painel administrativo).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_iso(value: datetime) -> str:
    """ISO-8601 em UTC com milissegundos, ordenável lexicograficamente."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds")


IsoDatetime = Annotated[datetime, PlainSerializer(to_iso, return_type=str, when_used="json")]


class FirestoreModel(BaseModel):
    """Modelo com conversão de/para documento Firestore."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = ""

    def to_firestore_dict(self) -> dict[str, Any]:
        """Converte para dict compatível com Firestore (sem None e sem id)."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"}, mode="json")

    def to_public_dict(self) -> dict[str, Any]:
        """Representação para respostas HTTP (inclui id)."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_firestore(cls, doc_id: str, data: dict[str, Any] | None) -> Self:
        """Cria instância a partir de documento Firestore."""
        return cls.model_validate({**(data or {}), "id": doc_id})
