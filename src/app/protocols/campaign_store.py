"""Protocolo para persistência de campanhas."""

from __future__ import annotations

from typing import Any, Protocol

from app.domain.campaign import Campaign


class CampaignStoreProtocol(Protocol):
    """Contrato para store de campanhas."""

    async def create(self, campaign: Campaign) -> Campaign:
        ...

    async def update(self, campaign_id: str, changes: dict[str, Any]) -> bool:
        ...

    async def get(self, campaign_id: str) -> Campaign | None:
        ...

    async def get_active_by_slug(self, slug: str) -> Campaign | None:
        ...

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        """Consulta não atômica: checagem e escrita são operações separadas."""
        ...

    async def list(self) -> list[Campaign]:
        """Campanhas mais recentes primeiro."""
        ...
