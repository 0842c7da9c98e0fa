"""Serviço de campanhas (cadastro administrativo e leitura pública)."""

from __future__ import annotations

import logging
from typing import Any

from app.domain._firestore_model import to_iso, utcnow
from app.domain.campaign import Campaign
from app.domain.validation import validate_campaign_form
from app.protocols.campaign_store import CampaignStoreProtocol
from app.services.results import ActionResult, ErrorCode

logger = logging.getLogger(__name__)

SLUG_TAKEN_MESSAGE = "Este slug já está em uso"


class CampaignService:
    """CRUD de campanhas com unicidade de slug.

    A checagem de slug e a escrita são operações separadas: duas criações
    simultâneas com o mesmo slug podem passar.
    """

    def __init__(self, store: CampaignStoreProtocol) -> None:
        self._store = store

    async def create_campaign(self, data: dict[str, Any]) -> ActionResult:
        outcome = validate_campaign_form(data)
        if not outcome.ok or outcome.value is None:
            return ActionResult.fail(ErrorCode.VALIDATION, "Dados inválidos", outcome.errors)
        form = outcome.value

        if await self._store.slug_exists(form.slug):
            return ActionResult.fail(ErrorCode.CONFLICT, SLUG_TAKEN_MESSAGE, {"slug": SLUG_TAKEN_MESSAGE})

        campaign = await self._store.create(Campaign(**form.model_dump(exclude={"id"})))
        logger.info("campaign_created", extra={"campaign_id": campaign.id})
        return ActionResult.ok(id=campaign.id)

    async def update_campaign(self, campaign_id: str, data: dict[str, Any]) -> ActionResult:
        existing = await self._store.get(campaign_id)
        if existing is None:
            return ActionResult.fail(ErrorCode.NOT_FOUND, "Campanha não encontrada")

        outcome = validate_campaign_form(data)
        if not outcome.ok or outcome.value is None:
            return ActionResult.fail(ErrorCode.VALIDATION, "Dados inválidos", outcome.errors)
        form = outcome.value

        if form.slug != existing.slug and await self._store.slug_exists(
            form.slug, exclude_id=campaign_id
        ):
            return ActionResult.fail(ErrorCode.CONFLICT, SLUG_TAKEN_MESSAGE, {"slug": SLUG_TAKEN_MESSAGE})

        changes = form.model_dump(by_alias=True, mode="json", exclude={"id"})
        changes["updatedAt"] = to_iso(utcnow())
        await self._store.update(campaign_id, changes)
        logger.info("campaign_updated", extra={"campaign_id": campaign_id})
        return ActionResult.ok(id=campaign_id)

    async def list_campaigns(self) -> list[Campaign]:
        return await self._store.list()

    async def get_campaign_by_id(self, campaign_id: str) -> Campaign | None:
        return await self._store.get(campaign_id)

    async def get_campaign_by_slug(self, slug: str) -> Campaign | None:
        """Somente campanhas ativas são visíveis publicamente."""
        return await self._store.get_active_by_slug(slug)
