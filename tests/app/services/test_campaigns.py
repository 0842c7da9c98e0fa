"""Testes do serviço de campanhas."""

from __future__ import annotations

import pytest

from app.infra.stores.memory_stores import MemoryCampaignStore
from app.services.campaigns import SLUG_TAKEN_MESSAGE, CampaignService
from app.services.results import ErrorCode
from tests.fakes.payloads import build_campaign_payload


@pytest.fixture
def service() -> CampaignService:
    return CampaignService(MemoryCampaignStore())


@pytest.mark.asyncio
async def test_create_and_read_by_slug(service: CampaignService) -> None:
    result = await service.create_campaign(build_campaign_payload())

    assert result.success is True
    campaign = await service.get_campaign_by_slug("professores-2026")
    assert campaign is not None
    assert campaign.id == result.data["id"]
    assert campaign.professions == ["Professor", "Monitor"]


@pytest.mark.asyncio
async def test_duplicate_slug_is_rejected(service: CampaignService) -> None:
    await service.create_campaign(build_campaign_payload())

    result = await service.create_campaign(build_campaign_payload(name="Outra campanha"))

    assert result.error_code == ErrorCode.CONFLICT
    assert result.errors == {"slug": SLUG_TAKEN_MESSAGE}


@pytest.mark.asyncio
async def test_invalid_form(service: CampaignService) -> None:
    result = await service.create_campaign(build_campaign_payload(slug="Com Espaço"))

    assert result.error_code == ErrorCode.VALIDATION
    assert "slug" in result.errors


@pytest.mark.asyncio
async def test_inactive_campaign_is_hidden_by_slug(service: CampaignService) -> None:
    await service.create_campaign(build_campaign_payload(active=False))

    assert await service.get_campaign_by_slug("professores-2026") is None


@pytest.mark.asyncio
async def test_update_keeps_own_slug(service: CampaignService) -> None:
    created = await service.create_campaign(build_campaign_payload())
    campaign_id = created.data["id"]

    result = await service.update_campaign(
        campaign_id, build_campaign_payload(name="Professores 2026 - 2ª chamada")
    )

    assert result.success is True
    campaign = await service.get_campaign_by_id(campaign_id)
    assert campaign is not None
    assert campaign.name == "Professores 2026 - 2ª chamada"


@pytest.mark.asyncio
async def test_update_to_taken_slug_is_rejected(service: CampaignService) -> None:
    await service.create_campaign(build_campaign_payload(slug="monitores"))
    created = await service.create_campaign(build_campaign_payload())

    result = await service.update_campaign(created.data["id"], build_campaign_payload(slug="monitores"))

    assert result.error_code == ErrorCode.CONFLICT


@pytest.mark.asyncio
async def test_update_unknown_campaign(service: CampaignService) -> None:
    result = await service.update_campaign("missing", build_campaign_payload())

    assert result.error_code == ErrorCode.NOT_FOUND
