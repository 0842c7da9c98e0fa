"""Montagem do ProposalLifecycleManager com stores em memória e fakes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from itertools import count
from unittest.mock import AsyncMock

from app.infra.stores.memory_stores import (
    MemoryBlobStore,
    MemoryCampaignStore,
    MemoryProposalStore,
)
from app.services import (
    CampaignService,
    CrmDocumentAssembler,
    CrmSyncService,
    NotificationDispatcher,
    ProposalLifecycleManager,
)
from config.settings import CRMSettings, GCSSettings
from tests.fakes.fake_integrations import FakeCrmClient, FakeFileFetcher, FakeNotificationClient
from tests.fakes.recording_scheduler import RecordingScheduler

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@dataclass
class MutableClock:
    now: datetime = FIXED_NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@dataclass
class Harness:
    proposals: MemoryProposalStore = field(default_factory=MemoryProposalStore)
    campaigns: MemoryCampaignStore = field(default_factory=MemoryCampaignStore)
    blobs: MemoryBlobStore = field(default_factory=MemoryBlobStore)
    crm: FakeCrmClient = field(default_factory=FakeCrmClient)
    notifier: FakeNotificationClient = field(default_factory=FakeNotificationClient)
    files: FakeFileFetcher = field(default_factory=FakeFileFetcher)
    scheduler: RecordingScheduler = field(default_factory=RecordingScheduler)
    clock: MutableClock = field(default_factory=MutableClock)
    max_upload_bytes: int = 1024

    def __post_init__(self) -> None:
        tokens = count(1)
        crm_settings = CRMSettings()
        self.crm_sync = CrmSyncService(
            self.proposals,
            self.campaigns,
            self.crm,
            CrmDocumentAssembler(self.files, crm_settings),
            crm_settings,
            sleep=AsyncMock(),
        )
        self.dispatcher = NotificationDispatcher(self.notifier, self.proposals)
        self.manager = ProposalLifecycleManager(
            self.proposals,
            self.campaigns,
            self.blobs,
            self.dispatcher,
            self.crm_sync,
            gcs_settings=GCSSettings(max_upload_bytes=self.max_upload_bytes),
            schedule=self.scheduler,
            token_factory=lambda: f"token-{next(tokens)}",
            clock=self.clock,
        )
        self.campaign_service = CampaignService(self.campaigns)
