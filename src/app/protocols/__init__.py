"""Protocolos e contratos do core da aplicação."""

from .blob_store import BlobStoreProtocol
from .campaign_store import CampaignStoreProtocol
from .crm_client import CrmClientProtocol, CrmFilePart, CrmSubmitResult
from .file_fetcher import FetchedFile, FileFetcherProtocol
from .notification_client import NotificationClientProtocol, NotificationDelivery
from .proposal_store import (
    DEFAULT_PAGE_SIZE,
    ProposalPage,
    ProposalQuery,
    ProposalStoreProtocol,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "BlobStoreProtocol",
    "CampaignStoreProtocol",
    "CrmClientProtocol",
    "CrmFilePart",
    "CrmSubmitResult",
    "FetchedFile",
    "FileFetcherProtocol",
    "NotificationClientProtocol",
    "NotificationDelivery",
    "ProposalPage",
    "ProposalQuery",
    "ProposalStoreProtocol",
]
