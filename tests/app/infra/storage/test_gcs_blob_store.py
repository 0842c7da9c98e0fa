"""Testes do GCSBlobStore com cliente Storage simulado."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.infra.storage import GCSBlobStore
from utils.errors import BlobStorageError


@pytest.mark.asyncio
async def test_upload_makes_object_public() -> None:
    client = MagicMock()
    blob = client.bucket.return_value.blob.return_value
    blob.public_url = "https://storage.googleapis.com/docs/proposals/p1/cnh/a.jpg"

    url = await GCSBlobStore(client, "docs").upload("proposals/p1/cnh/a.jpg", b"img", "image/jpeg")

    client.bucket.assert_called_once_with("docs")
    blob.upload_from_string.assert_called_once_with(b"img", content_type="image/jpeg")
    blob.make_public.assert_called_once()
    assert url == blob.public_url


@pytest.mark.asyncio
async def test_upload_failure_raises_blob_storage_error() -> None:
    client = MagicMock()
    client.bucket.return_value.blob.return_value.upload_from_string.side_effect = OSError("quota")

    with pytest.raises(BlobStorageError):
        await GCSBlobStore(client, "docs").upload("x", b"img", "image/jpeg")
