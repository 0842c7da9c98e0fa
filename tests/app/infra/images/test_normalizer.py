"""Testes da normalização de imagens para o CRM."""

from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from app.infra.images.normalizer import (
    guess_content_type,
    is_image,
    prepare_file,
    with_jpeg_extension,
)


def _png_bytes(size: tuple[int, int], mode: str = "RGBA") -> bytes:
    buffer = BytesIO()
    Image.new(mode, size, (10, 20, 30, 0) if mode == "RGBA" else (10, 20, 30)).save(
        buffer, format="PNG"
    )
    return buffer.getvalue()


def test_large_png_becomes_bounded_jpeg() -> None:
    prepared = prepare_file(
        _png_bytes((3000, 1500)),
        "foto.PNG",
        "image/png",
        max_dimension=1280,
        quality=80,
    )

    assert prepared.filename == "foto.jpg"
    assert prepared.content_type == "image/jpeg"
    with Image.open(BytesIO(prepared.content)) as image:
        assert image.format == "JPEG"
        assert image.mode == "RGB"
        assert image.size == (1280, 640)


def test_transparent_pixels_become_white() -> None:
    prepared = prepare_file(
        _png_bytes((10, 10)),
        "x.png",
        "image/png",
        max_dimension=1280,
        quality=95,
    )

    with Image.open(BytesIO(prepared.content)) as image:
        red, green, blue = image.getpixel((5, 5))
    assert min(red, green, blue) > 240


def test_small_image_is_not_upscaled() -> None:
    prepared = prepare_file(
        _png_bytes((200, 100), mode="RGB"),
        "x.png",
        None,
        max_dimension=1280,
        quality=80,
    )

    with Image.open(BytesIO(prepared.content)) as image:
        assert image.size == (200, 100)


def test_pdf_passes_through() -> None:
    prepared = prepare_file(b"%PDF-1.4", "doc.pdf", None, max_dimension=1280, quality=80)

    assert prepared.content == b"%PDF-1.4"
    assert prepared.filename == "doc.pdf"
    assert prepared.content_type == "application/pdf"


def test_unreadable_image_passes_through() -> None:
    prepared = prepare_file(b"not an image", "x.jpg", "image/jpeg", max_dimension=1280, quality=80)

    assert prepared.content == b"not an image"
    assert prepared.filename == "x.jpg"


def test_oversized_image_passes_through(monkeypatch: pytest.MonkeyPatch) -> None:
    content = _png_bytes((300, 300), mode="RGB")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

    prepared = prepare_file(content, "scan.png", "image/png", max_dimension=1280, quality=80)

    assert prepared.content == content
    assert prepared.filename == "scan.png"
    assert prepared.content_type == "image/png"


def test_helpers() -> None:
    assert is_image("IMG_001.HEIC", None)
    assert not is_image("doc.pdf", "application/pdf")
    assert with_jpeg_extension("IMG_001.HEIC") == "IMG_001.jpg"
    assert guess_content_type("a.bin") == "application/octet-stream"
