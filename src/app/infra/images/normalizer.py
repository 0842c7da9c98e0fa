"""Normalização de imagens antes do envio ao CRM.

Fotos de celular chegam em vários formatos (inclusive HEIC) e com
vários megabytes. O CRM recebe JPEG RGB com o maior lado limitado.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePosixPath

import pillow_heif
from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

pillow_heif.register_heif_opener()

JPEG_CONTENT_TYPE = "image/jpeg"

IMAGE_CONTENT_TYPES: frozenset[str] = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/bmp",
    "image/tiff",
    "image/heic",
    "image/heif",
})

IMAGE_EXTENSIONS: frozenset[str] = frozenset({
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".gif",
    ".bmp",
    ".tif",
    ".tiff",
    ".heic",
    ".heif",
})

_CONTENT_TYPES_BY_EXTENSION: dict[str, str] = {
    ".pdf": "application/pdf",
    ".jpg": JPEG_CONTENT_TYPE,
    ".jpeg": JPEG_CONTENT_TYPE,
    ".png": "image/png",
    ".webp": "image/webp",
    ".heic": "image/heic",
}


@dataclass(frozen=True, slots=True)
class PreparedFile:
    """Arquivo pronto para o multipart."""

    content: bytes
    filename: str
    content_type: str


def guess_content_type(filename: str, content_type: str | None = None) -> str:
    if content_type:
        return content_type
    suffix = PurePosixPath(filename).suffix.lower()
    return _CONTENT_TYPES_BY_EXTENSION.get(suffix, "application/octet-stream")


def is_image(filename: str, content_type: str | None) -> bool:
    if content_type and content_type.lower() in IMAGE_CONTENT_TYPES:
        return True
    return PurePosixPath(filename).suffix.lower() in IMAGE_EXTENSIONS


def with_jpeg_extension(filename: str) -> str:
    """Troca a extensão por .jpg (foto.HEIC -> foto.jpg)."""
    stem = PurePosixPath(filename).stem or "documento"
    return f"{stem}.jpg"


def _flatten_to_rgb(image: Image.Image) -> Image.Image:
    if image.mode == "P" and "transparency" in image.info:
        image = image.convert("RGBA")
    if image.mode in ("RGBA", "LA"):
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def normalize_image(content: bytes, max_dimension: int, quality: int) -> bytes:
    """Converte para JPEG RGB com maior lado <= max_dimension.

    Raises:
        UnidentifiedImageError: conteúdo não é uma imagem legível.
        DecompressionBombError: imagem com pixels demais para abrir.
    """
    with Image.open(BytesIO(content)) as source:
        image = ImageOps.exif_transpose(source) or source
        image = _flatten_to_rgb(image)
        image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

        buffer = BytesIO()
        image.save(buffer, format="JPEG", quality=quality, optimize=True)
        return buffer.getvalue()


def prepare_file(
    content: bytes,
    filename: str,
    content_type: str | None,
    *,
    max_dimension: int,
    quality: int,
) -> PreparedFile:
    """Normaliza imagens; demais arquivos (PDF) seguem sem alteração.

    Imagem ilegível segue como recebida: o CRM decide se aceita.
    """
    if not is_image(filename, content_type):
        return PreparedFile(
            content=content,
            filename=filename,
            content_type=guess_content_type(filename, content_type),
        )

    try:
        converted = normalize_image(content, max_dimension, quality)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.warning(
            "image_normalization_failed",
            extra={"error_type": type(exc).__name__, "size": len(content)},
        )
        return PreparedFile(
            content=content,
            filename=filename,
            content_type=guess_content_type(filename, content_type),
        )

    logger.debug(
        "image_normalized",
        extra={"original_size": len(content), "normalized_size": len(converted)},
    )
    return PreparedFile(
        content=converted,
        filename=with_jpeg_extension(filename),
        content_type=JPEG_CONTENT_TYPE,
    )
