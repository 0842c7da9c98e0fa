"""Processamento de imagens de documentos."""

from app.infra.images.normalizer import (
    PreparedFile,
    is_image,
    normalize_image,
    prepare_file,
    with_jpeg_extension,
)

__all__ = ["PreparedFile", "is_image", "normalize_image", "prepare_file", "with_jpeg_extension"]
