# SPDX-License-Identifier: AGPL-3.0-or-later
"""Image type tables and lightweight detection helpers."""

from __future__ import annotations

import mimetypes
from pathlib import PurePath
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

mimetypes.init()

# Order matters: the first present key wins during extraction.
IMAGE_MIME_TYPES: Tuple[str, ...] = (
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
)

MIME_TO_EXT: Mapping[str, str] = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}

IMAGE_EXTENSIONS: FrozenSet[str] = frozenset({"png", "jpg", "jpeg", "gif", "webp"})

DEFAULT_EXTENSION = "png"

_MAGIC_SIGNATURES: Dict[bytes, str] = {
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"\xff\xd8\xff": "image/jpeg",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def ext_from_file_name(name: str | None) -> Optional[str]:
    """Return the lowercase extension of *name* without the dot, if any."""

    if not name:
        return None
    suffix = PurePath(name).suffix.lower()
    return suffix[1:] if suffix else None


def ext_from_file_path(path: str | PurePath) -> str:
    suffix = PurePath(path).suffix.lower()
    return suffix[1:] if suffix else DEFAULT_EXTENSION


def is_supported_image_extension(ext: str) -> bool:
    return ext.lower() in IMAGE_EXTENSIONS


def is_supported_image_path(path: str | PurePath) -> bool:
    suffix = PurePath(path).suffix.lower()
    return bool(suffix) and suffix[1:] in IMAGE_EXTENSIONS


def normalize_ext(ext: str, *, default: str = DEFAULT_EXTENSION) -> str:
    """Strip a leading dot and lowercase *ext*, falling back to *default*."""

    trimmed = ext.strip()
    if not trimmed:
        return default
    if trimmed.startswith("."):
        trimmed = trimmed[1:]
    return trimmed.lower() or default


def sniff_image_mime(data: bytes) -> Optional[str]:
    """Return the image MIME type advertised by the magic bytes of *data*."""

    for signature, mime in _MAGIC_SIGNATURES.items():
        if data.startswith(signature):
            return mime
    # WEBP is a RIFF container: "RIFF" <size> "WEBP"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def guess_image_mime(name: str) -> Optional[str]:
    mime, _ = mimetypes.guess_type(name)
    if mime in MIME_TO_EXT:
        return mime
    ext = ext_from_file_name(name)
    if ext == "jpeg":
        return "image/jpeg"
    return None


__all__ = [
    "DEFAULT_EXTENSION",
    "IMAGE_EXTENSIONS",
    "IMAGE_MIME_TYPES",
    "MIME_TO_EXT",
    "ext_from_file_name",
    "ext_from_file_path",
    "guess_image_mime",
    "is_supported_image_extension",
    "is_supported_image_path",
    "normalize_ext",
    "sniff_image_mime",
]
