# SPDX-License-Identifier: AGPL-3.0-or-later
"""Turn a multi-representation payload into an ordered list of image sources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Set, Tuple, cast

from .models import FilePathSource, ImageSource, InlineDataSource
from .payload import DataTransfer, TransferFile, TransferItem
from .sniff import (
    DEFAULT_EXTENSION,
    IMAGE_MIME_TYPES,
    MIME_TO_EXT,
    ext_from_file_name,
    ext_from_file_path,
    is_supported_image_extension,
    is_supported_image_path,
)
from .uri_list import URI_LIST_MIME_TYPES, file_uri_to_path, is_file_uri, parse_uri_list

logger = logging.getLogger(__name__)


def pick_image_item(data_transfer: DataTransfer) -> Optional[Tuple[str, TransferItem]]:
    """Return the first direct-image entry in priority order."""

    for mime in IMAGE_MIME_TYPES:
        item = data_transfer.get(mime)
        if item is not None:
            return mime, item
    return None


def _read_uri_list(data_transfer: DataTransfer) -> str:
    for mime in URI_LIST_MIME_TYPES:
        item = data_transfer.get(mime)
        if item is None:
            continue
        text = item.as_string()
        if text and text.strip():
            return text
    return ""


def _add_file_path(path: Path, sources: List[ImageSource], seen: Set[Path]) -> None:
    if path in seen:
        logger.debug("Skipping duplicate image path %s", path)
        return
    seen.add(path)
    sources.append(FilePathSource(path=path, ext=ext_from_file_path(path)))


def _origin_path(uri: str) -> Optional[Path]:
    try:
        return file_uri_to_path(uri)
    except ValueError:
        return None


def collect_image_sources(data_transfer: DataTransfer) -> List[ImageSource]:
    """Gather file-backed and inline images from URI lists and file entries."""

    sources: List[ImageSource] = []
    seen: Set[Path] = set()

    for uri in parse_uri_list(_read_uri_list(data_transfer)):
        if not is_file_uri(uri):
            continue
        path = file_uri_to_path(uri)
        if not is_supported_image_path(path):
            logger.debug("Skipping unsupported uri-list entry %s", path)
            continue
        _add_file_path(path, sources, seen)

    for mime, item in data_transfer:
        if not item.has_file_handle():
            continue
        file = cast(TransferFile, item.as_file())
        ext = ext_from_file_name(file.name)
        if not ext or not is_supported_image_extension(ext):
            logger.debug("Skipping %s entry with unsupported name %r", mime, file.name)
            continue
        if file.has_origin_location():
            path = _origin_path(file.uri or "")
            if path is not None:
                if is_supported_image_path(path):
                    _add_file_path(path, sources, seen)
                else:
                    logger.debug("Skipping %s entry whose origin %s is not an image", mime, path)
                continue
        sources.append(InlineDataSource(file=file, ext=ext))

    return sources


def extract_image_sources(data_transfer: DataTransfer) -> List[ImageSource]:
    """Return the image sources in *data_transfer*.

    A direct image entry (PNG, JPEG, GIF, WEBP in that order) wins over every
    other representation and yields a single inline source. Without one, the
    URI list and file entries are combined. An empty list means the payload
    carries nothing this pipeline can handle.
    """

    picked = pick_image_item(data_transfer)
    if picked is not None:
        mime, item = picked
        # A direct image key without a file handle still ends extraction; the
        # host then falls back to its default paste.
        if not item.has_file_handle():
            logger.debug("Direct image entry %s has no file handle", mime)
            return []
        file = cast(TransferFile, item.as_file())
        return [InlineDataSource(file=file, ext=MIME_TO_EXT.get(mime, DEFAULT_EXTENSION))]
    return collect_image_sources(data_transfer)


__all__ = ["collect_image_sources", "extract_image_sources", "pick_image_item"]
