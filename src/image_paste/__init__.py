# SPDX-License-Identifier: AGPL-3.0-or-later
"""Public interface for :mod:`image_paste` with lightweight imports."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any, Dict, Tuple

__all__ = [
    "CancellationToken",
    "DataTransfer",
    "DataTransferItem",
    "Document",
    "FilePathSource",
    "ImageSource",
    "InMemoryFile",
    "InlineDataSource",
    "PasteEdit",
    "PasteEditProvider",
    "PasteSettings",
    "WrittenAsset",
    "asset_directory_for",
    "build_reference",
    "content_identity",
    "extract_image_sources",
    "get_settings",
    "provide_paste_edits",
    "provide_paste_edits_async",
    "write_image_source",
]

_LAZY_ATTRS: Dict[str, Tuple[str, str]] = {
    "CancellationToken": (".pipeline", "CancellationToken"),
    "DataTransfer": (".payload", "DataTransfer"),
    "DataTransferItem": (".payload", "DataTransferItem"),
    "Document": (".pipeline", "Document"),
    "FilePathSource": (".models", "FilePathSource"),
    "ImageSource": (".models", "ImageSource"),
    "InMemoryFile": (".payload", "InMemoryFile"),
    "InlineDataSource": (".models", "InlineDataSource"),
    "PasteEdit": (".models", "PasteEdit"),
    "PasteEditProvider": (".pipeline", "PasteEditProvider"),
    "PasteSettings": (".settings", "PasteSettings"),
    "WrittenAsset": (".models", "WrittenAsset"),
    "asset_directory_for": (".reference", "asset_directory_for"),
    "build_reference": (".reference", "build_reference"),
    "content_identity": (".writer", "content_identity"),
    "extract_image_sources": (".extract", "extract_image_sources"),
    "get_settings": (".settings", "get_settings"),
    "provide_paste_edits": (".pipeline", "provide_paste_edits"),
    "provide_paste_edits_async": (".pipeline", "provide_paste_edits_async"),
    "write_image_source": (".writer", "write_image_source"),
}

if TYPE_CHECKING:  # pragma: no cover - import-time only for type checkers
    from .extract import extract_image_sources
    from .models import FilePathSource, ImageSource, InlineDataSource, PasteEdit, WrittenAsset
    from .payload import DataTransfer, DataTransferItem, InMemoryFile
    from .pipeline import (
        CancellationToken,
        Document,
        PasteEditProvider,
        provide_paste_edits,
        provide_paste_edits_async,
    )
    from .reference import asset_directory_for, build_reference
    from .settings import PasteSettings, get_settings
    from .writer import content_identity, write_image_source


def __getattr__(name: str) -> Any:
    try:
        module_name, attr_name = _LAZY_ATTRS[name]
    except KeyError as exc:  # pragma: no cover - defensive
        raise AttributeError(name) from exc
    module = import_module(module_name, package=__name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:  # pragma: no cover - simple delegation
    return sorted(__all__)
