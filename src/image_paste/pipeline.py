# SPDX-License-Identifier: AGPL-3.0-or-later
"""Paste/drop provider wiring extraction, persistence and references together."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .errors import AssetWriteError, UnsavedDocumentError
from .extract import extract_image_sources
from .models import PASTE_EDIT_KIND, PASTE_EDIT_TITLE, ImageSource, PasteEdit, WrittenAsset
from .payload import DataTransfer
from .reference import asset_directory_for, build_reference, ensure_directory, join_references
from .settings import PasteSettings
from .sniff import IMAGE_MIME_TYPES
from .uri_list import URI_LIST_MIME_TYPES
from .writer import write_image_source

logger = logging.getLogger(__name__)

UNSAVED_DOCUMENT_WARNING = "Save the Markdown file before pasting images."

WarningCallback = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class Document:
    """Destination document as seen by the provider."""

    path: Path
    scheme: str = "file"
    is_untitled: bool = False
    language_id: str = "markdown"

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    @property
    def directory(self) -> Path:
        return self.path.parent


@dataclass
class CancellationToken:
    is_cancellation_requested: bool = False

    def cancel(self) -> None:
        self.is_cancellation_requested = True


def _log_warning(message: str) -> None:
    logger.warning(message)


def _cancelled(token: Optional[CancellationToken]) -> bool:
    return token is not None and token.is_cancellation_requested


def require_saved(document: Document) -> None:
    if document.is_untitled:
        raise UnsavedDocumentError(UNSAVED_DOCUMENT_WARNING)


def _write_and_reference(
    source: ImageSource,
    *,
    assets_dir: Path,
    document_dir: Path,
    settings: PasteSettings,
) -> Tuple[WrittenAsset, str]:
    asset = write_image_source(source, assets_dir, settings=settings.assets)
    return asset, build_reference(asset.path, document_dir)


def save_image_sources(
    sources: Sequence[ImageSource],
    document: Document,
    *,
    settings: Optional[PasteSettings] = None,
    token: Optional[CancellationToken] = None,
) -> Optional[PasteEdit]:
    """Persist *sources* next to *document* and build the substitution edit.

    Returns ``None`` when cancellation is observed between sources. I/O
    failures propagate; no partial edit is produced.
    """

    settings = settings or PasteSettings()
    assets_dir = asset_directory_for(document.path, settings.assets.suffix)
    try:
        ensure_directory(assets_dir)
    except OSError as exc:
        raise AssetWriteError(assets_dir, exc.strerror or str(exc)) from exc
    worker = partial(
        _write_and_reference,
        assets_dir=assets_dir,
        document_dir=document.directory,
        settings=settings,
    )

    results: List[Tuple[WrittenAsset, str]] = []
    if settings.max_workers > 1 and len(sources) > 1:
        with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
            results = list(executor.map(worker, sources))
    else:
        for source in sources:
            if _cancelled(token):
                logger.debug("Paste cancelled after %d of %d sources", len(results), len(sources))
                return None
            results.append(worker(source))

    return PasteEdit(
        insert_text=join_references(reference for _, reference in results),
        title=PASTE_EDIT_TITLE,
        kind=PASTE_EDIT_KIND,
        assets=tuple(asset for asset, _ in results),
    )


def provide_paste_edits(
    document: Document,
    data_transfer: DataTransfer,
    token: Optional[CancellationToken] = None,
    *,
    settings: Optional[PasteSettings] = None,
    warn: WarningCallback = _log_warning,
) -> Optional[PasteEdit]:
    """Return the edit replacing a paste of *data_transfer* into *document*.

    ``None`` tells the host to fall through to its default paste behaviour.
    """

    if _cancelled(token):
        return None
    if document.scheme != "file":
        return None
    try:
        require_saved(document)
    except UnsavedDocumentError as exc:
        warn(str(exc))
        return None

    sources = extract_image_sources(data_transfer)
    if not sources:
        return None
    logger.debug("Extracted %d image source(s) for %s", len(sources), document.path)
    return save_image_sources(sources, document, settings=settings, token=token)


async def provide_paste_edits_async(
    document: Document,
    data_transfer: DataTransfer,
    token: Optional[CancellationToken] = None,
    *,
    settings: Optional[PasteSettings] = None,
    warn: WarningCallback = _log_warning,
) -> Optional[PasteEdit]:
    """Awaitable variant running the blocking pipeline in a worker thread."""

    if _cancelled(token):
        return None
    loop = asyncio.get_running_loop()
    call = partial(
        provide_paste_edits,
        document,
        data_transfer,
        token,
        settings=settings,
        warn=warn,
    )
    return await loop.run_in_executor(None, call)


@dataclass
class PasteEditProvider:
    """Registration metadata and entry points for Markdown paste and drop."""

    settings: PasteSettings = field(default_factory=PasteSettings)
    warn: WarningCallback = _log_warning
    language: str = "markdown"
    scheme: str = "file"
    paste_mime_types: Tuple[str, ...] = (*IMAGE_MIME_TYPES, "files", URI_LIST_MIME_TYPES[0])
    provided_kinds: Tuple[str, ...] = (PASTE_EDIT_KIND,)

    def matches(self, document: Document) -> bool:
        return document.language_id == self.language and document.scheme == self.scheme

    def provide_document_paste_edits(
        self,
        document: Document,
        data_transfer: DataTransfer,
        token: Optional[CancellationToken] = None,
    ) -> Optional[List[PasteEdit]]:
        edit = provide_paste_edits(
            document, data_transfer, token, settings=self.settings, warn=self.warn
        )
        return [edit] if edit is not None else None

    def provide_document_drop_edits(
        self,
        document: Document,
        data_transfer: DataTransfer,
        token: Optional[CancellationToken] = None,
    ) -> Optional[List[PasteEdit]]:
        return self.provide_document_paste_edits(document, data_transfer, token)


__all__ = [
    "CancellationToken",
    "Document",
    "PASTE_EDIT_KIND",
    "PASTE_EDIT_TITLE",
    "PasteEditProvider",
    "UNSAVED_DOCUMENT_WARNING",
    "provide_paste_edits",
    "provide_paste_edits_async",
    "require_saved",
    "save_image_sources",
]
