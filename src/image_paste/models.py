# SPDX-License-Identifier: AGPL-3.0-or-later
"""Lightweight data structures shared by the paste pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .payload import TransferFile

PASTE_EDIT_TITLE = "Paste image to assets folder"
PASTE_EDIT_KIND = "empty"


@dataclass(frozen=True, slots=True)
class FilePathSource:
    """Image that already exists at a known filesystem location."""

    path: Path
    ext: str


@dataclass(frozen=True, slots=True)
class InlineDataSource:
    """Image whose bytes are embedded in the payload."""

    file: TransferFile
    ext: str


ImageSource = Union[FilePathSource, InlineDataSource]


@dataclass(frozen=True, slots=True)
class WrittenAsset:
    """An asset materialized (or found) in the asset directory."""

    path: Path
    identity: str
    created: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"path": str(self.path), "identity": self.identity, "created": self.created}


@dataclass(frozen=True, slots=True)
class PasteEdit:
    """Substitution handed back to the host in place of the raw paste."""

    insert_text: str
    title: str = PASTE_EDIT_TITLE
    kind: str = PASTE_EDIT_KIND
    assets: Tuple[WrittenAsset, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation."""

        return {
            "insert_text": self.insert_text,
            "title": self.title,
            "kind": self.kind,
            "assets": [asset.to_dict() for asset in self.assets],
        }


__all__ = [
    "PASTE_EDIT_KIND",
    "PASTE_EDIT_TITLE",
    "FilePathSource", "ImageSource", "InlineDataSource", "PasteEdit", "WrittenAsset"]
