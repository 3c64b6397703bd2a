# SPDX-License-Identifier: AGPL-3.0-or-later
"""Exception hierarchy surfaced by the paste pipeline."""

from __future__ import annotations

from pathlib import Path


class PasteError(Exception):
    """Base class for failures that abort a paste operation."""


class UnsavedDocumentError(PasteError):
    """Raised when the destination document has no location on disk yet."""


class AssetReadError(PasteError):
    """Raised when the bytes of an image source cannot be read."""

    def __init__(self, path: Path | str | None, reason: str) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = reason
        target = str(self.path) if self.path is not None else "<inline data>"
        super().__init__(f"Failed to read image from {target}: {reason}")


class AssetWriteError(PasteError):
    """Raised when an asset cannot be persisted under the asset directory."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write asset {self.path}: {reason}")


__all__ = ["AssetReadError", "AssetWriteError", "PasteError", "UnsavedDocumentError"]
