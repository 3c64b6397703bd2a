# SPDX-License-Identifier: AGPL-3.0-or-later
"""Asset directory layout and Markdown image references."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

DEFAULT_ASSETS_SUFFIX = "_assets"


def asset_directory_for(document_path: str | Path, suffix: str = DEFAULT_ASSETS_SUFFIX) -> Path:
    """Return the sibling asset directory for *document_path*.

    ``/proj/notes.md`` maps to ``/proj/notes_assets``.
    """

    document = Path(document_path)
    return document.parent / f"{document.stem}{suffix}"


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def to_posix_path(path: str) -> str:
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        path = path.replace(os.altsep, "/")
    return path


def relative_reference_path(written_path: str | Path, document_dir: str | Path) -> str:
    relative = to_posix_path(os.path.relpath(written_path, document_dir))
    return relative if relative.startswith(".") else f"./{relative}"


def build_reference(written_path: str | Path, document_dir: str | Path) -> str:
    """Return an empty-alt Markdown image reference relative to *document_dir*."""

    return f"![]({relative_reference_path(written_path, document_dir)})"


def join_references(references: Iterable[str]) -> str:
    return "\n".join(references)


__all__ = [
    "DEFAULT_ASSETS_SUFFIX",
    "asset_directory_for",
    "build_reference",
    "ensure_directory",
    "join_references",
    "relative_reference_path",
    "to_posix_path",
]
