# SPDX-License-Identifier: AGPL-3.0-or-later
"""Content-addressed persistence of image sources."""

from __future__ import annotations

import hashlib
import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from .errors import AssetReadError, AssetWriteError
from .models import FilePathSource, ImageSource, InlineDataSource, WrittenAsset
from .settings import AssetSettings
from .sniff import normalize_ext

logger = logging.getLogger(__name__)


def content_identity(data: bytes, *, algorithm: str = "sha256") -> str:
    """Return the lowercase hex digest identifying *data*."""

    return hashlib.new(algorithm, data).hexdigest()


def read_source_bytes(source: ImageSource) -> bytes:
    """Read the complete contents behind *source*."""

    match source:
        case FilePathSource(path=path):
            try:
                return Path(path).read_bytes()
            except OSError as exc:
                raise AssetReadError(path, exc.strerror or str(exc)) from exc
        case InlineDataSource(file=file):
            try:
                return file.data()
            except OSError as exc:
                raise AssetReadError(None, exc.strerror or str(exc)) from exc
        case _:
            raise TypeError(f"Unsupported image source: {source!r}")


def asset_path_for(identity: str, ext: str, assets_dir: Path) -> Path:
    return Path(assets_dir) / f"{identity}.{ext}"


def _persist(target: Path, data: bytes) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise AssetWriteError(target, exc.strerror or str(exc)) from exc
    # Stage into a hidden sibling; the final name only ever holds complete bytes.
    partial = target.with_name(f".{target.name}.{uuid.uuid4().hex}.part")
    try:
        with partial.open("xb") as handle:
            handle.write(data)
        os.replace(partial, target)
    except OSError as exc:
        raise AssetWriteError(target, exc.strerror or str(exc)) from exc
    finally:
        partial.unlink(missing_ok=True)


def write_image_source(
    source: ImageSource,
    assets_dir: str | Path,
    *,
    settings: Optional[AssetSettings] = None,
) -> WrittenAsset:
    """Persist *source* under *assets_dir* keyed by its content identity.

    Writing the same bytes again is a no-op that returns the existing path.
    """

    settings = settings or AssetSettings()
    ext = normalize_ext(source.ext, default=settings.default_extension)
    data = read_source_bytes(source)
    identity = content_identity(data, algorithm=settings.hash_algorithm)
    target = asset_path_for(identity, ext, Path(assets_dir))

    if target.exists():
        logger.debug("Asset %s already present, skipping write", target)
        return WrittenAsset(path=target, identity=identity, created=False)

    _persist(target, data)
    logger.info("Wrote asset %s (%d bytes)", target, len(data))
    return WrittenAsset(path=target, identity=identity, created=True)


__all__ = ["asset_path_for", "content_identity", "read_source_bytes", "write_image_source"]
