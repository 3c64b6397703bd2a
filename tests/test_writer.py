# SPDX-License-Identifier: AGPL-3.0-or-later
from __future__ import annotations

import errno
import hashlib
from pathlib import Path

import pytest

from image_paste.errors import AssetReadError, AssetWriteError
from image_paste.models import FilePathSource, InlineDataSource
from image_paste.payload import InMemoryFile
from image_paste.settings import AssetSettings
from image_paste.writer import content_identity, read_source_bytes, write_image_source

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-body"


def test_content_identity_is_lowercase_sha256() -> None:
    identity = content_identity(PNG_BYTES)

    assert identity == hashlib.sha256(PNG_BYTES).hexdigest()
    assert identity == content_identity(PNG_BYTES)
    assert len(identity) == 64
    assert identity == identity.lower()


def test_write_is_idempotent_across_source_kinds(tmp_path: Path) -> None:
    original = tmp_path / "original.png"
    original.write_bytes(PNG_BYTES)
    assets = tmp_path / "notes_assets"

    first = write_image_source(InlineDataSource(InMemoryFile("clip.png", PNG_BYTES), "png"), assets)
    second = write_image_source(FilePathSource(original, "png"), assets)

    assert first.path == second.path
    assert first.identity == second.identity
    assert first.created is True
    assert second.created is False
    assert [entry.name for entry in assets.iterdir()] == [f"{first.identity}.png"]
    assert first.path.read_bytes() == PNG_BYTES


def test_write_normalizes_extension(tmp_path: Path) -> None:
    upper = write_image_source(InlineDataSource(InMemoryFile("a", b"one"), ".JPG"), tmp_path)
    blank = write_image_source(InlineDataSource(InMemoryFile("b", b"two"), "  "), tmp_path)

    assert upper.path.name == f"{content_identity(b'one')}.jpg"
    assert blank.path.name == f"{content_identity(b'two')}.png"


def test_existing_asset_is_not_rewritten(tmp_path: Path) -> None:
    identity = content_identity(PNG_BYTES)
    existing = tmp_path / f"{identity}.png"
    existing.write_bytes(b"left alone")

    asset = write_image_source(InlineDataSource(InMemoryFile("x.png", PNG_BYTES), "png"), tmp_path)

    assert asset.created is False
    assert existing.read_bytes() == b"left alone"


def test_alternate_hash_algorithm(tmp_path: Path) -> None:
    settings = AssetSettings(hash_algorithm="sha3-256")

    asset = write_image_source(
        InlineDataSource(InMemoryFile("x.png", PNG_BYTES), "png"), tmp_path, settings=settings
    )

    assert asset.identity == hashlib.sha3_256(PNG_BYTES).hexdigest()


def test_missing_source_raises_read_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.png"

    with pytest.raises(AssetReadError) as excinfo:
        write_image_source(FilePathSource(missing, "png"), tmp_path / "assets")

    assert excinfo.value.path == missing
    assert not (tmp_path / "assets").exists()


def test_unwritable_destination_raises_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "notes_assets"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(AssetWriteError):
        write_image_source(InlineDataSource(InMemoryFile("x.png", PNG_BYTES), "png"), blocker)


def test_read_source_bytes_rejects_unknown_variants() -> None:
    with pytest.raises(TypeError):
        read_source_bytes("not-a-source")  # type: ignore[arg-type]


class _ShortWriteHandle:
    """Writes a prefix of the payload, then fails like a full disk."""

    def __init__(self, real) -> None:
        self._real = real

    def __enter__(self) -> "_ShortWriteHandle":
        return self

    def __exit__(self, *exc_info) -> bool:
        self._real.close()
        return False

    def write(self, data: bytes) -> int:
        self._real.write(data[:16])
        raise OSError(errno.EFBIG, "File too large")


def test_failed_write_leaves_no_truncated_asset(tmp_path: Path, monkeypatch) -> None:
    assets = tmp_path / "notes_assets"
    data = PNG_BYTES * 64
    real_open = Path.open

    def _open(self, mode="r", *args, **kwargs):
        handle = real_open(self, mode, *args, **kwargs)
        return _ShortWriteHandle(handle) if "x" in mode else handle

    with monkeypatch.context() as patch:
        patch.setattr(Path, "open", _open)
        with pytest.raises(AssetWriteError):
            write_image_source(InlineDataSource(InMemoryFile("big.png", data), "png"), assets)

    assert list(assets.iterdir()) == []

    retry = write_image_source(InlineDataSource(InMemoryFile("big.png", data), "png"), assets)

    assert retry.created is True
    assert retry.path.read_bytes() == data
    assert [entry.name for entry in assets.iterdir()] == [retry.path.name]
