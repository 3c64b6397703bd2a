from __future__ import annotations

from pathlib import Path

from image_paste.extract import collect_image_sources, extract_image_sources, pick_image_item
from image_paste.models import FilePathSource, InlineDataSource
from image_paste.payload import DataTransfer, DataTransferItem, InMemoryFile


def _uri_list(*paths: Path) -> DataTransferItem:
    return DataTransferItem("\n".join(path.as_uri() for path in paths))


def _file_item(name: str, data: bytes = b"bytes", uri: str | None = None) -> DataTransferItem:
    return DataTransferItem.from_file(InMemoryFile(name, data, uri=uri))


def test_direct_image_entry_wins_over_uri_list(tmp_path: Path) -> None:
    payload = DataTransfer(
        [
            ("text/uri-list", _uri_list(tmp_path / "elsewhere.png")),
            ("image/png", _file_item("image.png")),
        ]
    )

    sources = extract_image_sources(payload)

    assert len(sources) == 1
    assert isinstance(sources[0], InlineDataSource)
    assert sources[0].ext == "png"


def test_direct_image_priority_follows_fixed_order() -> None:
    payload = DataTransfer(
        [
            ("image/webp", _file_item("a.webp")),
            ("image/jpeg", _file_item("b")),
        ]
    )

    mime, _ = pick_image_item(payload)
    sources = extract_image_sources(payload)

    assert mime == "image/jpeg"
    assert sources[0].ext == "jpg"


def test_direct_image_without_file_handle_yields_nothing(tmp_path: Path) -> None:
    payload = DataTransfer(
        [
            ("image/png", DataTransferItem("<svg/>")),
            ("text/uri-list", _uri_list(tmp_path / "a.png")),
        ]
    )

    assert extract_image_sources(payload) == []


def test_uri_list_duplicates_collapse_to_one_source(tmp_path: Path) -> None:
    image = tmp_path / "imgs" / "a.jpg"
    payload = DataTransfer([("text/uri-list", _uri_list(image, image))])

    sources = extract_image_sources(payload)

    assert sources == [FilePathSource(path=image, ext="jpg")]


def test_uri_list_filters_schemes_and_extensions(tmp_path: Path) -> None:
    text = "\n".join(
        [
            "# comment",
            "",
            "https://example.com/remote.png",
            (tmp_path / "doc.pdf").as_uri(),
            (tmp_path / "Photo.JPEG").as_uri(),
        ]
    )
    payload = DataTransfer([("text/uri-list", DataTransferItem(text))])

    sources = extract_image_sources(payload)

    assert sources == [FilePathSource(path=tmp_path / "Photo.JPEG", ext="jpeg")]


def test_alternate_uri_list_key_is_used_when_primary_is_empty(tmp_path: Path) -> None:
    payload = DataTransfer(
        [
            ("text/uri-list", DataTransferItem("   ")),
            ("application/vnd.code.uri-list", _uri_list(tmp_path / "a.gif")),
        ]
    )

    sources = extract_image_sources(payload)

    assert sources == [FilePathSource(path=tmp_path / "a.gif", ext="gif")]


def test_file_handle_with_origin_deduplicates_against_uri_list(tmp_path: Path) -> None:
    image = tmp_path / "a.png"
    payload = DataTransfer(
        [
            ("text/uri-list", _uri_list(image)),
            ("files", _file_item("a.png", uri=image.as_uri())),
        ]
    )

    sources = extract_image_sources(payload)

    assert sources == [FilePathSource(path=image, ext="png")]


def test_file_handles_without_origin_become_inline_sources(tmp_path: Path) -> None:
    listed = tmp_path / "listed.webp"
    payload = DataTransfer(
        [
            ("files", _file_item("Shot.PNG", b"png-bytes")),
            ("text/uri-list", _uri_list(listed)),
            ("application/octet-stream", _file_item("remote.gif", uri="https://example.com/remote.gif")),
        ]
    )

    sources = collect_image_sources(payload)

    assert sources[0] == FilePathSource(path=listed, ext="webp")
    assert isinstance(sources[1], InlineDataSource)
    assert sources[1].ext == "png"
    assert sources[1].file.data() == b"png-bytes"
    assert isinstance(sources[2], InlineDataSource)
    assert sources[2].ext == "gif"


def test_unsupported_and_nameless_files_are_dropped() -> None:
    payload = DataTransfer(
        [
            ("files", _file_item("doc.pdf")),
            ("application/octet-stream", _file_item("")),
            ("text/plain", DataTransferItem("hello")),
        ]
    )

    assert extract_image_sources(payload) == []


def test_empty_payload_yields_nothing() -> None:
    assert extract_image_sources(DataTransfer()) == []


def test_file_handle_with_non_image_origin_is_dropped(tmp_path: Path) -> None:
    origin = tmp_path / "a.txt"
    payload = DataTransfer([("files", _file_item("a.png", uri=origin.as_uri()))])

    assert extract_image_sources(payload) == []


def test_file_handles_sharing_an_origin_collapse_to_one_source(tmp_path: Path) -> None:
    image = tmp_path / "shared.png"
    payload = DataTransfer(
        [
            ("files", _file_item("shared.png", uri=image.as_uri())),
            ("application/octet-stream", _file_item("copy.png", uri=image.as_uri())),
        ]
    )

    assert extract_image_sources(payload) == [FilePathSource(path=image, ext="png")]


class _OpaqueItem(DataTransferItem):
    """Carries a file object but reports no file handle capability."""

    def has_file_handle(self) -> bool:
        return False


def test_entries_without_file_handle_capability_are_ignored() -> None:
    opaque = _OpaqueItem(file=InMemoryFile("shot.png", b"bytes"))

    assert extract_image_sources(DataTransfer([("files", opaque)])) == []
    assert extract_image_sources(DataTransfer([("image/png", opaque)])) == []
