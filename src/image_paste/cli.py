# SPDX-License-Identifier: AGPL-3.0-or-later
"""Command line interface emulating a host paste into a Markdown document."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .errors import PasteError
from .payload import DataTransfer, DataTransferItem, InMemoryFile
from .pipeline import Document, provide_paste_edits
from .settings import PasteSettings, get_settings
from .sniff import guess_image_mime, sniff_image_mime
from .writer import content_identity

EXIT_OK = 0
EXIT_NOTHING_PASTED = 1
EXIT_FAILED = 2


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Store pasted images next to Markdown documents")
    parser.add_argument("--config", type=Path, help="Settings YAML (defaults to configs/settings.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    paste_parser = subparsers.add_parser("paste", help="Paste images into a document")
    paste_parser.add_argument("document", type=Path, help="Destination Markdown document")
    paste_parser.add_argument("files", nargs="*", type=Path, help="Image files to paste")
    paste_parser.add_argument(
        "--uri-list",
        help="File holding a text/uri-list payload ('-' reads stdin)",
    )
    paste_parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read raw image bytes from stdin as clipboard image data",
    )
    paste_parser.add_argument("--mime", help="MIME type of the stdin image (sniffed when omitted)")
    paste_parser.add_argument("--name", help="Declared file name of the stdin image")
    paste_parser.add_argument("--json", action="store_true", help="Print the edit as JSON")

    hash_parser = subparsers.add_parser("hash", help="Print content identities of files")
    hash_parser.add_argument("files", nargs="+", type=Path, help="Files to hash")

    return parser.parse_args(argv)


def _configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _stdin_item(data: bytes, mime: Optional[str], name: Optional[str]) -> tuple[str, DataTransferItem]:
    resolved = mime or sniff_image_mime(data) or (guess_image_mime(name) if name else None)
    file = InMemoryFile(name or "", data)
    return (resolved or "application/octet-stream"), DataTransferItem.from_file(file)


def build_data_transfer(args: argparse.Namespace) -> DataTransfer:
    """Assemble the payload a host would hand over for *args*."""

    if args.stdin and args.uri_list == "-":
        raise ValueError("--stdin and --uri-list - both read stdin; pick one")

    data_transfer = DataTransfer()
    lines: List[str] = []
    if args.uri_list == "-":
        lines.append(sys.stdin.read())
    elif args.uri_list:
        lines.append(Path(args.uri_list).expanduser().read_text(encoding="utf-8"))
    lines.extend(path.expanduser().resolve().as_uri() for path in args.files)
    if lines:
        data_transfer.set("text/uri-list", DataTransferItem("\n".join(lines)))

    if args.stdin:
        mime, item = _stdin_item(sys.stdin.buffer.read(), args.mime, args.name)
        data_transfer.set(mime, item)
    return data_transfer


def _handle_paste(args: argparse.Namespace, settings: PasteSettings) -> int:
    document_path = args.document.expanduser().resolve()
    document = Document(path=document_path, is_untitled=not document_path.is_file())
    warnings: List[str] = []

    try:
        data_transfer = build_data_transfer(args)
        edit = provide_paste_edits(document, data_transfer, settings=settings, warn=warnings.append)
    except (OSError, PasteError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILED

    for message in warnings:
        print(f"warning: {message}", file=sys.stderr)
    if warnings:
        return EXIT_FAILED
    if edit is None:
        print("No images found in payload", file=sys.stderr)
        return EXIT_NOTHING_PASTED

    if args.json:
        print(json.dumps(edit.to_dict(), ensure_ascii=False))
    else:
        print(edit.insert_text)
    return EXIT_OK


def _handle_hash(args: argparse.Namespace, settings: PasteSettings) -> int:
    algorithm = settings.assets.hash_algorithm
    status = EXIT_OK
    for path in args.files:
        try:
            identity = content_identity(path.read_bytes(), algorithm=algorithm)
        except OSError as exc:
            print(f"error: {path}: {exc.strerror or exc}", file=sys.stderr)
            status = EXIT_FAILED
            continue
        print(f"{identity}  {path}")
    return status


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = get_settings(args.config)
    except (ValidationError, ValueError, yaml.YAMLError, OSError) as exc:
        print(f"error: invalid settings: {exc}", file=sys.stderr)
        return EXIT_FAILED
    _configure_logging(settings.log_level, args.verbose)
    if args.command == "paste":
        return _handle_paste(args, settings)
    if args.command == "hash":
        return _handle_hash(args, settings)
    raise ValueError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
