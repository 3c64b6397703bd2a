# SPDX-License-Identifier: AGPL-3.0-or-later
"""Parsing helpers for ``text/uri-list`` payloads (RFC 2483)."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import List, Optional
from urllib.parse import SplitResult, urlsplit
from urllib.request import url2pathname

logger = logging.getLogger(__name__)

URI_LIST_MIME_TYPES = ("text/uri-list", "application/vnd.code.uri-list")

_LINE_SPLIT = re.compile(r"\r?\n")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


def _parse_line(line: str) -> Optional[SplitResult]:
    try:
        parts = urlsplit(line)
    except ValueError as exc:
        logger.debug("Skipping malformed uri-list entry %r: %s", line, exc)
        return None
    if not parts.scheme:
        # Bare absolute paths are accepted as file locations.
        if not line.startswith("/"):
            logger.debug("Skipping uri-list entry without scheme: %r", line)
            return None
        return SplitResult("file", "", parts.path, "", "")
    if not _SCHEME.match(parts.scheme):
        logger.debug("Skipping uri-list entry with invalid scheme: %r", line)
        return None
    return parts


def parse_uri_list(text: str) -> List[SplitResult]:
    """Return the URIs listed in *text*, skipping blanks, comments and junk."""

    uris: List[SplitResult] = []
    for raw in _LINE_SPLIT.split(text):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parsed = _parse_line(line)
        if parsed is not None:
            uris.append(parsed)
    return uris


def is_file_uri(uri: SplitResult) -> bool:
    return uri.scheme.lower() == "file"


def file_uri_to_path(uri: SplitResult | str) -> Path:
    """Resolve a ``file:`` URI to an absolute, normalized filesystem path."""

    parts = urlsplit(uri) if isinstance(uri, str) else uri
    if parts.scheme and parts.scheme.lower() != "file":
        raise ValueError(f"Not a file URI: {parts.geturl()}")
    path = url2pathname(parts.path)
    if parts.netloc and parts.netloc.lower() != "localhost":
        path = f"//{parts.netloc}{path}"
    return Path(os.path.normpath(os.path.abspath(path)))


__all__ = ["URI_LIST_MIME_TYPES", "file_uri_to_path", "is_file_uri", "parse_uri_list"]
