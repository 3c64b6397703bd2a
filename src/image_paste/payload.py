# SPDX-License-Identifier: AGPL-3.0-or-later
"""Capability interfaces for paste and drop payloads plus an in-memory model.

Hosts hand the pipeline a :class:`DataTransfer`, an unordered mapping from
MIME-type-like keys to :class:`TransferItem` objects. Each item can either be
read as a string or expose an in-memory :class:`TransferFile` handle. The
in-memory classes below are what the CLI and the tests build; hosts with their
own clipboard objects only need to implement the abstract methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple


class TransferFile(ABC):
    """A file handle attached to a payload entry."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Declared file name, possibly empty."""

    @property
    @abstractmethod
    def uri(self) -> Optional[str]:
        """Origin URI of the file when the host knows where it came from."""

    @abstractmethod
    def data(self) -> bytes:
        """Return the complete file contents."""

    def has_origin_location(self) -> bool:
        return bool(self.uri)


class TransferItem(ABC):
    """A single representation inside a payload."""

    @abstractmethod
    def as_string(self) -> str:
        """Return the item rendered as text (empty when not textual)."""

    @abstractmethod
    def as_file(self) -> Optional[TransferFile]:
        """Return the attached file handle, if any."""

    def has_file_handle(self) -> bool:
        return self.as_file() is not None


class InMemoryFile(TransferFile):
    """File handle whose bytes are held (or lazily produced) in memory."""

    def __init__(
        self,
        name: str,
        content: bytes | Callable[[], bytes],
        *,
        uri: Optional[str] = None,
    ) -> None:
        self._name = name
        self._content = content
        self._uri = uri

    @property
    def name(self) -> str:
        return self._name

    @property
    def uri(self) -> Optional[str]:
        return self._uri

    def data(self) -> bytes:
        if callable(self._content):
            return self._content()
        return self._content

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"InMemoryFile(name={self._name!r}, uri={self._uri!r})"


class DataTransferItem(TransferItem):
    def __init__(self, value: str = "", file: Optional[TransferFile] = None) -> None:
        self._value = value
        self._file = file

    @classmethod
    def from_file(cls, file: TransferFile) -> "DataTransferItem":
        return cls(file=file)

    def as_string(self) -> str:
        return self._value

    def as_file(self) -> Optional[TransferFile]:
        return self._file


class DataTransfer:
    """Unordered mapping of MIME-type keys to payload items.

    Keys are matched case-insensitively. Iteration yields ``(mime, item)``
    pairs in insertion order.
    """

    def __init__(self, items: Iterable[Tuple[str, TransferItem]] = ()) -> None:
        self._items: Dict[str, TransferItem] = {}
        for mime, item in items:
            self.set(mime, item)

    def get(self, mime: str) -> Optional[TransferItem]:
        return self._items.get(mime.lower())

    def set(self, mime: str, item: TransferItem) -> None:
        self._items[mime.lower()] = item

    def __contains__(self, mime: object) -> bool:
        return isinstance(mime, str) and mime.lower() in self._items

    def __iter__(self) -> Iterator[Tuple[str, TransferItem]]:
        return iter(list(self._items.items()))

    def __len__(self) -> int:
        return len(self._items)


__all__ = [
    "DataTransfer",
    "DataTransferItem",
    "InMemoryFile",
    "TransferFile",
    "TransferItem",
]
