from __future__ import annotations

import shutil
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterable, Union

from pydantic_core import to_json

COPY_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Bytes:
    """Raw bytes, written verbatim."""
    data: bytes

    def write_to(self, fh: BinaryIO) -> None:
        fh.write(self.data)


@dataclass(frozen=True)
class Text:
    """A string, stored encoded as-is (no JSON quoting)."""
    text: str
    encoding: str = "utf-8"

    def write_to(self, fh: BinaryIO) -> None:
        fh.write(self.text.encode(self.encoding))


@dataclass(frozen=True)
class Structured:
    """Any JSON-serializable value (dicts, lists, pydantic models, dataclasses...)."""
    value: Any

    def write_to(self, fh: BinaryIO) -> None:
        fh.write(to_json(self.value))


@dataclass(frozen=True)
class StreamSource:
    """A binary file-like object or an iterable of byte chunks, drained on write."""
    source: Union[BinaryIO, Iterable[bytes]]

    def write_to(self, fh: BinaryIO) -> None:
        if hasattr(self.source, "read"):
            shutil.copyfileobj(self.source, fh, COPY_CHUNK_SIZE)
            return
        for chunk in self.source:
            if chunk:
                fh.write(chunk)


Payload = Union[Bytes, Text, Structured, StreamSource]
PAYLOAD_TYPES = (Bytes, Text, Structured, StreamSource)


def as_payload(value: Any) -> Payload:
    """Picks the payload variant for a plain Python value."""
    if isinstance(value, PAYLOAD_TYPES):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Bytes(bytes(value))
    if isinstance(value, str):
        return Text(value)
    if hasattr(value, "read") or isinstance(value, Iterator):
        return StreamSource(value)
    return Structured(value)
