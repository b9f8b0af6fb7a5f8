"""Loose object header parsing: ``<type> <size>\\0<content>``."""

from __future__ import annotations

from dataclasses import dataclass

from gitgraph.core.exceptions import MalformedHeaderError

SPACE = b" "
NUL = b"\x00"


@dataclass(frozen=True)
class Header:
    """Parsed header of a decompressed object.

    ``size`` is the raw size field, trimmed but not validated; ``offset``
    is the index of the first content byte.
    """

    type_name: str
    size: str
    offset: int


def parse_header(data: bytes) -> Header:
    """Split a decompressed object into type, size field and content offset.

    Raises:
        MalformedHeaderError: if there is no space, or no zero byte after it.
    """
    space = data.find(SPACE)
    if space == -1:
        raise MalformedHeaderError("No space after object type in header")

    nul = data.find(NUL, space + 1)
    if nul == -1:
        raise MalformedHeaderError("No zero byte terminating object header")

    type_name = data[:space].decode("ascii", errors="replace").strip()
    size = data[space + 1 : nul].decode("ascii", errors="replace").strip()
    return Header(type_name=type_name, size=size, offset=nul + 1)


def parse_size(size: str) -> int | None:
    """Return the size field as an int, or None if it is not a decimal number."""
    if not size.isdigit() or not size.isascii():
        return None
    return int(size)
