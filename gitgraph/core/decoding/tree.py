"""Tree body decoding.

A tree body is a run of entries, each ``<mode> <name>\\0<20-byte hash>``.
Mode length varies (``40000`` vs ``100644``), so every field is found by
scanning to its delimiter rather than by fixed offsets.
"""

from __future__ import annotations

from enum import Enum

from gitgraph.core.exceptions import MalformedTreeError, TruncatedTreeError
from gitgraph.core.models import TreeEntry

HASH_LENGTH = 20

_SPACE = 0x20
_NUL = 0x00
_SEPARATOR = b"/"


class _State(Enum):
    MODE = 1
    NAME = 2
    HASH = 3


def decode_tree(content: bytes) -> list[TreeEntry]:
    """Decode a tree body into its entries, preserving on-disk order.

    An empty body is an empty directory and yields no entries.

    Raises:
        TruncatedTreeError: the body ends inside an entry.
        MalformedTreeError: an entry has an empty or non-ASCII mode, or a bad name.
    """
    entries: list[TreeEntry] = []
    end = len(content)
    cursor = 0
    state = _State.MODE
    mode = ""
    name = b""

    while cursor < end or state is not _State.MODE:
        if state is _State.MODE:
            space = content.find(_SPACE, cursor)
            if space == -1:
                raise TruncatedTreeError(f"Entry at byte {cursor} has no space after its mode")
            raw_mode = content[cursor:space]
            if not raw_mode:
                raise MalformedTreeError(f"Entry at byte {cursor} has an empty mode")
            if _NUL in raw_mode or not raw_mode.isascii():
                raise MalformedTreeError(f"Entry at byte {cursor} has an invalid mode {raw_mode!r}")
            mode = raw_mode.decode("ascii")
            cursor = space + 1
            state = _State.NAME

        elif state is _State.NAME:
            nul = content.find(_NUL, cursor, end)
            if nul == -1:
                raise TruncatedTreeError(f"Name at byte {cursor} has no zero terminator")
            name = content[cursor:nul]
            if not name:
                raise MalformedTreeError(f"Entry at byte {cursor} has an empty name")
            if _SEPARATOR in name:
                raise MalformedTreeError(f"Entry name {name!r} contains a path separator")
            cursor = nul + 1
            state = _State.HASH

        else:
            if end - cursor < HASH_LENGTH:
                raise TruncatedTreeError(
                    f"Entry {name!r} needs {HASH_LENGTH} hash bytes, "
                    f"only {end - cursor} remain"
                )
            target = content[cursor : cursor + HASH_LENGTH].hex()
            cursor += HASH_LENGTH
            entries.append(TreeEntry(mode=mode, name=name, target=target))
            state = _State.MODE

    return entries
