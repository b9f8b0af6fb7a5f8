"""Commit body decoding: root tree and parent list."""

from __future__ import annotations

import string

from gitgraph.core.exceptions import MalformedCommitError
from gitgraph.core.models import Commit

TREE_LABEL = b"tree"
PARENT_LABEL = b"parent"
IDENTIFIER_LENGTH = 40

_HEX_DIGITS = frozenset(string.hexdigits.lower().encode("ascii"))


def _is_identifier(value: bytes) -> bool:
    return len(value) == IDENTIFIER_LENGTH and all(byte in _HEX_DIGITS for byte in value)


def _split_labelled(line: bytes) -> tuple[bytes, bytes]:
    """Split ``<label> <value>``; value is empty when there is no space."""
    label, _, value = line.partition(b" ")
    return label, value.strip()


def decode_commit(content: bytes) -> Commit:
    """Decode the tree and parent lines at the top of a commit body.

    The parent run ends at the first line whose first token is not
    ``parent`` (normally the author line).

    Raises:
        MalformedCommitError: the first line is not ``tree <id>``, or a
            ``parent`` line does not carry a full identifier.
    """
    lines = content.split(b"\n")

    label, tree = _split_labelled(lines[0])
    if label != TREE_LABEL:
        raise MalformedCommitError(f"First line is not a tree line: {lines[0][:60]!r}")
    if not _is_identifier(tree):
        raise MalformedCommitError(f"Tree line has an invalid identifier: {tree!r}")

    parents: list[str] = []
    for line in lines[1:]:
        if len(line) < len(PARENT_LABEL):
            break
        label, parent = _split_labelled(line)
        if label != PARENT_LABEL:
            break
        if not _is_identifier(parent):
            raise MalformedCommitError(f"Parent line has an invalid identifier: {parent!r}")
        parents.append(parent.decode("ascii"))

    return Commit(tree=tree.decode("ascii"), parents=tuple(parents))
