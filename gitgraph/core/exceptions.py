"""gitgraph custom exceptions."""

from __future__ import annotations

from gitgraph.core.models import ErrorKind


class GitGraphError(Exception):
    """Base exception for gitgraph errors."""


class RepositoryNotFoundError(GitGraphError):
    """No git directory found at or above the given path."""


class ObjectNotFoundError(GitGraphError):
    """Object identifier not present in the graph or the export database."""


class ObjectDecodeError(GitGraphError):
    """A single object could not be decoded."""

    error_kind: ErrorKind = ErrorKind.CORRUPT_OBJECT


class MalformedHeaderError(ObjectDecodeError):
    """Object header lacks the ``<type> <size>\\0`` layout."""

    error_kind = ErrorKind.MALFORMED_HEADER


class CorruptObjectError(ObjectDecodeError):
    """Object file could not be decompressed."""

    error_kind = ErrorKind.CORRUPT_OBJECT


class MalformedTreeError(ObjectDecodeError):
    """Tree body violates the entry grammar."""

    error_kind = ErrorKind.MALFORMED_TREE


class TruncatedTreeError(MalformedTreeError):
    """Tree body ends in the middle of an entry."""

    error_kind = ErrorKind.TRUNCATED_TREE


class MalformedCommitError(ObjectDecodeError):
    """Commit body has no valid tree line or a bad parent line."""

    error_kind = ErrorKind.MALFORMED_COMMIT
