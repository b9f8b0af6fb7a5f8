"""Data models for gitgraph."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType

TREE_MODE = "40000"


class ObjectKind(Enum):
    """Kinds of objects found in a loose object store."""

    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"
    UNKNOWN = "unknown"
    UNREADABLE = "unreadable"

    @classmethod
    def from_type_name(cls, type_name: str) -> ObjectKind:
        """Map a header type string to a kind; unrecognised types are UNKNOWN."""
        if type_name in _HEADER_KINDS:
            return cls(type_name)
        return cls.UNKNOWN


_HEADER_KINDS = frozenset({"blob", "tree", "commit"})


class ErrorKind(Enum):
    """Reasons a single object failed to load or decode."""

    MALFORMED_HEADER = "malformed_header"
    CORRUPT_OBJECT = "corrupt_object"
    TRUNCATED_TREE = "truncated_tree"
    MALFORMED_TREE = "malformed_tree"
    MALFORMED_COMMIT = "malformed_commit"
    IO_ERROR = "io_error"
    DUPLICATE_OBJECT = "duplicate_object"


@dataclass(frozen=True)
class GitObject:
    """One loose object with its header parsed and its body kept raw."""

    identifier: str
    kind: ObjectKind
    type_name: str
    declared_size: int | None
    size_field: str
    content: bytes = field(repr=False)
    path: Path | None = None

    @property
    def size_matches(self) -> bool:
        return self.declared_size == len(self.content)


@dataclass(frozen=True)
class TreeEntry:
    """One entry of a tree object, in on-disk order."""

    mode: str
    name: bytes
    target: str

    @property
    def display_name(self) -> str:
        """Name decoded as UTF-8; undecodable bytes become U+FFFD."""
        return self.name.decode("utf-8", errors="replace")

    @property
    def is_tree(self) -> bool:
        return self.mode == TREE_MODE


@dataclass(frozen=True)
class Commit:
    """The graph-relevant part of a commit: its root tree and parents."""

    tree: str
    parents: tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@dataclass(frozen=True)
class ObjectError:
    """A per-object failure recorded instead of aborting the pass."""

    identifier: str
    kind: ErrorKind
    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return f"{self.identifier}: {self.kind.value}: {self.message}"


@dataclass(frozen=True)
class LoadResult:
    """Frozen outcome of loading a store: objects by identifier plus failures."""

    objects: Mapping[str, GitObject] = field(default_factory=lambda: MappingProxyType({}))
    failures: tuple[ObjectError, ...] = ()

    @classmethod
    def freeze(cls, objects: dict[str, GitObject], failures: list[ObjectError]) -> LoadResult:
        """Wrap accumulated results so nothing downstream can mutate them."""
        ordered = {key: objects[key] for key in sorted(objects)}
        return cls(
            objects=MappingProxyType(ordered),
            failures=tuple(sorted(failures, key=lambda f: f.identifier)),
        )

    def __len__(self) -> int:
        return len(self.objects) + len(self.failures)

    def __repr__(self) -> str:
        return f"LoadResult(objects={len(self.objects)}, failures={len(self.failures)})"
