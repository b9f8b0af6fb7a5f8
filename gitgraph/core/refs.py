"""HEAD and branch resolution from plain-text ref files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gitgraph.core.discovery import common_dir
from gitgraph.core.exceptions import ObjectNotFoundError
from gitgraph.core.graph.base import ObjectGraph
from gitgraph.core.models import Commit, ObjectKind

HEAD_FILE = "HEAD"
PACKED_REFS_FILE = "packed-refs"
_REF_PREFIX = "ref:"
_BRANCH_PREFIX = "refs/heads/"


@dataclass(frozen=True)
class Head:
    """Contents of HEAD: a symbolic ref, or a detached commit identifier."""

    ref: str | None = None
    detached: str | None = None

    @property
    def is_detached(self) -> bool:
        return self.detached is not None


def read_head(git_dir: Path) -> Head:
    """Parse ``HEAD``; ``ref: refs/heads/main`` or a bare identifier."""
    text = (git_dir / HEAD_FILE).read_text(encoding="utf-8").strip()
    if text.startswith(_REF_PREFIX):
        return Head(ref=text[len(_REF_PREFIX) :].strip())
    return Head(detached=text.lower())


def current_branch(git_dir: Path) -> str | None:
    """Short name of the checked-out branch, or None when detached."""
    head = read_head(git_dir)
    if head.ref is None:
        return None
    if head.ref.startswith(_BRANCH_PREFIX):
        return head.ref[len(_BRANCH_PREFIX) :]
    return head.ref


def _read_packed_ref(git_dir: Path, ref: str) -> str | None:
    packed = common_dir(git_dir) / PACKED_REFS_FILE
    if not packed.is_file():
        return None
    for line in packed.read_text(encoding="utf-8").splitlines():
        if not line or line.startswith(("#", "^")):
            continue
        identifier, _, name = line.partition(" ")
        if name.strip() == ref:
            return identifier.strip().lower()
    return None


def resolve_ref(git_dir: Path, ref: str) -> str | None:
    """Identifier a ref points at: loose ref file first, then ``packed-refs``.

    For a linked worktree the shared git directory is searched after its own.
    """
    for base in dict.fromkeys((git_dir, common_dir(git_dir))):
        loose = base / ref
        if loose.is_file():
            return loose.read_text(encoding="utf-8").strip().lower()
    return _read_packed_ref(git_dir, ref)


def resolve_head(git_dir: Path) -> str | None:
    """Commit identifier HEAD points at; None for an unborn branch."""
    head = read_head(git_dir)
    if head.ref is None:
        return head.detached
    return resolve_ref(git_dir, head.ref)


def current_commit(git_dir: Path, graph: ObjectGraph) -> Commit:
    """Decoded view of the commit HEAD points at.

    Raises:
        ObjectNotFoundError: HEAD is unborn or its commit is not in the graph.
    """
    identifier = resolve_head(git_dir)
    if identifier is None:
        raise ObjectNotFoundError("HEAD does not point at a commit yet")
    node = graph.get_node(identifier)
    if node is None or node.kind is not ObjectKind.COMMIT:
        raise ObjectNotFoundError(f"HEAD commit not found: {identifier}")
    return Commit(tree=node.view["tree"], parents=tuple(node.view["parents"]))
