"""Locate a git directory and the loose objects inside it."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path

from gitgraph.core.exceptions import RepositoryNotFoundError

GIT_DIR = ".git"
OBJECTS_DIR = "objects"
COMMONDIR_FILE = "commondir"
_GITDIR_PREFIX = "gitdir:"

_FANOUT_RE = re.compile(r"^[0-9a-fA-F]{2}$")
_REST_RE = re.compile(r"^[0-9a-fA-F]{38}$")


def find_git_dir(path: Path) -> Path:
    """Return the ``.git`` directory at or above ``path``.

    A path that is itself a git directory (has ``objects`` and ``HEAD``) is
    returned unchanged, so bare repositories work too. A ``.git`` file, as
    written for linked worktrees and submodules, is followed to the
    directory its ``gitdir:`` line names; the search never climbs past it.
    """
    path = path.resolve()
    for candidate in (path, *path.parents):
        if _looks_like_git_dir(candidate):
            return candidate
        nested = candidate / GIT_DIR
        if nested.is_dir():
            return nested
        if nested.is_file():
            return _follow_gitdir_file(nested)
    raise RepositoryNotFoundError(f"No git repository found at or above {path}")


def _looks_like_git_dir(path: Path) -> bool:
    return (path / OBJECTS_DIR).is_dir() and (path / "HEAD").is_file()


def _follow_gitdir_file(pointer: Path) -> Path:
    text = pointer.read_text(encoding="utf-8").strip()
    if not text.startswith(_GITDIR_PREFIX):
        raise RepositoryNotFoundError(f"{pointer} is not a gitdir pointer")
    target = pointer.parent / text[len(_GITDIR_PREFIX) :].strip()
    if not target.is_dir():
        raise RepositoryNotFoundError(f"{pointer} points at missing directory {target}")
    return target.resolve()


def common_dir(git_dir: Path) -> Path:
    """Directory holding shared objects and refs.

    Linked worktrees keep only HEAD in their own git directory and name the
    main one in a ``commondir`` file.
    """
    pointer = git_dir / COMMONDIR_FILE
    if pointer.is_file():
        return (git_dir / pointer.read_text(encoding="utf-8").strip()).resolve()
    return git_dir


def objects_dir(git_dir: Path) -> Path:
    return common_dir(git_dir) / OBJECTS_DIR


def iter_object_paths(objects_root: Path) -> Iterator[Path]:
    """Yield loose object files in identifier order.

    Only ``xx/yyyy...`` layouts with hex names are yielded; ``pack`` and
    ``info`` and anything else are skipped.
    """
    if not objects_root.is_dir():
        return
    for fanout in sorted(objects_root.iterdir()):
        if not fanout.is_dir() or not _FANOUT_RE.match(fanout.name):
            continue
        for entry in sorted(fanout.iterdir()):
            if entry.is_file() and _REST_RE.match(entry.name):
                yield entry
