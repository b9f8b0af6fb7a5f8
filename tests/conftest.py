"""Shared fixtures: temporary directories and synthetic loose-object stores."""

from __future__ import annotations

import hashlib
import tempfile
import zlib
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

TreeRows = list[tuple[str, bytes | str, str]]


def encode_tree(entries: TreeRows) -> bytes:
    """Serialize (mode, name, hex target) entries into a tree body."""
    body = b""
    for mode, name, target in entries:
        raw_name = name.encode("utf-8") if isinstance(name, str) else name
        body += mode.encode("ascii") + b" " + raw_name + b"\x00" + bytes.fromhex(target)
    return body


def encode_commit(tree: str, parents: list[str] | None = None, message: str = "msg") -> bytes:
    """Serialize a minimal commit body."""
    lines = [f"tree {tree}"]
    lines += [f"parent {p}" for p in parents or []]
    lines += [
        "author A U Thor <author@example.com> 1700000000 +0000",
        "committer A U Thor <author@example.com> 1700000000 +0000",
        "",
        message,
    ]
    return ("\n".join(lines) + "\n").encode("utf-8")


class LooseStore:
    """Writes loose objects the way git lays them out on disk."""

    def __init__(self, git_dir: Path) -> None:
        self.git_dir = git_dir
        self.objects = git_dir / "objects"
        self.objects.mkdir(parents=True, exist_ok=True)
        (git_dir / "refs" / "heads").mkdir(parents=True, exist_ok=True)
        (git_dir / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")

    def write(self, type_name: str, body: bytes) -> str:
        data = f"{type_name} {len(body)}".encode("ascii") + b"\x00" + body
        identifier = hashlib.sha1(data).hexdigest()
        self.write_raw(identifier, zlib.compress(data))
        return identifier

    def write_raw(self, identifier: str, compressed: bytes) -> Path:
        path = self.objects / identifier[:2] / identifier[2:]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(compressed)
        return path

    def blob(self, content: bytes) -> str:
        return self.write("blob", content)

    def tree(self, entries: TreeRows) -> str:
        return self.write("tree", encode_tree(entries))

    def commit(self, tree: str, parents: list[str] | None = None, message: str = "msg") -> str:
        return self.write("commit", encode_commit(tree, parents, message))

    def set_branch(self, identifier: str, branch: str = "main") -> None:
        (self.git_dir / "refs" / "heads" / branch).write_text(identifier + "\n", encoding="utf-8")


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def store(temp_dir: Path) -> LooseStore:
    """An empty repository at ``temp_dir`` with HEAD on ``main``."""
    return LooseStore(temp_dir / ".git")


@pytest.fixture
def tree_encoder() -> Callable[[TreeRows], bytes]:
    return encode_tree


@pytest.fixture
def commit_encoder() -> Callable[..., bytes]:
    return encode_commit
