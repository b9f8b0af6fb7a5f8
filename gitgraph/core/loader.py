"""Load loose objects from disk into immutable GitObject values."""

from __future__ import annotations

import logging
import zlib
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from gitgraph.core.decoding import parse_header, parse_size
from gitgraph.core.exceptions import CorruptObjectError, ObjectDecodeError
from gitgraph.core.models import ErrorKind, GitObject, LoadResult, ObjectError, ObjectKind

logger = logging.getLogger(__name__)

Decompressor = Callable[[bytes], bytes]
ProgressCallback = Callable[[Path, int, int], None]


def identifier_from_path(path: Path) -> str:
    """Rebuild the identifier from the fan-out directory and file name."""
    return (path.parent.name + path.name).lower()


def load_object(path: Path, decompress: Decompressor = zlib.decompress) -> GitObject:
    """Read, decompress and header-parse one loose object.

    Raises:
        OSError: the file could not be read.
        CorruptObjectError: the decompressor raised any error.
        MalformedHeaderError: the decompressed data has no valid header.
    """
    raw = path.read_bytes()
    try:
        data = decompress(raw)
    except Exception as e:
        raise CorruptObjectError(f"Cannot decompress {path}: {e}") from e

    header = parse_header(data)
    return GitObject(
        identifier=identifier_from_path(path),
        kind=ObjectKind.from_type_name(header.type_name),
        type_name=header.type_name,
        declared_size=parse_size(header.size),
        size_field=header.size,
        content=data[header.offset :],
        path=path,
    )


def _load_one(path: Path, decompress: Decompressor) -> GitObject | ObjectError:
    try:
        return load_object(path, decompress)
    except ObjectDecodeError as e:
        return ObjectError(identifier_from_path(path), e.error_kind, str(e), path)
    except OSError as e:
        return ObjectError(identifier_from_path(path), ErrorKind.IO_ERROR, str(e), path)


def load_objects(
    paths: Iterable[Path],
    decompress: Decompressor = zlib.decompress,
    workers: int = 1,
    on_progress: ProgressCallback | None = None,
) -> LoadResult:
    """Load every path, recording failures instead of stopping.

    With ``workers > 1`` loads run on a thread pool; results are merged and
    frozen only after every load has finished.

    Args:
        paths: Loose object files, already filtered to hex names
        decompress: bytes -> bytes inflater
        workers: Number of loader threads
        on_progress: Optional callback (path, current, total)

    Returns:
        LoadResult with a read-only object map and the per-object failures
    """
    path_list = list(paths)
    total = len(path_list)
    objects: dict[str, GitObject] = {}
    failures: list[ObjectError] = []

    def collect(path: Path, outcome: GitObject | ObjectError, current: int) -> None:
        if isinstance(outcome, ObjectError):
            logger.warning("Failed to load %s: %s", path, outcome.message)
            failures.append(outcome)
        elif outcome.identifier in objects:
            kept = objects[outcome.identifier].path
            logger.warning("Duplicate object %s at %s, keeping %s", outcome.identifier, path, kept)
            failures.append(
                ObjectError(
                    outcome.identifier,
                    ErrorKind.DUPLICATE_OBJECT,
                    f"Also stored at {kept}",
                    path,
                )
            )
        else:
            objects[outcome.identifier] = outcome
        if on_progress:
            on_progress(path, current, total)

    if workers > 1 and total > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = pool.map(lambda p: _load_one(p, decompress), path_list)
            for i, (path, outcome) in enumerate(zip(path_list, outcomes), start=1):
                collect(path, outcome, i)
    else:
        for i, path in enumerate(path_list, start=1):
            collect(path, _load_one(path, decompress), i)

    logger.info("Loaded %d objects, %d failed", len(objects), len(failures))
    return LoadResult.freeze(objects, failures)
