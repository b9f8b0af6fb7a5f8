"""
Core module: data models, exceptions, decoding, loading and storage.

This module provides the foundational types and the read path:

Models (models.py):
    - GitObject: A loose object with its header parsed and raw content
    - TreeEntry / Commit: Decoded tree and commit bodies
    - ObjectError / LoadResult: Per-object failures and the frozen load outcome
    - ObjectKind/ErrorKind: Enums for categorization

Exceptions (exceptions.py):
    - GitGraphError: Base exception for all gitgraph errors
    - ObjectDecodeError: Header, decompression, tree or commit decoding failed
    - ObjectNotFoundError: Requested object doesn't exist

Loading (loader.py, discovery.py):
    - load_object() / load_objects(): Decompress and header-parse loose objects
    - iter_object_paths(): Find loose object files under objects/

Storage (storage/):
    - GraphRepository: Facade for the SQLite export
"""

from gitgraph.core.exceptions import (
    CorruptObjectError,
    GitGraphError,
    MalformedCommitError,
    MalformedHeaderError,
    MalformedTreeError,
    ObjectDecodeError,
    ObjectNotFoundError,
    RepositoryNotFoundError,
    TruncatedTreeError,
)
from gitgraph.core.loader import load_object, load_objects
from gitgraph.core.models import (
    Commit,
    ErrorKind,
    GitObject,
    LoadResult,
    ObjectError,
    ObjectKind,
    TreeEntry,
)
from gitgraph.core.storage import GraphRepository, get_default_db_path

__all__ = [
    # Models
    "GitObject",
    "TreeEntry",
    "Commit",
    "ObjectError",
    "LoadResult",
    "ObjectKind",
    "ErrorKind",
    # Exceptions
    "GitGraphError",
    "ObjectDecodeError",
    "MalformedHeaderError",
    "CorruptObjectError",
    "MalformedTreeError",
    "TruncatedTreeError",
    "MalformedCommitError",
    "ObjectNotFoundError",
    "RepositoryNotFoundError",
    # Loading
    "load_object",
    "load_objects",
    # Storage
    "GraphRepository",
    "get_default_db_path",
]
