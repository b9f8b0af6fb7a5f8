"""
Object body decoders.

Each decoder is a pure function over bytes:
    - parse_header(): ``<type> <size>\\0`` prefix of a decompressed object
    - decode_tree(): tree body into ordered TreeEntry values
    - decode_commit(): commit body into its tree and parents
"""

from gitgraph.core.decoding.commit import decode_commit
from gitgraph.core.decoding.header import Header, parse_header, parse_size
from gitgraph.core.decoding.tree import HASH_LENGTH, decode_tree

__all__ = [
    "HASH_LENGTH",
    "Header",
    "decode_commit",
    "decode_tree",
    "parse_header",
    "parse_size",
]
