"""In-memory keyspace: storage areas, value kinds and container algorithms."""

from .cursor import index_range, scan_page
from .pattern import compile_pattern, match
from .store import DEFAULT_STORAGE, StorageArea, StorageRegistry
from .values import ValueKind

__all__ = [
    "DEFAULT_STORAGE",
    "StorageArea",
    "StorageRegistry",
    "ValueKind",
    "compile_pattern",
    "index_range",
    "match",
    "scan_page",
]
