"""Translation of logical secret paths into the paths sent over the wire.

A version 1 engine uses the same path for every operation.  A version 2
engine expects a qualifier right after the mount prefix, which depends on
the operation: ``secret/app/db`` is read from ``secret/data/app/db`` and
listed through ``secret/metadata/app/db?list=true``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .engine import EngineVersion, EngineVersionResolver
from .errors import VaultUsageError

__all__ = [
    "Operation",
    "WirePath",
    "PathAdapter",
    "adjust_path",
    "split_path",
    "strip_qualifier",
]

LIST_QUERY = "list=true"


class Operation(str, Enum):
    READ = "read"
    WRITE = "write"
    LIST = "list"
    DELETE = "delete"
    VERSION_DELETE = "version_delete"
    VERSION_UNDELETE = "version_undelete"
    VERSION_DESTROY = "version_destroy"

    @property
    def qualifier(self) -> str:
        return _QUALIFIERS[self]

    @property
    def is_versioned(self) -> bool:
        return self in _VERSIONED


_QUALIFIERS = {
    Operation.READ: "data",
    Operation.WRITE: "data",
    Operation.LIST: "metadata",
    Operation.DELETE: "metadata",
    Operation.VERSION_DELETE: "delete",
    Operation.VERSION_UNDELETE: "undelete",
    Operation.VERSION_DESTROY: "destroy",
}

_VERSIONED = frozenset(
    {Operation.VERSION_DELETE, Operation.VERSION_UNDELETE, Operation.VERSION_DESTROY}
)


@dataclass(frozen=True)
class WirePath:
    path: str
    query: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path


def split_path(path: str) -> Tuple[List[str], bool]:
    """Split ``path`` into its non-empty segments and report a trailing slash."""

    if not path or not path.strip("/"):
        raise VaultUsageError(f"A secret path needs at least one segment, got {path!r}")
    segments = [segment for segment in path.split("/") if segment]
    return segments, path.endswith("/")


def _join(segments: List[str], trailing_slash: bool) -> str:
    joined = "/".join(segments)
    return f"{joined}/" if trailing_slash else joined


def adjust_path(
    path: str,
    operation: Operation,
    engine_version: EngineVersion,
    prefix_depth: int = 1,
    version: Optional[int] = None,
) -> WirePath:
    """Compute the wire path for ``operation`` on ``path``."""

    segments, trailing_slash = split_path(path)

    if version is not None:
        if operation is not Operation.READ:
            raise VaultUsageError(f"A version can only be given for reads, not {operation.value}")
        if version < 1:
            raise VaultUsageError("The secret version must be 1 or greater.")

    if not engine_version.is_v2:
        if operation.is_versioned or version is not None:
            raise VaultUsageError(
                f"{operation.value} with a version is only supported by version 2 engines "
                f"(mount of {path!r} is {engine_version.value})"
            )
        query = LIST_QUERY if operation is Operation.LIST else None
        return WirePath(path, query)

    adjusted = segments[:prefix_depth] + [operation.qualifier] + segments[prefix_depth:]
    if operation is Operation.LIST:
        query = LIST_QUERY
    elif version is not None:
        query = f"version={version}"
    else:
        query = None
    return WirePath(_join(adjusted, trailing_slash), query)


def strip_qualifier(wire_path: WirePath, operation: Operation, prefix_depth: int = 1) -> str:
    """Recover the logical path from a version 2 wire path."""

    segments, trailing_slash = split_path(wire_path.path)
    if len(segments) <= prefix_depth or segments[prefix_depth] != operation.qualifier:
        raise VaultUsageError(
            f"{wire_path.path!r} has no {operation.qualifier!r} qualifier at depth {prefix_depth}"
        )
    del segments[prefix_depth]
    return _join(segments, trailing_slash)


class PathAdapter:
    """Bind :func:`adjust_path` to the engine versions known by a client."""

    def __init__(self, resolver: EngineVersionResolver) -> None:
        self.resolver = resolver

    @property
    def prefix_depth(self) -> int:
        return self.resolver.prefix_depth

    def adjust(
        self,
        path: str,
        operation: Operation,
        version: Optional[int] = None,
    ) -> WirePath:
        engine_version = self.resolver.resolve(path)
        return adjust_path(path, operation, engine_version, self.prefix_depth, version)
