"""Key-value engine versions and the per-mount version lookup."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from loguru import logger

__all__ = ["EngineVersion", "EngineVersionMap", "EngineVersionResolver", "mount_prefix"]


class EngineVersion(str, Enum):
    V1 = "1"
    V2 = "2"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "EngineVersion":
        """Map a version as reported by the mount listing (``"2"``, ``1``...)."""

        if value is None or isinstance(value, bool):
            return cls.UNKNOWN
        text = str(value).strip()
        if text == "1":
            return cls.V1
        if text == "2":
            return cls.V2
        return cls.UNKNOWN

    @property
    def is_v2(self) -> bool:
        return self is EngineVersion.V2


def mount_prefix(path: str, prefix_depth: int = 1) -> str:
    """Return the cache key for ``path``: its first segments plus a trailing slash."""

    segments = [segment for segment in path.split("/") if segment]
    return "/".join(segments[:prefix_depth]) + "/"


class EngineVersionMap(Mapping[str, EngineVersion]):
    """Immutable mapping of mount prefix (``secret/``) to engine version.

    ``default`` is the global fallback used for prefixes that are not listed.
    Without one, unknown prefixes resolve to :attr:`EngineVersion.UNKNOWN`.
    """

    def __init__(
        self,
        entries: Optional[Mapping[str, Any]] = None,
        default: Optional[EngineVersion] = None,
    ) -> None:
        normalised: Dict[str, EngineVersion] = {}
        for prefix, version in (entries or {}).items():
            key = prefix if prefix.endswith("/") else f"{prefix}/"
            normalised[key.lstrip("/")] = (
                version if isinstance(version, EngineVersion) else EngineVersion.parse(version)
            )
        self._entries = MappingProxyType(normalised)
        self.default = default

    def __getitem__(self, key: str) -> EngineVersion:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"EngineVersionMap({dict(self._entries)!r}, default={self.default!r})"


class EngineVersionResolver:
    """Pure lookup of the engine version backing a logical path."""

    def __init__(self, versions: EngineVersionMap, prefix_depth: int = 1) -> None:
        if prefix_depth < 1:
            raise ValueError("prefix_depth must be 1 or greater")
        self.versions = versions
        self.prefix_depth = prefix_depth

    def resolve(self, path: str) -> EngineVersion:
        prefix = mount_prefix(path, self.prefix_depth)
        version = self.versions.get(prefix)
        if version is not None:
            return version
        if self.versions.default is not None:
            return self.versions.default
        logger.debug("No engine version known for mount {}", prefix)
        return EngineVersion.UNKNOWN
