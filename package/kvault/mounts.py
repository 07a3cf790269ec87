"""Discovery of the engine version behind each secrets mount."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from loguru import logger

from .engine import EngineVersion, EngineVersionMap
from .executor import RequestExecutor

__all__ = ["MOUNTS_PATH", "parse_mount_versions", "collect_engine_versions"]

MOUNTS_PATH = "sys/mounts"


def parse_mount_versions(payload: Mapping[str, Any]) -> Dict[str, EngineVersion]:
    """Read ``options.version`` of every mount in a ``sys/mounts`` payload.

    Recent servers nest the mounts under ``data`` and repeat them at the top
    level; older ones only have the top level.
    """

    mounts = payload.get("data")
    if not isinstance(mounts, Mapping):
        mounts = payload

    versions: Dict[str, EngineVersion] = {}
    for name, mount in mounts.items():
        if not isinstance(mount, Mapping) or "type" not in mount:
            continue
        options = mount.get("options")
        version = options.get("version") if isinstance(options, Mapping) else None
        versions[name] = EngineVersion.parse(version)
    return versions


async def collect_engine_versions(
    executor: RequestExecutor,
    default: Optional[EngineVersion] = None,
) -> EngineVersionMap:
    """Query the mount listing once and freeze it into an :class:`EngineVersionMap`."""

    raw = await executor.execute("GET", MOUNTS_PATH)
    versions = parse_mount_versions(raw.json or {})
    logger.info("Discovered engine versions for {} mounts", len(versions))
    return EngineVersionMap(versions, default=default)
