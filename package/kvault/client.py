"""Entry point tying settings, engine versions and the request executor together."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

import httpx
from loguru import logger

from .engine import EngineVersion, EngineVersionMap, EngineVersionResolver
from .executor import RequestExecutor
from .kv import KV
from .mounts import MOUNTS_PATH, collect_engine_versions, parse_mount_versions
from .parser import ResponseParser
from .paths import PathAdapter
from .retry import RetryPolicy
from .settings import VaultSettings, load_settings

__all__ = ["Vault"]


class Vault:
    """Client for one Vault server.

    The engine version of every mount is fixed when the client is built.
    Create a new client to pick up mounts added or upgraded later on.
    """

    def __init__(
        self,
        settings: VaultSettings,
        engine_versions: Optional[EngineVersionMap] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings.require_credentials()
        self.settings = settings
        self.executor = RequestExecutor.from_settings(settings, transport=transport)
        if engine_versions is None:
            engine_versions = EngineVersionMap(default=settings.ENGINE_VERSION)
        self.engine_versions = engine_versions
        self.resolver = EngineVersionResolver(self.engine_versions, settings.PREFIX_PATH_DEPTH)
        self.adapter = PathAdapter(self.resolver)
        self.parser = ResponseParser()
        self.logger = logger
        if settings.NAMESPACE:
            self.logger.info(
                "The namespace {} is bound to this Vault client and sent with every request.",
                settings.NAMESPACE,
            )

    @staticmethod
    def get_logger():
        """Return the shared loguru logger used by the client."""

        return logger

    @classmethod
    async def create(
        cls,
        settings: Optional[VaultSettings] = None,
        engine_versions: Optional[Mapping[str, object]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "Vault":
        """Build a client, discovering the mount engine versions when needed.

        Explicit ``engine_versions`` skip the discovery.  Otherwise the mount
        listing is queried when ``USE_ENGINE_PATH_MAP`` is on.  With neither,
        mounts resolve to ``ENGINE_VERSION``, or behave as version 1.
        """

        settings = settings or load_settings()
        default = settings.ENGINE_VERSION
        if engine_versions is not None:
            versions = EngineVersionMap(engine_versions, default=default)
        elif settings.USE_ENGINE_PATH_MAP:
            executor = RequestExecutor.from_settings(settings, transport=transport)
            logger.info("No engine version map was supplied, querying {}", MOUNTS_PATH)
            versions = await collect_engine_versions(executor, default=default)
        else:
            versions = EngineVersionMap(default=default)
        return cls(settings, engine_versions=versions, transport=transport)

    def with_retries(self, max_retries: int, retry_interval_ms: int) -> "Vault":
        self.executor.policy = RetryPolicy.from_milliseconds(max_retries, retry_interval_ms)
        return self

    def kv(self) -> KV:
        return KV(self.executor, self.adapter, parser=self.parser)

    def engine_version(self, path: str) -> EngineVersion:
        return self.resolver.resolve(path)

    async def secret_engine_versions(self) -> Dict[str, EngineVersion]:
        """Query the current mount versions without touching the cached map."""

        raw = await self.executor.execute("GET", MOUNTS_PATH)
        return parse_mount_versions(raw.json or {})
