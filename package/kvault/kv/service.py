"""High level key-value operations returning :class:`SecretResponse` objects."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from loguru import logger

from ..engine import EngineVersion
from ..errors import VaultUsageError
from ..executor import RequestExecutor
from ..models import SecretResponse
from ..parser import ResponseParser
from ..paths import Operation, PathAdapter
from .api import KVAPI

__all__ = ["KV"]


class KV:
    """Higher level wrapper around :class:`KVAPI`.

    Every method resolves the engine version of the path's mount, lets the
    API layer send the adapted request and parses the accepted response.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        adapter: PathAdapter,
        namespace: Optional[str] = None,
        parser: Optional[ResponseParser] = None,
    ) -> None:
        self.api = KVAPI(executor, adapter)
        self.adapter = adapter
        self.namespace = namespace
        self.parser = parser or ResponseParser()
        self.logger = logger

    def with_namespace(self, namespace: str) -> "KV":
        """Return a copy that sends ``namespace`` instead of the client default."""

        return KV(self.api.executor, self.adapter, namespace=namespace, parser=self.parser)

    def engine_version(self, path: str) -> EngineVersion:
        return self.adapter.resolver.resolve(path)

    async def read(self, path: str, version: Optional[int] = None) -> SecretResponse:
        self.logger.debug("Reading secret at {}", path)
        raw = await self.api.read_secret(path, version=version, namespace=self.namespace)
        return self.parser.parse(raw, self.engine_version(path), Operation.READ)

    async def write(self, path: str, data: Optional[Mapping[str, Any]]) -> SecretResponse:
        self.logger.debug("Writing secret at {}", path)
        raw = await self.api.write_secret(path, data, namespace=self.namespace)
        return self.parser.parse(raw, self.engine_version(path), Operation.WRITE)

    async def list(self, path: str) -> SecretResponse:
        self.logger.debug("Listing secrets under {}", path)
        raw = await self.api.list_secrets(path, namespace=self.namespace)
        response = self.parser.parse(raw, self.engine_version(path), Operation.LIST)
        if not response.found:
            self.logger.debug("Nothing to list under {}", path)
        return response

    async def list_keys(self, path: str) -> List[str]:
        return (await self.list(path)).keys

    async def delete(self, path: str) -> SecretResponse:
        self.logger.debug("Deleting secret at {}", path)
        raw = await self.api.delete_secret(path, namespace=self.namespace)
        return self.parser.parse(raw, self.engine_version(path), Operation.DELETE)

    async def delete_versions(self, path: str, versions: Iterable[int]) -> SecretResponse:
        return await self._change_versions(path, Operation.VERSION_DELETE, versions)

    async def undelete_versions(self, path: str, versions: Iterable[int]) -> SecretResponse:
        return await self._change_versions(path, Operation.VERSION_UNDELETE, versions)

    async def destroy_versions(self, path: str, versions: Iterable[int]) -> SecretResponse:
        return await self._change_versions(path, Operation.VERSION_DESTROY, versions)

    async def upgrade(self, path: str) -> SecretResponse:
        """Upgrade the mount holding ``path`` to a version 2 engine.

        There is no way back to version 1.  The new version is only picked up
        by clients created after the upgrade.
        """

        if self.engine_version(path).is_v2:
            raise VaultUsageError(f"The engine mounted at {path!r} is already version 2.")
        self.logger.info("Upgrading the engine mounted at {} to version 2", path)
        raw = await self.api.tune_to_version_2(path, namespace=self.namespace)
        return self.parser.parse(raw, EngineVersion.UNKNOWN, Operation.WRITE)

    async def _change_versions(
        self,
        path: str,
        operation: Operation,
        versions: Iterable[int],
    ) -> SecretResponse:
        versions = list(versions)
        self.logger.debug("{} of versions {} at {}", operation.value, versions, path)
        raw = await self.api.change_versions(path, operation, versions, namespace=self.namespace)
        return self.parser.parse(raw, self.engine_version(path), operation)
