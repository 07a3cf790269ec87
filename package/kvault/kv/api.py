"""Low level calls against the key-value endpoints of Vault."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..engine import EngineVersion, mount_prefix
from ..errors import VaultUsageError
from ..executor import RawResponse, RequestExecutor
from ..paths import Operation, PathAdapter

__all__ = ["KVAPI", "build_write_body", "check_versions"]

_JSON_NATIVE = (str, bool, int, float, dict, list)


def _to_json_value(value: Any) -> Any:
    if value is None or isinstance(value, _JSON_NATIVE):
        return value
    return str(value)


def build_write_body(
    data: Optional[Mapping[str, Any]],
    engine_version: EngineVersion,
) -> Dict[str, Any]:
    """Build the JSON body of a write; version 2 engines expect it under ``data``."""

    body = {key: _to_json_value(value) for key, value in (data or {}).items()}
    return {"data": body} if engine_version.is_v2 else body


def check_versions(versions: Iterable[int]) -> List[int]:
    checked = sorted(versions)
    if not checked:
        raise VaultUsageError("At least one secret version is required.")
    if any(version < 1 for version in checked):
        raise VaultUsageError("The secret version must be 1 or greater.")
    return checked


class KVAPI:
    """Build and send the request of each key-value operation."""

    def __init__(self, executor: RequestExecutor, adapter: PathAdapter) -> None:
        self.executor = executor
        self.adapter = adapter

    async def read_secret(
        self,
        path: str,
        version: Optional[int] = None,
        namespace: Optional[str] = None,
    ) -> RawResponse:
        wire_path = self.adapter.adjust(path, Operation.READ, version=version)
        return await self.executor.execute("GET", wire_path, namespace=namespace)

    async def write_secret(
        self,
        path: str,
        data: Optional[Mapping[str, Any]],
        namespace: Optional[str] = None,
    ) -> RawResponse:
        wire_path = self.adapter.adjust(path, Operation.WRITE)
        body = build_write_body(data, self.adapter.resolver.resolve(path))
        return await self.executor.execute(
            "POST",
            wire_path,
            body=body,
            expected=(200, 204),
            namespace=namespace,
        )

    async def list_secrets(self, path: str, namespace: Optional[str] = None) -> RawResponse:
        wire_path = self.adapter.adjust(path, Operation.LIST)
        return await self.executor.execute(
            "GET",
            wire_path,
            allow_not_found=True,
            namespace=namespace,
        )

    async def delete_secret(self, path: str, namespace: Optional[str] = None) -> RawResponse:
        wire_path = self.adapter.adjust(path, Operation.DELETE)
        return await self.executor.execute(
            "DELETE",
            wire_path,
            expected=(204,),
            namespace=namespace,
        )

    async def change_versions(
        self,
        path: str,
        operation: Operation,
        versions: Iterable[int],
        namespace: Optional[str] = None,
    ) -> RawResponse:
        """Soft delete, undelete or destroy specific versions of a secret."""

        if not operation.is_versioned:
            raise VaultUsageError(f"{operation.value} does not target secret versions")
        wire_path = self.adapter.adjust(path, operation)
        return await self.executor.execute(
            "POST",
            wire_path,
            body={"versions": check_versions(versions)},
            expected=(204,),
            namespace=namespace,
        )

    async def tune_to_version_2(self, path: str, namespace: Optional[str] = None) -> RawResponse:
        mount = mount_prefix(path, self.adapter.prefix_depth).rstrip("/")
        return await self.executor.execute(
            "POST",
            f"sys/mounts/{mount}/tune",
            body={"options": {"version": 2}},
            expected=(200, 204),
            namespace=namespace,
        )
