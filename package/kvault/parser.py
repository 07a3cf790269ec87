"""Turn accepted Vault responses into :class:`~kvault.models.SecretResponse`."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from .engine import EngineVersion
from .errors import VaultError
from .executor import JSON_MEDIA_TYPE, RawResponse
from .models import KvV2Payload, SecretEnvelope, SecretMetadata, SecretResponse
from .paths import Operation

__all__ = ["ResponseParser", "flatten_data", "parse_response"]


def flatten_data(data: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Flatten a JSON object into a string map.

    Nulls are dropped, strings are copied and every other value is kept as
    its compact JSON text so that structured values survive a round trip.
    """

    flat: Dict[str, str] = {}
    for key, value in (data or {}).items():
        if value is None:
            continue
        if isinstance(value, str):
            flat[key] = value
        else:
            flat[key] = json.dumps(value, separators=(",", ":"))
    return flat


def _decode(raw: RawResponse) -> Dict[str, Any]:
    if raw.json is not None:
        return raw.json
    if raw.media_type != JSON_MEDIA_TYPE:
        raise VaultError(
            status_code=raw.status_code,
            detail=f"Vault responded with MIME type: {raw.content_type}",
        )
    try:
        payload = json.loads(raw.body)
    except ValueError as exc:
        raise VaultError(
            status_code=raw.status_code,
            detail=f"Vault response body could not be decoded: {exc}",
        ) from exc
    if not isinstance(payload, dict):
        raise VaultError(
            status_code=raw.status_code,
            detail="Vault responded with a JSON body that is not an object",
        )
    return payload


def parse_response(
    raw: RawResponse,
    engine_version: EngineVersion,
    operation: Operation = Operation.READ,
) -> SecretResponse:
    common = {"status_code": raw.status_code, "body": raw.text, "retries": raw.retries}

    if raw.status_code == 404 and operation is Operation.LIST:
        return SecretResponse(found=False, **common)
    if raw.status_code == 204 or not raw.body:
        return SecretResponse(**common)

    payload = _decode(raw)
    try:
        envelope = SecretEnvelope.model_validate(payload)
        data_object = envelope.data
        metadata: Optional[SecretMetadata] = None
        if engine_version.is_v2 and operation is Operation.READ and data_object is not None:
            nested = KvV2Payload.model_validate(data_object)
            data_object = nested.data
            metadata = nested.metadata
        elif engine_version.is_v2 and operation is Operation.WRITE and data_object is not None:
            metadata = SecretMetadata.model_validate(data_object)
    except ValidationError as exc:
        raise VaultError(
            status_code=raw.status_code,
            detail=f"Vault response did not match the expected shape: {exc}",
        ) from exc

    keys = []
    if operation is Operation.LIST and data_object:
        keys = [str(key) for key in data_object.get("keys") or []]

    return SecretResponse(
        lease_id=envelope.lease_id,
        renewable=envelope.renewable,
        lease_duration=envelope.lease_duration,
        data=flatten_data(data_object),
        data_object=data_object,
        metadata=metadata,
        keys=keys,
        **common,
    )


class ResponseParser:
    """Callable facade over :func:`parse_response` for endpoint wrappers."""

    def parse(
        self,
        raw: RawResponse,
        engine_version: EngineVersion,
        operation: Operation = Operation.READ,
    ) -> SecretResponse:
        return parse_response(raw, engine_version, operation)
