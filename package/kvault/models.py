"""Pydantic models for the Vault key-value responses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["SecretEnvelope", "KvV2Payload", "SecretMetadata", "SecretResponse"]


class SecretEnvelope(BaseModel):
    """Top level of every logical response.  Absent lease fields stay ``None``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    lease_id: Optional[str] = None
    renewable: Optional[bool] = None
    lease_duration: Optional[int] = None
    data: Optional[Dict[str, Any]] = None


class SecretMetadata(BaseModel):
    """Version information that a version 2 engine returns next to the data."""

    model_config = ConfigDict(extra="allow", frozen=True)

    version: Optional[int] = None
    created_time: Optional[str] = None
    deletion_time: Optional[str] = None
    destroyed: Optional[bool] = None
    custom_metadata: Optional[Dict[str, Any]] = None


class KvV2Payload(BaseModel):
    """The ``data`` member of a version 2 read: the secret plus its metadata."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    data: Optional[Dict[str, Any]] = None
    metadata: Optional[SecretMetadata] = None


class SecretResponse(BaseModel):
    """Uniform result of a logical operation.

    ``found`` is ``False`` only for a listing of a path that does not exist,
    which the service reports as a 404.
    """

    lease_id: Optional[str] = None
    renewable: Optional[bool] = None
    lease_duration: Optional[int] = None
    data: Dict[str, str] = Field(default_factory=dict)
    data_object: Optional[Dict[str, Any]] = None
    metadata: Optional[SecretMetadata] = None
    keys: List[str] = Field(default_factory=list)
    status_code: int = 200
    body: str = ""
    retries: int = 0
    found: bool = True

    @property
    def version(self) -> Optional[int]:
        return self.metadata.version if self.metadata else None
