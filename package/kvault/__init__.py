"""Public interface for the :mod:`kvault` package."""

from .client import Vault
from .engine import EngineVersion, EngineVersionMap, EngineVersionResolver
from .errors import (
    ExternalServiceError,
    SettingsError,
    VaultError,
    VaultUsageError,
)
from .executor import RawResponse, RequestExecutor
from .kv import KV
from .logger import setup_logging
from .models import SecretMetadata, SecretResponse
from .parser import ResponseParser
from .paths import Operation, PathAdapter, WirePath, adjust_path, strip_qualifier
from .retry import RetryPolicy
from .settings import VaultSettings, load_settings

__all__ = [
    "Vault",
    "KV",
    "EngineVersion",
    "EngineVersionMap",
    "EngineVersionResolver",
    "Operation",
    "PathAdapter",
    "WirePath",
    "adjust_path",
    "strip_qualifier",
    "RequestExecutor",
    "RawResponse",
    "RetryPolicy",
    "ResponseParser",
    "SecretResponse",
    "SecretMetadata",
    "VaultSettings",
    "load_settings",
    "setup_logging",
    "ExternalServiceError",
    "VaultError",
    "VaultUsageError",
    "SettingsError",
]
