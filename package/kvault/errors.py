"""Common error hierarchy used by the Vault client."""

from __future__ import annotations

from typing import Any, List, Optional


class ExternalServiceError(Exception):
    """Base exception raised when a remote system responds with an error."""

    def __init__(
        self,
        service_name: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> None:
        self.service_name = service_name
        self.status_code = status_code
        self.detail = detail or ""
        message = detail or f"Request to {service_name} failed."
        super().__init__(message)


class VaultError(ExternalServiceError):
    """Terminal failure of a Vault call.

    ``status_code`` is the last HTTP status observed, or ``None`` when the
    request never got a response (connection refused, timeout, TLS failure).
    ``errors`` holds the service's own error messages when it sent any.
    """

    def __init__(
        self,
        status_code: Optional[int],
        detail: str,
        errors: Optional[List[Any]] = None,
    ) -> None:
        super().__init__(service_name="Vault", status_code=status_code, detail=detail)
        self.errors = list(errors or [])


class VaultUsageError(ValueError):
    """Raised immediately, without any request, when the caller misuses the API."""


class SettingsError(VaultUsageError):
    """Raised when the client configuration is incomplete or invalid."""


__all__ = ["ExternalServiceError", "VaultError", "VaultUsageError", "SettingsError"]
