"""Issue Vault HTTP requests with a fixed retry policy."""

from __future__ import annotations

import asyncio
import json
import ssl
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Collection, Dict, Optional, Union

import httpx
from loguru import logger

from .base import BaseAPI
from .errors import VaultError
from .paths import WirePath
from .retry import RetryPolicy, retry

__all__ = ["RawResponse", "RequestExecutor", "JSON_MEDIA_TYPE"]

JSON_MEDIA_TYPE = "application/json"

_RETRYABLE = (httpx.HTTPError, json.JSONDecodeError, UnicodeDecodeError, VaultError)


@dataclass(frozen=True)
class RawResponse:
    """An accepted HTTP response, before any interpretation of its payload."""

    status_code: int
    content_type: Optional[str]
    body: bytes
    json: Optional[Dict[str, Any]] = None
    retries: int = 0

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def media_type(self) -> Optional[str]:
        if not self.content_type:
            return None
        return self.content_type.split(";", 1)[0].strip().lower()


def _safe_json(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _status_error(response: httpx.Response) -> VaultError:
    errors = _safe_json(response).get("errors") or []
    detail = f"Vault responded with HTTP status code: {response.status_code}"
    if errors:
        detail += f". Vault message: {errors}"
    return VaultError(status_code=response.status_code, detail=detail, errors=errors)


def _accept(response: httpx.Response, expect_json: bool) -> RawResponse:
    content_type = response.headers.get("content-type")
    raw = RawResponse(
        status_code=response.status_code,
        content_type=content_type,
        body=response.content,
    )
    if not response.content or not expect_json:
        return raw

    if raw.media_type != JSON_MEDIA_TYPE:
        raise VaultError(
            status_code=response.status_code,
            detail=f"Vault responded with MIME type: {content_type}",
        )
    payload = json.loads(response.content)
    if not isinstance(payload, dict):
        raise VaultError(
            status_code=response.status_code,
            detail="Vault responded with a JSON body that is not an object",
        )
    return replace(raw, json=payload)


def _build_verify(ssl_verify: bool, ssl_cert: Optional[str]) -> Union[bool, ssl.SSLContext]:
    if not ssl_verify:
        return False
    if ssl_cert:
        return ssl.create_default_context(cafile=ssl_cert)
    return True


class RequestExecutor:
    """Send one logical request to Vault, retrying it as the policy allows.

    A 404 is accepted as a normal response, and never retried, when the
    caller passes ``allow_not_found``; listing a missing path relies on it.
    """

    def __init__(
        self,
        address: str,
        token: str,
        namespace: Optional[str] = None,
        policy: Optional[RetryPolicy] = None,
        open_timeout: Optional[float] = 10.0,
        read_timeout: Optional[float] = 30.0,
        ssl_verify: bool = True,
        ssl_cert: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        headers = {"X-Vault-Token": token, "X-Vault-Request": "true"}
        if namespace:
            headers["X-Vault-Namespace"] = namespace
        self.api = BaseAPI(
            address,
            headers=headers,
            open_timeout=open_timeout,
            read_timeout=read_timeout,
            verify=_build_verify(ssl_verify, ssl_cert),
            transport=transport,
        )
        self.address = self.api.base_url
        self.namespace = namespace
        self.policy = policy or RetryPolicy()
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "RequestExecutor":
        return cls(
            settings.ADDR,
            settings.TOKEN,
            namespace=settings.NAMESPACE,
            policy=RetryPolicy.from_milliseconds(settings.MAX_RETRIES, settings.RETRY_INTERVAL_MS),
            open_timeout=settings.OPEN_TIMEOUT,
            read_timeout=settings.READ_TIMEOUT,
            ssl_verify=settings.SSL_VERIFY,
            ssl_cert=settings.SSL_CERT,
            transport=transport,
        )

    async def execute(
        self,
        method: str,
        wire_path: Union[WirePath, str],
        body: Optional[Dict[str, Any]] = None,
        expected: Collection[int] = (200,),
        allow_not_found: bool = False,
        expect_json: bool = True,
        namespace: Optional[str] = None,
        policy: Optional[RetryPolicy] = None,
    ) -> RawResponse:
        endpoint = f"/v1/{str(wire_path).lstrip('/')}"
        headers = {"X-Vault-Namespace": namespace} if namespace else None
        last_status: Optional[int] = None

        async def attempt(number: int) -> RawResponse:
            nonlocal last_status
            logger.debug("{} {} (attempt {})", method.upper(), endpoint, number + 1)
            last_status = None
            response = await self.api.request(method, endpoint, json=body, headers=headers)
            last_status = response.status_code
            if allow_not_found and response.status_code == 404:
                return RawResponse(
                    status_code=404,
                    content_type=response.headers.get("content-type"),
                    body=response.content,
                    json=_safe_json(response) or None,
                )
            if response.status_code not in expected:
                raise _status_error(response)
            return _accept(response, expect_json)

        try:
            result = await retry(
                attempt,
                policy or self.policy,
                retry_on=_RETRYABLE,
                sleep=self.sleep,
            )
        except VaultError as exc:
            logger.error("Vault request {} {} failed: {}", method.upper(), endpoint, exc)
            raise
        except _RETRYABLE as exc:
            logger.error("Vault request {} {} failed: {}", method.upper(), endpoint, exc)
            raise VaultError(
                status_code=last_status,
                detail=f"Vault request failed: {exc}",
            ) from exc

        return replace(result.value, retries=result.retries)
