"""Shared HTTP client utilities used by the Vault client."""

from __future__ import annotations

import ssl
from typing import Any, Dict, Optional, Union

import httpx


class BaseAPI:
    """Small asynchronous wrapper around :class:`httpx.AsyncClient`.

    Each request opens a short lived client instance to avoid sharing state
    across coroutines.  The helper centralises the base URL, default headers,
    TLS policy and the connect/read timeouts used by the request executor.
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        open_timeout: Optional[float] = 10.0,
        read_timeout: Optional[float] = 30.0,
        verify: Union[bool, ssl.SSLContext] = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.timeout = httpx.Timeout(read_timeout, connect=open_timeout)
        self.verify = verify
        self.transport = transport

    async def request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Dispatch a request and return the raw :class:`httpx.Response`."""

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        merged_headers = {**self.headers, **(headers or {})}

        async with httpx.AsyncClient(
            headers=merged_headers,
            timeout=self.timeout,
            verify=self.verify,
            transport=self.transport,
        ) as client:
            response = await client.request(
                method=method.upper(),
                url=url,
                json=json,
            )
        return response

    async def get(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", endpoint, **kwargs)
