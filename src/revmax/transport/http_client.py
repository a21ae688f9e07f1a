"""
HTTP transport using aiohttp.

Provides the single network capability the request executor depends on:
issue one HTTP call and either return the decoded response or raise a
TransportFailure describing what went wrong. No retry, auth or telemetry
logic lives here.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp


@dataclass
class TransportResponse:
    """Successful HTTP response with decoded body."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


class TransportFailure(Exception):
    """
    Failed HTTP call.

    ``status_code`` is None when no response was received at all (connection
    refused, DNS failure, timeout). Otherwise the response headers and decoded
    body are attached for classification.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
        body: Any = None,
        url: str | None = None,
        method: str | None = None,
        request_headers: dict[str, str] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.headers = headers or {}
        self.body = body
        self.url = url
        self.method = method
        self.request_headers = request_headers or {}
        self.cause = cause

    @property
    def has_response(self) -> bool:
        return self.status_code is not None

    def get_header(self, name: str) -> str | None:
        """Case-insensitive response header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


class Transport(Protocol):
    """Protocol for HTTP transports used by the request executor."""

    async def call(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any = None,
        params: dict[str, Any] | None = None,
        timeout: float = 30.0,
    ) -> TransportResponse:
        """
        Issue one HTTP call.

        Args:
            method: HTTP method (GET, POST, ...)
            url: Absolute request URL
            headers: Outbound headers
            body: JSON-serializable request body
            params: Query parameters
            timeout: Total timeout in seconds

        Returns:
            TransportResponse for 2xx/3xx responses

        Raises:
            TransportFailure: On error status or network failure
        """
        ...

    async def close(self) -> None:
        ...


def _decode_body(raw: bytes) -> Any:
    if not raw:
        return None
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


def _clean_params(params: dict[str, Any] | None) -> dict[str, str] | None:
    """aiohttp rejects None and bool query values; drop/stringify them."""
    if not params:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


def create_session(
    max_connections: int = 100,
    max_connections_per_host: int = 10,
    enable_ssl: bool = True,
    timeout_total: int = 300,
    timeout_connect: int = 30,
) -> aiohttp.ClientSession:
    """
    Create aiohttp ClientSession with pooled connections and timeouts.

    Per-call timeouts passed to AiohttpTransport.call override ``timeout_total``.

    Args:
        max_connections: Total connection pool size (default: 100)
        max_connections_per_host: Per-host connection limit (default: 10)
        enable_ssl: Enable SSL verification (default: True)
        timeout_total: Total timeout in seconds (default: 300)
        timeout_connect: Connection timeout in seconds (default: 30)

    Returns:
        Configured aiohttp.ClientSession
    """
    connector = aiohttp.TCPConnector(
        limit=max_connections,
        limit_per_host=max_connections_per_host,
        ssl=enable_ssl,
        ttl_dns_cache=300,
        enable_cleanup_closed=True,
    )

    timeout = aiohttp.ClientTimeout(
        total=timeout_total,
        connect=timeout_connect,
    )

    return aiohttp.ClientSession(connector=connector, timeout=timeout)


class AiohttpTransport:
    """
    Default transport backed by a lazily created aiohttp ClientSession.

    The session is created on first use so the transport can be constructed
    outside a running event loop.

    Usage:
        async with AiohttpTransport() as transport:
            response = await transport.call("GET", url, headers)
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        logger: logging.Logger | None = None,
    ):
        self._session = session
        self._owns_session = session is None
        self.logger = logger or logging.getLogger(__name__)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = create_session()
            self._owns_session = True
        return self._session

    async def call(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any = None,
        params: dict[str, Any] | None = None,
        timeout: float = 30.0,
    ) -> TransportResponse:
        session = self._get_session()
        try:
            async with session.request(
                method,
                url,
                headers=headers,
                json=body,
                params=_clean_params(params),
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                raw = await response.read()
                response_headers = dict(response.headers)
                decoded = _decode_body(raw)

                if response.status >= 400:
                    raise TransportFailure(
                        f"Request failed with status code {response.status}",
                        status_code=response.status,
                        headers=response_headers,
                        body=decoded,
                        url=url,
                        method=method,
                        request_headers=headers,
                    )

                return TransportResponse(
                    status_code=response.status,
                    headers=response_headers,
                    body=decoded,
                )

        except asyncio.TimeoutError as e:
            raise TransportFailure(
                f"Request timeout after {timeout}s",
                url=url,
                method=method,
                request_headers=headers,
                cause=e,
            ) from e
        except aiohttp.ClientError as e:
            raise TransportFailure(
                f"Connection error: {e}",
                url=url,
                method=method,
                request_headers=headers,
                cause=e,
            ) from e

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            self.logger.debug("Closed aiohttp session")

    async def __aenter__(self) -> "AiohttpTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = [
    "TransportResponse",
    "TransportFailure",
    "Transport",
    "AiohttpTransport",
    "create_session",
]
