"""
Request executor for the RevMax API.

Turns one logical API call into one or more HTTP attempts:
- Attaches static, auth and per-attempt X-Request-ID headers
- Tracks each attempt in telemetry (when sampled)
- Retries 429/5xx/network failures with exponential backoff or the
  server's retry-after hint, suspending only the calling coroutine
- Classifies the terminal failure into a typed RevMaxError

Callers only ever see the decoded response body or a RevMaxError; raw
transport failures never escape.

Per-call states: attempting -> success | retrying -> attempting | failed.
"""

import asyncio
import logging
from typing import Any

from revmax.config import ClientOptions
from revmax.errors.classifiers import REQUEST_ID_HEADER, classify_transport_failure
from revmax.logging.context import clear_log_context, set_log_context
from revmax.resilience.retry import RetryConfig, log_retry_attempt, log_retry_failure
from revmax.telemetry.models import TelemetryStats
from revmax.telemetry.recorder import Telemetry
from revmax.transport.http_client import (
    AiohttpTransport,
    Transport,
    TransportFailure,
    TransportResponse,
)
from revmax.types import AuthMethod
from revmax.version import __version__

USER_AGENT = f"revmax-python/{__version__}"

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": USER_AGENT,
}


class ApiClient:
    """
    HTTP request executor with retry, telemetry and error classification.

    Usage:
        api = ApiClient(auth, ClientOptions(retries=2))
        customer = await api.get("/customers/42")
    """

    def __init__(
        self,
        auth: AuthMethod,
        options: ClientOptions | None = None,
        telemetry: Telemetry | None = None,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the executor.

        Args:
            auth: Authentication method providing request headers
            options: Client options (defaults applied when None)
            telemetry: Telemetry recorder (built from options when None)
            transport: HTTP transport (AiohttpTransport when None)
            logger: Logger of the owning client (module logger when None)
        """
        self.logger = logger or logging.getLogger(__name__)
        self.options = options or ClientOptions()
        self.base_url = self.options.base_url
        self.timeout = self.options.timeout_seconds
        self.retry_config = RetryConfig(
            max_retries=self.options.retries,
            retry_delay_ms=self.options.retry_delay,
        )
        self.telemetry = telemetry or Telemetry(self.options.telemetry, self.logger)

        self._owns_transport = transport is None
        self.transport: Transport = transport or AiohttpTransport(logger=self.logger)

        # Auth headers last so user headers can never override the key
        self._headers = {
            **DEFAULT_HEADERS,
            **self.options.headers,
            **auth.get_headers(),
        }

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @staticmethod
    def ensure_url_prefix(path: str) -> str:
        return path if path.startswith("/") else f"/{path}"

    async def _call_transport(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
        params: dict[str, Any] | None,
    ) -> TransportResponse:
        try:
            return await self.transport.call(
                method,
                url,
                headers,
                body=body,
                params=params,
                timeout=self.timeout,
            )
        except TransportFailure:
            raise
        except Exception as e:
            # Transports outside this package may raise their own errors
            raise TransportFailure(
                str(e) or type(e).__name__,
                url=url,
                method=method,
                request_headers=headers,
                cause=e,
            ) from e

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Execute one logical call.

        Args:
            method: HTTP method
            path: API path relative to base_url
            body: JSON-serializable request body
            params: Query parameters

        Returns:
            Decoded response body

        Raises:
            RevMaxError: Classified error from the final failed attempt
        """
        method = method.upper()
        path = self.ensure_url_prefix(path)
        try:
            return await self._execute(method, path, body, params)
        finally:
            # Attempt ids must not leak into the caller's later log lines
            clear_log_context()

    async def _execute(
        self,
        method: str,
        path: str,
        body: Any,
        params: dict[str, Any] | None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        operation = f"{method} {path}"

        for retry_ordinal in range(self.retry_config.max_attempts):
            tracking = self.telemetry.start_request(method, path)
            request_id = tracking.request_id
            headers = {**self._headers, REQUEST_ID_HEADER: request_id}
            set_log_context(request_id=request_id, operation=operation)

            if retry_ordinal > 0:
                self.logger.info(
                    "Retry attempt %d/%d",
                    retry_ordinal,
                    self.retry_config.max_retries,
                    extra={"request_id": request_id, "attempt": retry_ordinal + 1},
                )

            self.logger.debug(
                "Request: %s %s",
                method,
                path,
                extra={"request_id": request_id, "http_method": method, "http_url": url},
            )

            try:
                response = await self._call_transport(method, url, headers, body, params)
            except TransportFailure as failure:
                error = classify_transport_failure(failure, request_id)
                self.telemetry.end_request(
                    request_id, failure.status_code, error, retry_ordinal
                )

                if self.retry_config.should_retry(failure, retry_ordinal):
                    delay = self.retry_config.get_delay(retry_ordinal, failure)
                    log_retry_attempt(
                        operation,
                        retry_ordinal,
                        self.retry_config,
                        delay,
                        failure,
                        request_id,
                        log=self.logger,
                    )
                    await asyncio.sleep(delay)
                    continue

                log_retry_failure(
                    operation,
                    retry_ordinal,
                    self.retry_config,
                    failure,
                    request_id,
                    log=self.logger,
                )
                raise error from failure

            self.telemetry.end_request(
                request_id, response.status_code, retry_count=retry_ordinal
            )
            self.logger.debug(
                "Response: %s %s",
                response.status_code,
                path,
                extra={"request_id": request_id, "http_status": response.status_code},
            )
            return response.body

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, body=body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request("PUT", path, body=body)

    async def patch(self, path: str, body: Any = None) -> Any:
        return await self.request("PATCH", path, body=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def get_telemetry_stats(self) -> TelemetryStats:
        return self.telemetry.get_stats()

    def reset_telemetry_stats(self) -> None:
        self.telemetry.reset_stats()

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self.transport.close()


__all__ = [
    "ApiClient",
    "DEFAULT_HEADERS",
    "USER_AGENT",
]
