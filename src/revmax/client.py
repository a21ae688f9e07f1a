"""
RevMax client facade.

Composes authentication, the request executor and the resource wrappers, and
owns the verification handshake that must succeed before the client is used.

Example:
    >>> async with RevMaxClient("revx_pk_...", {"retries": 2}) as client:
    ...     await client.connect()
    ...     await client.track_event({
    ...         "customerExternalId": "cust-123",
    ...         "agentId": "agent-1",
    ...         "signalName": "tokens",
    ...         "quantity": 42,
    ...     })
"""

import asyncio
import os
from typing import Any, NoReturn

from dotenv import load_dotenv

from revmax.api import ApiClient
from revmax.auth import create_auth
from revmax.config import ClientOptions
from revmax.errors.exceptions import (
    AuthenticationError,
    InitializationError,
    RevMaxError,
)
from revmax.logging.setup import client_logger_name, configure_logging
from revmax.resources.customers import Customers
from revmax.resources.models import UsageRecord
from revmax.resources.usage import Usage
from revmax.telemetry.models import TelemetryStats
from revmax.telemetry.recorder import Telemetry
from revmax.transport.http_client import Transport

VERIFY_PATH = "/verify"
API_KEY_ENV_VAR = "REVX_API_KEY"

INVALID_KEY_MESSAGE = "Invalid API key. Please check your API key and try again."


def _extract_organization(result: Any) -> dict[str, Any]:
    """Validate the handshake body and return the organization object.

    Only absent (or null) ``id`` and ``name`` are rejected; falsy values such as
    ``0`` or ``""`` are accepted as sent.
    """
    organization = result.get("organization") if isinstance(result, dict) else None
    if not isinstance(organization, dict) or any(
        organization.get(key) is None for key in ("id", "name")
    ):
        raise InitializationError("Unexpected response format from API key verification")
    return organization


class RevMaxClient:
    """
    Main RevMax client.

    The client is created disconnected; call ``connect()`` once before using
    any API method.

    Attributes:
        customers: Customer resource
        usage: Usage resource
    """

    def __init__(
        self,
        api_key: str,
        options: ClientOptions | dict[str, Any] | None = None,
        transport: Transport | None = None,
    ):
        """
        Create a client without connecting.

        Args:
            api_key: RevMax API key
            options: ClientOptions or a dict of options
            transport: HTTP transport override (AiohttpTransport when None)

        Raises:
            AuthenticationError: If the API key is missing or malformed
        """
        if not isinstance(options, ClientOptions):
            options = ClientOptions.from_dict(options)
        self.options = options

        # One logger per client, configured from this client's options only
        self.logger = configure_logging(options.logging, client_logger_name())
        self.logger.info("Creating RevMaxClient...")

        self.auth = create_auth(api_key, self.logger)
        self.telemetry = Telemetry(options.telemetry, self.logger)
        self.api_client = ApiClient(
            self.auth, options, self.telemetry, transport, logger=self.logger
        )

        self.customers = Customers(self.api_client)
        self.usage = Usage(self.api_client)

        self._org_info: dict[str, Any] | None = None
        self._connect_lock = asyncio.Lock()

    @classmethod
    def from_env(
        cls,
        options: ClientOptions | dict[str, Any] | None = None,
        transport: Transport | None = None,
    ) -> "RevMaxClient":
        """Create a client using REVX_API_KEY from the environment or a .env file."""
        load_dotenv()
        return cls(os.getenv(API_KEY_ENV_VAR, ""), options, transport)

    @property
    def is_connected(self) -> bool:
        return self._org_info is not None and self.auth.is_verified()

    async def _verify(self) -> dict[str, Any]:
        result = await self.api_client.get(VERIFY_PATH)
        return _extract_organization(result)

    async def connect(self) -> "RevMaxClient":
        """
        Connect to the RevMax API and verify the API key.

        Concurrent calls share one handshake; once connected, further calls
        return immediately.

        Returns:
            This client, for chaining

        Raises:
            AuthenticationError: If the API key is rejected (401)
            InitializationError: For any other handshake failure
        """
        async with self._connect_lock:
            if self.is_connected:
                return self

            self.logger.info("Connecting to RevMax API and verifying API key...")
            try:
                organization = await self._verify()
            except RevMaxError as e:
                self._raise_handshake_error("Connection failed", e, wrap_other=True)

            self._org_info = organization
            self.auth.set_verified(True)

            self.logger.info(
                "Successfully connected to RevMax API",
                extra={
                    "organization_id": organization["id"],
                    "organization_name": organization["name"],
                },
            )
            return self

    async def verify_api_key(self) -> dict[str, Any]:
        """
        Re-verify the API key and refresh organization info.

        Returns:
            Copy of the organization information

        Raises:
            AuthenticationError: If the API key is rejected (401)
            RevMaxError: Any other classified failure, unchanged
        """
        self.logger.info("Re-verifying API key")
        try:
            organization = await self._verify()
        except RevMaxError as e:
            self._raise_handshake_error("API key verification failed", e, wrap_other=False)

        self._org_info = organization
        self.auth.set_verified(True)
        self.logger.info(
            "API key verification successful",
            extra={"organization_id": organization["id"]},
        )
        return dict(organization)

    def _raise_handshake_error(
        self, prefix: str, error: RevMaxError, wrap_other: bool
    ) -> NoReturn:
        """Map a handshake failure: 401 is always an auth error."""
        request_id = error.request_id or "unknown"
        self.logger.error(
            "%s: %s",
            prefix,
            error.message,
            extra={
                "request_id": request_id,
                "http_status": error.status_code,
                "error_kind": error.kind.value,
            },
        )

        if error.status_code == 401:
            self.auth.set_verified(False)
            raise AuthenticationError(
                INVALID_KEY_MESSAGE,
                metadata={"requestId": request_id},
                cause=error,
                status_code=401,
            ) from error

        if wrap_other and not isinstance(error, InitializationError):
            raise InitializationError(
                f"{prefix}: {error.message}",
                metadata={"requestId": request_id},
                cause=error,
            ) from error

        raise error

    def get_organization(self) -> dict[str, Any]:
        """
        Get organization information from the last successful handshake.

        Raises:
            InitializationError: If the client has not connected
        """
        if self._org_info is None:
            raise InitializationError(
                "Organization information is not available. "
                "Make sure the API key is valid and you have called connect()"
            )
        return dict(self._org_info)

    async def track_event(self, params: UsageRecord | dict[str, Any]) -> dict[str, Any]:
        """Shorthand for ``usage.track_event``."""
        return await self.usage.track_event(params)

    def get_telemetry_stats(self) -> TelemetryStats:
        return self.api_client.get_telemetry_stats()

    def reset_telemetry_stats(self) -> None:
        self.api_client.reset_telemetry_stats()

    async def aclose(self) -> None:
        await self.api_client.aclose()

    async def __aenter__(self) -> "RevMaxClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


__all__ = [
    "API_KEY_ENV_VAR",
    "VERIFY_PATH",
    "RevMaxClient",
]
