"""
Tests for revmax.client module.

Tests cover:
- Construction and key validation
- connect() handshake success and failure mapping
- Concurrent connect coalescing
- Organization access and re-verification
"""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from revmax import RevMaxClient, __version__
from revmax.client import API_KEY_ENV_VAR, INVALID_KEY_MESSAGE, VERIFY_PATH
from revmax.config import ClientOptions
from revmax.errors import (
    ApiError,
    AuthenticationError,
    ErrorKind,
    InitializationError,
    TransportError,
)
from revmax.logging.context import get_log_context
from sdk_fakes import FakeTransport, http_failure, network_failure, ok

ORG = {"id": "org_1", "name": "Acme"}


@pytest.fixture
def mock_sleep():
    with patch("revmax.api.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


class TestConstruction:
    """Tests for client construction."""

    def test_invalid_key_rejected(self):
        with pytest.raises(AuthenticationError):
            RevMaxClient("not-a-key", transport=FakeTransport(ok({})))

    def test_not_connected_initially(self, api_key, fake_transport):
        client = RevMaxClient(api_key, transport=fake_transport)
        assert client.is_connected is False
        assert fake_transport.calls == []

    def test_options_from_dict(self, api_key, fake_transport):
        client = RevMaxClient(api_key, {"retries": 3, "retryDelay": 100}, fake_transport)
        assert isinstance(client.options, ClientOptions)
        assert client.api_client.retry_config.max_retries == 3
        assert client.api_client.retry_config.retry_delay_ms == 100.0

    def test_from_env(self, api_key, fake_transport, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV_VAR, api_key)
        with patch("revmax.client.load_dotenv") as mock_load:
            client = RevMaxClient.from_env(transport=fake_transport)

        mock_load.assert_called_once()
        assert client.auth.get_headers()["revx-api-key"] == api_key

    def test_from_env_missing_key(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
        with patch("revmax.client.load_dotenv"):
            with pytest.raises(AuthenticationError, match="required"):
                RevMaxClient.from_env(transport=FakeTransport(ok({})))

    def test_logging_disabled_by_default(self, api_key, fake_transport):
        client = RevMaxClient(api_key, transport=fake_transport)
        assert client.logger.name.startswith("revmax.clients.")
        assert client.logger.propagate is False
        assert not client.logger.isEnabledFor(logging.ERROR)

    def test_each_client_has_own_logger(self, api_key):
        first = RevMaxClient(api_key, transport=FakeTransport(ok({})))
        second = RevMaxClient(api_key, transport=FakeTransport(ok({})))

        assert first.logger is not second.logger
        assert first.api_client.logger is first.logger
        assert first.telemetry.logger is first.logger
        assert first.customers.logger is first.logger

    def test_version_exported(self):
        assert __version__


class TestConnect:
    """Tests for the verification handshake."""

    @pytest.mark.asyncio
    async def test_connect_success(self, api_key):
        transport = FakeTransport(ok({"organization": ORG}))
        client = RevMaxClient(api_key, transport=transport)

        result = await client.connect()

        assert result is client
        assert client.is_connected is True
        assert client.auth.is_verified() is True
        assert client.get_organization() == ORG
        assert transport.calls[0]["method"] == "GET"
        assert transport.calls[0]["url"].endswith(VERIFY_PATH)

    @pytest.mark.asyncio
    async def test_connect_401_is_authentication_error(self, api_key):
        transport = FakeTransport(http_failure(401, {"message": "Unauthorized"}))
        client = RevMaxClient(api_key, transport=transport)

        with pytest.raises(AuthenticationError) as exc_info:
            await client.connect()

        assert exc_info.value.message == INVALID_KEY_MESSAGE
        assert exc_info.value.status_code == 401
        assert exc_info.value.request_id == transport.calls[0]["headers"]["X-Request-ID"]
        assert client.is_connected is False
        assert client.auth.is_verified() is False

    @pytest.mark.asyncio
    async def test_connect_missing_organization(self, api_key):
        client = RevMaxClient(api_key, transport=FakeTransport(ok({"status": "ok"})))

        with pytest.raises(InitializationError, match="Unexpected response format"):
            await client.connect()

        assert client.is_connected is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"organization": {"id": "org_1"}},
            {"organization": {"name": "Acme"}},
            {"organization": "org_1"},
            {"organization": {"id": None, "name": "Acme"}},
            {"organization": {"id": "org_1", "name": None}},
            None,
            "ok",
        ],
    )
    async def test_connect_malformed_organization(self, api_key, body):
        client = RevMaxClient(api_key, transport=FakeTransport(ok(body)))

        with pytest.raises(InitializationError):
            await client.connect()

    @pytest.mark.asyncio
    async def test_connect_accepts_falsy_organization_values(self, api_key):
        """Test present-but-falsy id and name are not a format error."""
        organization = {"id": 0, "name": ""}
        client = RevMaxClient(api_key, transport=FakeTransport(ok({"organization": organization})))

        await client.connect()

        assert client.is_connected is True
        assert client.get_organization() == organization

    @pytest.mark.asyncio
    async def test_connect_500_is_initialization_error(self, api_key):
        transport = FakeTransport(http_failure(500, {"message": "Internal"}))
        client = RevMaxClient(api_key, transport=transport)

        with pytest.raises(InitializationError) as exc_info:
            await client.connect()

        error = exc_info.value
        assert error.kind == ErrorKind.INITIALIZATION
        assert error.message == "Connection failed: Internal"
        assert isinstance(error.cause, ApiError)
        assert error.request_id == transport.calls[0]["headers"]["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_connect_network_failure(self, api_key):
        client = RevMaxClient(api_key, transport=FakeTransport(network_failure()))

        with pytest.raises(InitializationError) as exc_info:
            await client.connect()

        assert isinstance(exc_info.value.cause, TransportError)

    @pytest.mark.asyncio
    async def test_connect_retries_transient_failure(self, api_key, mock_sleep):
        transport = FakeTransport(http_failure(503), ok({"organization": ORG}))
        client = RevMaxClient(api_key, {"retries": 1}, transport)

        await client.connect()

        assert len(transport.calls) == 2
        assert client.is_connected is True

    @pytest.mark.asyncio
    async def test_connect_twice_is_noop(self, api_key):
        transport = FakeTransport(ok({"organization": ORG}))
        client = RevMaxClient(api_key, transport=transport)

        await client.connect()
        await client.connect()

        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_connect_coalesced(self, api_key):
        """Test concurrent connect() calls share one handshake."""
        release = asyncio.Event()
        calls = []

        class SlowTransport(FakeTransport):
            async def call(self, method, url, headers, body=None, params=None, timeout=30.0):
                calls.append(url)
                await release.wait()
                return ok({"organization": ORG})

        client = RevMaxClient(api_key, transport=SlowTransport())

        tasks = [asyncio.create_task(client.connect()) for _ in range(5)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks)

        assert len(calls) == 1
        assert all(result is client for result in results)

    @pytest.mark.asyncio
    async def test_connect_after_failure_retries_handshake(self, api_key):
        transport = FakeTransport(http_failure(500), ok({"organization": ORG}))
        client = RevMaxClient(api_key, transport=transport)

        with pytest.raises(InitializationError):
            await client.connect()
        await client.connect()

        assert client.is_connected is True
        assert len(transport.calls) == 2


class TestOrganization:
    """Tests for organization access and re-verification."""

    def test_get_organization_before_connect(self, api_key, fake_transport):
        client = RevMaxClient(api_key, transport=fake_transport)

        with pytest.raises(InitializationError, match="connect"):
            client.get_organization()

    @pytest.mark.asyncio
    async def test_get_organization_returns_copy(self, api_key):
        client = RevMaxClient(api_key, transport=FakeTransport(ok({"organization": ORG})))
        await client.connect()

        org = client.get_organization()
        org["name"] = "Changed"

        assert client.get_organization()["name"] == "Acme"

    @pytest.mark.asyncio
    async def test_verify_api_key_refreshes(self, api_key):
        updated = {"id": "org_1", "name": "Acme Renamed"}
        transport = FakeTransport(ok({"organization": ORG}), ok({"organization": updated}))
        client = RevMaxClient(api_key, transport=transport)
        await client.connect()

        result = await client.verify_api_key()

        assert result == updated
        assert client.get_organization() == updated

    @pytest.mark.asyncio
    async def test_verify_api_key_401(self, api_key):
        transport = FakeTransport(ok({"organization": ORG}), http_failure(401))
        client = RevMaxClient(api_key, transport=transport)
        await client.connect()

        with pytest.raises(AuthenticationError, match="Invalid API key"):
            await client.verify_api_key()

        assert client.auth.is_verified() is False
        assert client.is_connected is False

    @pytest.mark.asyncio
    async def test_verify_api_key_other_errors_unchanged(self, api_key):
        client = RevMaxClient(api_key, transport=FakeTransport(http_failure(500)))

        with pytest.raises(ApiError) as exc_info:
            await client.verify_api_key()

        assert exc_info.value.status_code == 500


class TestPassThroughs:
    """Tests for convenience methods."""

    @pytest.mark.asyncio
    async def test_track_event(self, api_key):
        response = {"results": [{"success": True, "responseData": {"id": "evt_1"}}]}
        transport = FakeTransport(ok(response))
        client = RevMaxClient(api_key, transport=transport)

        result = await client.track_event(
            {
                "customerExternalId": "cust-123",
                "agentId": "agent-1",
                "signalName": "tokens",
                "quantity": 42,
            }
        )

        assert result == {"id": "evt_1"}
        assert transport.calls[0]["url"].endswith("/usage/record")

    @pytest.mark.asyncio
    async def test_telemetry_stats(self, api_key):
        options = {"telemetry": {"enabled": True, "handler": MagicMock()}}
        client = RevMaxClient(api_key, options, FakeTransport(ok({"organization": ORG})))

        await client.connect()
        assert client.get_telemetry_stats().request_count == 1

        client.reset_telemetry_stats()
        assert client.get_telemetry_stats().request_count == 0

    @pytest.mark.asyncio
    async def test_async_context_manager(self, api_key):
        client = RevMaxClient(api_key)
        client.api_client.transport = AsyncMock()

        async with client as entered:
            assert entered is client

        client.api_client.transport.close.assert_awaited_once()


class TestClientLogging:
    """Tests for per-client logging configuration."""

    @pytest.mark.asyncio
    async def test_second_client_does_not_silence_first(self, api_key):
        sink = MagicMock()
        first = RevMaxClient(
            api_key,
            {"logging": {"enabled": True, "level": "debug", "handler": sink}},
            FakeTransport(ok({"organization": ORG})),
        )
        RevMaxClient(api_key, transport=FakeTransport(ok({})))

        await first.connect()

        messages = [c.args[1] for c in sink.call_args_list]
        assert "Connecting to RevMax API and verifying API key..." in messages
        assert "Successfully connected to RevMax API" in messages

    @pytest.mark.asyncio
    async def test_clients_log_to_their_own_sinks(self, api_key):
        first_sink = MagicMock()
        second_sink = MagicMock()
        first = RevMaxClient(
            api_key,
            {"logging": {"enabled": True, "handler": first_sink}},
            FakeTransport(ok({"organization": ORG})),
        )
        second = RevMaxClient(
            api_key,
            {"logging": {"enabled": True, "handler": second_sink}},
            FakeTransport(ok({"organization": {"id": "org_2", "name": "Other"}})),
        )
        first_sink.reset_mock()
        second_sink.reset_mock()

        await second.connect()

        first_sink.assert_not_called()
        assert second_sink.call_count > 0
        assert first.is_connected is False

    @pytest.mark.asyncio
    async def test_request_id_context_cleared_after_connect(self, api_key):
        client = RevMaxClient(api_key, transport=FakeTransport(ok({"organization": ORG})))

        await client.connect()

        assert get_log_context()["request_id"] == ""
