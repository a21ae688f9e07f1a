"""Shared fixtures for SDK tests."""

import logging

import pytest

from sdk_fakes import VALID_API_KEY, FakeTransport, ok


@pytest.fixture
def api_key() -> str:
    return VALID_API_KEY


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport(ok({}))


@pytest.fixture(autouse=True)
def reset_sdk_logger():
    """Undo configure_logging so each test sees a default 'revmax' logger."""
    yield
    sdk_logger = logging.getLogger("revmax")
    for handler in list(sdk_logger.handlers):
        sdk_logger.removeHandler(handler)
    sdk_logger.setLevel(logging.NOTSET)
    sdk_logger.propagate = True
