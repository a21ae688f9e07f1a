"""
Authentication module.

Provides API key authentication for the RevMax API. Only static key
authentication is supported; ``create_auth`` is the single entry point so
other methods can be added without touching the client.
"""

import logging

from revmax.auth.api_key import (
    API_KEY_HEADER,
    API_KEY_MIN_SUFFIX_LENGTH,
    API_KEY_PREFIX,
    ApiKeyAuth,
)
from revmax.types import AuthMethod


def create_auth(credential: str, logger: logging.Logger | None = None) -> AuthMethod:
    """
    Create the authentication method for a credential.

    Args:
        credential: Raw API key
        logger: Logger for the owning client

    Returns:
        AuthMethod implementation

    Raises:
        AuthenticationError: If the credential is missing or malformed
    """
    return ApiKeyAuth(credential, logger)


__all__ = [
    "API_KEY_HEADER",
    "API_KEY_MIN_SUFFIX_LENGTH",
    "API_KEY_PREFIX",
    "ApiKeyAuth",
    "AuthMethod",
    "create_auth",
]
