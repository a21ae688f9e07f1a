"""
API key authentication.

Keys are static bearer-style credentials: validated once at construction and
sent on every request in a single header. There is no refresh and no network
I/O here; the ``verified`` flag is flipped by the client after the
verification handshake succeeds.

Example:
    >>> auth = ApiKeyAuth("revx_pk_0123456789abcdef")
    >>> auth.get_headers()
    {'revx-api-key': 'revx_pk_0123456789abcdef'}
"""

import logging

from revmax.errors.exceptions import AuthenticationError

# All valid keys start with this prefix
API_KEY_PREFIX = "revx_pk_"

# Minimum number of characters after the prefix
API_KEY_MIN_SUFFIX_LENGTH = 16

API_KEY_HEADER = "revx-api-key"


class ApiKeyAuth:
    """
    API key authentication method.

    Attributes:
        verified: Whether the key passed the verification handshake
    """

    def __init__(self, api_key: str, logger: logging.Logger | None = None):
        """
        Validate and store the API key.

        Args:
            api_key: Raw API key
            logger: Logger for this client (module logger when None)

        Raises:
            AuthenticationError: If the key is missing or malformed
        """
        if not api_key:
            raise AuthenticationError("REVX_API_KEY is required")

        if not isinstance(api_key, str):
            raise AuthenticationError("REVX_API_KEY must be a string")

        if not api_key.startswith(API_KEY_PREFIX):
            raise AuthenticationError(
                f'REVX_API_KEY format not valid: it should start with "{API_KEY_PREFIX}" '
                "followed by a unique identifier"
            )

        if len(api_key) < len(API_KEY_PREFIX) + API_KEY_MIN_SUFFIX_LENGTH:
            raise AuthenticationError("REVX_API_KEY format not valid: key is too short")

        self._api_key = api_key
        self._verified = False
        self._logger = logger or logging.getLogger(__name__)

    def get_headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self._api_key}

    def set_verified(self, status: bool) -> None:
        self._verified = bool(status)
        self._logger.debug("API key verification status set to %s", self._verified)

    def is_verified(self) -> bool:
        return self._verified

    @property
    def verified(self) -> bool:
        return self._verified

    def __repr__(self) -> str:
        # Never leak the key itself
        return f"ApiKeyAuth(key={API_KEY_PREFIX}***, verified={self._verified})"


__all__ = [
    "API_KEY_PREFIX",
    "API_KEY_MIN_SUFFIX_LENGTH",
    "API_KEY_HEADER",
    "ApiKeyAuth",
]
