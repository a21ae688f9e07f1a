"""
Tests for revmax.auth.api_key module.

Tests cover:
- Key format validation at construction
- Header production
- Verified flag transitions
"""

import pytest

from revmax.auth import API_KEY_HEADER, ApiKeyAuth, create_auth
from revmax.errors import AuthenticationError, ErrorKind


class TestApiKeyValidation:
    """Tests for API key format checks."""

    @pytest.mark.parametrize("key", ["", None])
    def test_missing_key_rejected(self, key):
        """Test missing key raises AuthenticationError."""
        with pytest.raises(AuthenticationError, match="REVX_API_KEY is required"):
            ApiKeyAuth(key)

    def test_non_string_key_rejected(self):
        """Test non-string key raises AuthenticationError."""
        with pytest.raises(AuthenticationError, match="must be a string"):
            ApiKeyAuth(12345)

    def test_wrong_prefix_rejected(self):
        """Test key without revx_pk_ prefix is rejected."""
        with pytest.raises(AuthenticationError, match="revx_pk_") as exc_info:
            ApiKeyAuth("sk_live_0123456789abcdef0123")

        assert exc_info.value.kind == ErrorKind.AUTHENTICATION
        assert exc_info.value.status_code is None

    def test_short_key_rejected(self):
        """Test key with too short a suffix is rejected."""
        with pytest.raises(AuthenticationError, match="too short"):
            ApiKeyAuth("revx_pk_short")

    def test_minimum_length_key_accepted(self):
        """Test key with exactly 16 suffix characters is accepted."""
        auth = ApiKeyAuth("revx_pk_" + "a" * 16)
        assert auth.is_verified() is False


class TestApiKeyAuth:
    """Tests for ApiKeyAuth behavior."""

    def test_get_headers(self, api_key):
        """Test the key is sent in the revx-api-key header."""
        auth = ApiKeyAuth(api_key)
        assert auth.get_headers() == {API_KEY_HEADER: api_key}
        assert API_KEY_HEADER == "revx-api-key"

    def test_verified_flag(self, api_key):
        """Test set_verified toggles the verified state."""
        auth = ApiKeyAuth(api_key)
        assert auth.verified is False

        auth.set_verified(True)
        assert auth.is_verified() is True
        assert auth.verified is True

        auth.set_verified(False)
        assert auth.is_verified() is False

    def test_repr_does_not_leak_key(self, api_key):
        """Test repr never contains the raw key."""
        auth = ApiKeyAuth(api_key)
        assert api_key not in repr(auth)

    def test_create_auth_returns_api_key_auth(self, api_key):
        """Test create_auth builds an ApiKeyAuth."""
        auth = create_auth(api_key)
        assert isinstance(auth, ApiKeyAuth)
        assert auth.get_headers()[API_KEY_HEADER] == api_key

    def test_create_auth_validates(self):
        """Test create_auth propagates validation errors."""
        with pytest.raises(AuthenticationError):
            create_auth("bad")
