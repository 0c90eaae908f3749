"""Tests for OAuth exceptions."""

import pytest

from shopify_oauth.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ShopifyOAuthError,
    TokenExchangeError,
    TokenNotAvailableError,
    TokenNotFoundError,
    TokenRefreshError,
)


class TestOAuthExceptions:
    """Tests for OAuth exception hierarchy."""

    def test_shopify_oauth_error_is_base_exception(self):
        """ShopifyOAuthError is base for all OAuth errors."""
        error = ShopifyOAuthError("test error")
        assert isinstance(error, Exception)
        assert str(error) == "test error"

    def test_configuration_error_is_value_error(self):
        """ConfigurationError can be caught as ValueError."""
        error = ConfigurationError("bad value")
        assert isinstance(error, ShopifyOAuthError)
        assert isinstance(error, ValueError)
        assert str(error) == "bad value"

    def test_token_not_found_error_is_key_error(self):
        """TokenNotFoundError can be caught as KeyError and names the token."""
        error = TokenNotFoundError("rt1")
        assert isinstance(error, ShopifyOAuthError)
        assert isinstance(error, KeyError)
        assert error.token == "rt1"
        assert "rt1" in str(error)

    def test_exceptions_can_be_caught_as_base_type(self):
        """All OAuth exceptions can be caught as ShopifyOAuthError."""
        exceptions = [
            ConfigurationError("error"),
            TokenNotFoundError("token"),
            AuthorizationError("error"),
            TokenExchangeError("error"),
            TokenRefreshError("error"),
            TokenNotAvailableError("error"),
        ]

        for exc in exceptions:
            with pytest.raises(ShopifyOAuthError):
                raise exc
