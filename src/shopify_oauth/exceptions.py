"""
OAuth exception classes for Shopify shop authorization.

This module defines the exception hierarchy for all OAuth-related errors.
Errors raised by the token endpoint or by a malformed callback are surfaced
to the caller unchanged; nothing in the client swallows them.
"""


class ShopifyOAuthError(Exception):
    """Base exception for all Shopify OAuth errors."""

    pass


class ConfigurationError(ShopifyOAuthError, ValueError):
    """Missing or invalid construction parameter (shop name, client id, consumer key)."""

    pass


class TokenNotFoundError(ShopifyOAuthError, KeyError):
    """Lookup for a token that was never stored or has already been promoted."""

    def __init__(self, token: str):
        super().__init__(token)
        self.token = token

    def __str__(self) -> str:
        return f"No secret stored for token {self.token!r}"


class AuthorizationError(ShopifyOAuthError):
    """OAuth callback could not be accepted (unknown or missing state)."""

    pass


class TokenExchangeError(ShopifyOAuthError):
    """Failed to exchange authorization code for an access token."""

    pass


class TokenRefreshError(ShopifyOAuthError):
    """Failed to refresh access token using refresh token."""

    pass


class TokenNotAvailableError(ShopifyOAuthError):
    """No access or refresh token available (need to authorize first)."""

    pass
