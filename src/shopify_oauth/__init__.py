"""
OAuth 2.0 authorization code flow for Shopify shops.

Each shop is its own authorization server, addressed by the shop name as a
subdomain of the platform domain. Tokens obtained here are held in memory
only; persisting them is up to the application.

Public API:
    ShopifyAuthClient: Shop-scoped client, process_authorization()
    ShopAuthorizationState: Authorization state carrying the shop name
    AuthorizationState: Generic OAuth2 authorization record
    InMemoryTokenTracker: Short-lived token/secret tracker
    WebServerClient: Generic OAuth2 authorization code client
    ShopifyOAuthConfig: OAuth configuration management
    create_callback_app: Flask app with install and callback routes

Exceptions:
    ShopifyOAuthError: Base exception
    ConfigurationError: Missing or invalid parameter
    TokenNotFoundError: Unknown token
    AuthorizationError: Callback rejected
    TokenExchangeError: Token exchange failed
    TokenRefreshError: Token refresh failed
    TokenNotAvailableError: No token held
"""

from .authorization_state import AuthorizationState, ShopAuthorizationState
from .callback_app import create_callback_app
from .client import ShopifyAuthClient
from .config import ShopifyOAuthConfig
from .endpoints import EndpointSet, endpoints_for_shop
from .exceptions import (
    AuthorizationError,
    ConfigurationError,
    ShopifyOAuthError,
    TokenExchangeError,
    TokenNotAvailableError,
    TokenNotFoundError,
    TokenRefreshError,
)
from .token_tracker import (
    ClientAuthorizationTracker,
    ConsumerTokenManager,
    InMemoryTokenTracker,
    TokenType,
)
from .web_server_client import WebServerClient

__all__ = [
    # Configuration
    "ShopifyOAuthConfig",
    "EndpointSet",
    "endpoints_for_shop",
    # Authorization state
    "AuthorizationState",
    "ShopAuthorizationState",
    # Token tracking
    "ConsumerTokenManager",
    "ClientAuthorizationTracker",
    "InMemoryTokenTracker",
    "TokenType",
    # Clients
    "WebServerClient",
    "ShopifyAuthClient",
    "create_callback_app",
    # Exceptions
    "ShopifyOAuthError",
    "ConfigurationError",
    "TokenNotFoundError",
    "AuthorizationError",
    "TokenExchangeError",
    "TokenRefreshError",
    "TokenNotAvailableError",
]
