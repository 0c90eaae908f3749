"""
OAuth configuration for Shopify shop authorization.

Configuration can be loaded from environment variables or provided
programmatically. Credentials are immutable once the client is built.
"""

import os
from dataclasses import dataclass
from typing import Tuple

from .endpoints import DEFAULT_PLATFORM_DOMAIN, EndpointSet, endpoints_for_shop
from .exceptions import ConfigurationError


def _parse_scopes(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class ShopifyOAuthConfig:
    """
    Configuration for Shopify OAuth 2.0.

    Attributes:
        shop_name: Shop subdomain (e.g. "acme-store" for acme-store.myshopify.com)
        client_id: App API key from the partner dashboard
        client_secret: App API secret key from the partner dashboard
        platform_domain: Domain shops live under (default: myshopify.com)
        callback_host: Domain for OAuth callback (default: localhost)
        callback_port: Port for callback app (default: 8443)
        callback_path: URL path for callback (default: /oauth/callback)
        scopes: Access scopes requested during authorization
        request_timeout: Seconds to wait on the token endpoint
        verify_state: Reject callbacks whose state was not issued by this client
    """

    # Required - from the partner dashboard
    shop_name: str
    client_id: str
    client_secret: str

    platform_domain: str = DEFAULT_PLATFORM_DOMAIN

    # Callback configuration
    callback_host: str = "localhost"
    callback_port: int = 8443
    callback_path: str = "/oauth/callback"

    scopes: Tuple[str, ...] = ("read_products",)
    request_timeout: int = 30
    verify_state: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.shop_name:
            raise ConfigurationError("shop_name cannot be empty")

        if not self.client_id:
            raise ConfigurationError("client_id cannot be empty")

        if not self.client_secret:
            raise ConfigurationError("client_secret cannot be empty")

        if not isinstance(self.callback_port, int) or not (
            1 <= self.callback_port <= 65535
        ):
            raise ConfigurationError(
                f"callback_port must be between 1 and 65535, got {self.callback_port}"
            )

        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")

    @property
    def callback_url(self) -> str:
        """
        Full callback URL for OAuth redirect.

        Returns:
            Complete HTTPS callback URL (e.g., https://localhost:8443/oauth/callback)
        """
        return f"https://{self.callback_host}:{self.callback_port}{self.callback_path}"

    @property
    def endpoints(self) -> EndpointSet:
        """Authorization and token endpoints for the configured shop."""
        return endpoints_for_shop(self.shop_name, self.platform_domain)

    @classmethod
    def from_env(cls) -> "ShopifyOAuthConfig":
        """
        Load configuration from environment variables.

        Required environment variables:
            SHOPIFY_SHOP_NAME: Shop subdomain
            SHOPIFY_CLIENT_ID: App API key
            SHOPIFY_CLIENT_SECRET: App API secret key

        Optional environment variables:
            SHOPIFY_PLATFORM_DOMAIN: Platform domain (default: myshopify.com)
            SHOPIFY_CALLBACK_HOST: Callback domain (default: localhost)
            SHOPIFY_CALLBACK_PORT: Callback port (default: 8443)
            SHOPIFY_CALLBACK_PATH: Callback path (default: /oauth/callback)
            SHOPIFY_SCOPES: Comma-separated scopes (default: read_products)

        Returns:
            ShopifyOAuthConfig instance

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        shop_name = os.environ.get("SHOPIFY_SHOP_NAME")
        client_id = os.environ.get("SHOPIFY_CLIENT_ID")
        client_secret = os.environ.get("SHOPIFY_CLIENT_SECRET")

        if not shop_name or not client_id or not client_secret:
            raise ConfigurationError(
                "Missing Shopify OAuth settings. Set environment variables:\n"
                "  SHOPIFY_SHOP_NAME=your-shop\n"
                "  SHOPIFY_CLIENT_ID=your_api_key\n"
                "  SHOPIFY_CLIENT_SECRET=your_api_secret\n"
                "\n"
                "Get credentials from your app in the Shopify Partner Dashboard"
            )

        port = os.environ.get("SHOPIFY_CALLBACK_PORT", "8443")
        try:
            callback_port = int(port)
        except ValueError as e:
            raise ConfigurationError(f"SHOPIFY_CALLBACK_PORT must be an integer, got {port!r}") from e

        return cls(
            shop_name=shop_name,
            client_id=client_id,
            client_secret=client_secret,
            platform_domain=os.environ.get("SHOPIFY_PLATFORM_DOMAIN", DEFAULT_PLATFORM_DOMAIN),
            callback_host=os.environ.get("SHOPIFY_CALLBACK_HOST", "localhost"),
            callback_port=callback_port,
            callback_path=os.environ.get("SHOPIFY_CALLBACK_PATH", "/oauth/callback"),
            scopes=_parse_scopes(os.environ.get("SHOPIFY_SCOPES", "read_products")),
        )
