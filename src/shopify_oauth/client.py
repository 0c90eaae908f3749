"""
Shop-scoped OAuth client.

This is the main interface applications use to authorize against one shop.
It derives the shop's endpoints, owns an in-memory token tracker and turns
each processed callback into a ShopAuthorizationState.

Example:
    client = ShopifyAuthClient("acme-store", client_id, client_secret)
    url, state = client.request_user_authorization(scope=["read_orders"])
    # ... redirect the user to url, then in the callback handler:
    authorization = client.process_authorization()
    if authorization.is_authorized:
        headers = client.authorization_header(authorization)
"""

import logging
from typing import Mapping, Optional

from .authorization_state import ShopAuthorizationState
from .config import ShopifyOAuthConfig
from .endpoints import DEFAULT_PLATFORM_DOMAIN, endpoints_for_shop
from .exceptions import ConfigurationError
from .token_tracker import InMemoryTokenTracker
from .web_server_client import WebServerClient

logger = logging.getLogger(__name__)


class ShopifyAuthClient(WebServerClient):
    """
    OAuth 2.0 client bound to a single shop.

    The client is reusable: every processed callback yields an independent
    ShopAuthorizationState that the caller keeps or persists.
    """

    def __init__(
        self,
        shop_name: str,
        client_id: str,
        client_secret: Optional[str],
        platform_domain: str = DEFAULT_PLATFORM_DOMAIN,
        timeout: int = 30,
        verify_state: bool = True,
    ):
        """
        Initialize the client for a shop.

        Args:
            shop_name: Shop subdomain, used verbatim in the endpoint URLs
            client_id: App API key
            client_secret: App API secret key
            platform_domain: Domain shops live under
            timeout: Seconds to wait on the token endpoint
            verify_state: Reject callbacks whose state was not issued here

        Raises:
            ConfigurationError: If shop_name or client_id is empty
        """
        if not shop_name:
            raise ConfigurationError("shop_name cannot be empty")
        if not client_id:
            raise ConfigurationError("client_id cannot be empty")

        super().__init__(
            endpoints_for_shop(shop_name, platform_domain),
            client_id,
            client_secret,
            authorization_tracker=InMemoryTokenTracker(client_id, client_secret),
            timeout=timeout,
            verify_state=verify_state,
        )
        self._shop_name = shop_name

    @property
    def shop_name(self) -> str:
        return self._shop_name

    @classmethod
    def from_config(cls, config: ShopifyOAuthConfig) -> "ShopifyAuthClient":
        """Build a client from a validated configuration."""
        return cls(
            config.shop_name,
            config.client_id,
            config.client_secret,
            platform_domain=config.platform_domain,
            timeout=config.request_timeout,
            verify_state=config.verify_state,
        )

    @classmethod
    def from_env(cls) -> "ShopifyAuthClient":
        """
        Build a client from environment variables.

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        return cls.from_config(ShopifyOAuthConfig.from_env())

    def process_authorization(
        self,
        request_args: Optional[Mapping[str, str]] = None,
        callback_url: Optional[str] = None,
    ) -> ShopAuthorizationState:
        """
        Process an authorization callback for this shop.

        A denied authorization is not an error: the returned state then wraps
        no record and has no access token. Failures talking to the token
        endpoint propagate unchanged.

        Args:
            request_args: Callback query parameters (read from the current
                Flask request if not provided)
            callback_url: URL the callback arrived at

        Returns:
            ShopAuthorizationState carrying this client's shop name

        Raises:
            AuthorizationError: If the callback state was not issued by this client
            TokenExchangeError: If the code could not be exchanged
        """
        authorization = self.process_user_authorization(request_args, callback_url)
        if authorization is None:
            logger.info(f"No authorization granted for shop {self._shop_name}")
        else:
            logger.info(f"Authorization granted for shop {self._shop_name}")
        return ShopAuthorizationState(self._shop_name, authorization)
