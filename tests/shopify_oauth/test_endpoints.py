"""Tests for shop endpoint derivation."""

from urllib.parse import urlparse

import pytest

from shopify_oauth.endpoints import DEFAULT_PLATFORM_DOMAIN, EndpointSet, endpoints_for_shop


class TestEndpointsForShop:
    """Tests for endpoints_for_shop."""

    def test_acme_store_authorization_endpoint(self):
        """Authorization endpoint follows the shop subdomain template."""
        endpoints = endpoints_for_shop("acme-store")

        assert (
            endpoints.authorization_endpoint
            == "https://acme-store.myshopify.com/admin/oauth/authorize"
        )
        assert endpoints.token_endpoint == "https://acme-store.myshopify.com/admin/oauth/access_token"

    @pytest.mark.parametrize("shop", ["acme-store", "a", "shop123", "my-other-shop"])
    def test_endpoints_share_host_and_differ_in_path(self, shop):
        """Both endpoints use the shop as subdomain and differ only in path."""
        endpoints = endpoints_for_shop(shop)
        auth = urlparse(endpoints.authorization_endpoint)
        token = urlparse(endpoints.token_endpoint)

        assert auth.scheme == token.scheme == "https"
        assert auth.netloc == token.netloc == f"{shop}.{DEFAULT_PLATFORM_DOMAIN}"
        assert auth.path != token.path

    def test_custom_platform_domain(self):
        """Platform domain can be overridden."""
        endpoints = endpoints_for_shop("acme-store", "example-platform.com")

        assert endpoints.token_endpoint == (
            "https://acme-store.example-platform.com/admin/oauth/access_token"
        )

    def test_endpoint_set_is_immutable(self):
        """EndpointSet cannot be modified after creation."""
        endpoints = endpoints_for_shop("acme-store")

        with pytest.raises(AttributeError):
            endpoints.token_endpoint = "https://evil.example.com/token"

        assert isinstance(endpoints, EndpointSet)
