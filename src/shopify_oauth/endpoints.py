"""
Shop-scoped OAuth endpoint derivation.

Every shop on the platform gets its own authorization server, addressed by
using the shop name as the subdomain of the platform domain.
"""

from dataclasses import dataclass

DEFAULT_PLATFORM_DOMAIN = "myshopify.com"

AUTHORIZATION_ENDPOINT_TEMPLATE = "https://{shop}.{domain}/admin/oauth/authorize"
TOKEN_ENDPOINT_TEMPLATE = "https://{shop}.{domain}/admin/oauth/access_token"


@dataclass(frozen=True)
class EndpointSet:
    """
    Authorization server description for one shop.

    Attributes:
        authorization_endpoint: URL the user-agent is redirected to
        token_endpoint: URL the authorization code is exchanged at
    """

    authorization_endpoint: str
    token_endpoint: str


def endpoints_for_shop(shop_name: str, platform_domain: str = DEFAULT_PLATFORM_DOMAIN) -> EndpointSet:
    """
    Build the endpoint set for a shop.

    The shop name is used verbatim; callers are expected to sanitize it.

    Args:
        shop_name: Subdomain-style shop name (e.g. "acme-store")
        platform_domain: Platform domain the shop lives under

    Returns:
        EndpointSet for the shop
    """
    return EndpointSet(
        authorization_endpoint=AUTHORIZATION_ENDPOINT_TEMPLATE.format(
            shop=shop_name, domain=platform_domain
        ),
        token_endpoint=TOKEN_ENDPOINT_TEMPLATE.format(shop=shop_name, domain=platform_domain),
    )
