"""
Flask app hosting the install and callback routes for one shop.

Routes:
- GET /oauth/install: redirect the user-agent to the shop's authorization page
- GET <callback_path>: process the authorization callback
- GET /oauth/status: diagnostics

The app never keeps tokens. Successful authorizations are handed to the
optional on_authorized hook; storing them is the caller's business.
"""

import logging
from typing import Callable, Optional, Sequence

from flask import Flask, Response, jsonify, redirect
from markupsafe import escape

from .authorization_state import ShopAuthorizationState
from .client import ShopifyAuthClient
from .exceptions import AuthorizationError, TokenExchangeError

logger = logging.getLogger(__name__)

_PAGE = """<html>
<head><title>{title}</title></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px;">
    <h1 style="color: {color};">{title}</h1>
    <p>{message}</p>
    <p style="margin-top: 30px; color: #666;">You can close this window.</p>
</body>
</html>"""


def _page(title: str, message: str, status: int) -> Response:
    color = "#4caf50" if status == 200 else "#d32f2f"
    return Response(
        _PAGE.format(title=escape(title), message=escape(message), color=color),
        status=status,
        content_type="text/html",
    )


def create_callback_app(
    client: ShopifyAuthClient,
    redirect_uri: Optional[str] = None,
    scopes: Sequence[str] = (),
    callback_path: str = "/oauth/callback",
    on_authorized: Optional[Callable[[ShopAuthorizationState], None]] = None,
) -> Flask:
    """
    Build the Flask app for a shop's authorization flow.

    Args:
        client: Client for the shop being authorized
        redirect_uri: Public URL of the callback route
        scopes: Access scopes to request
        callback_path: Path the callback route is registered on
        on_authorized: Called with each successful authorization

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    app.logger.setLevel(logging.WARNING)

    def install() -> Response:
        url, _ = client.request_user_authorization(scope=scopes, redirect_uri=redirect_uri)
        logger.info(f"Redirecting to authorization page for {client.shop_name}")
        return redirect(url)

    def callback() -> Response:
        logger.info("Received OAuth callback")
        try:
            authorization = client.process_authorization()
        except AuthorizationError as e:
            logger.warning(f"Rejected OAuth callback: {e}")
            return _page("Authorization Failed", str(e), 400)
        except TokenExchangeError as e:
            return _page("Authorization Failed", str(e), 502)

        if not authorization.is_authorized:
            return _page(
                "Authorization Failed",
                f"Access to {authorization.shop_name} was not granted.",
                400,
            )

        if on_authorized is not None:
            on_authorized(authorization)

        return _page(
            "Authorization Successful",
            f"Your application has been authorized for {authorization.shop_name}.",
            200,
        )

    def status() -> Response:
        return jsonify({"shop": client.shop_name, "pending_states": client.pending_states})

    app.add_url_rule("/oauth/install", "oauth_install", install, methods=["GET"])
    app.add_url_rule(callback_path, "oauth_callback", callback, methods=["GET"])
    app.add_url_rule("/oauth/status", "oauth_status", status, methods=["GET"])
    return app
