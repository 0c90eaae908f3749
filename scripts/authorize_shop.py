#!/usr/bin/env python3
"""
Shopify OAuth Authorization Script

Runs the install/callback app locally, sends the browser to the shop's
authorization page and prints the access token once the callback arrives.
The token is not written anywhere; copy it to wherever your application
keeps credentials.

Usage:
    python scripts/authorize_shop.py

    # Serve the callback over HTTPS with your own certificate
    python scripts/authorize_shop.py --cert fullchain.pem --key privkey.pem

Prerequisites:
    - Environment variables must be set:
        export SHOPIFY_SHOP_NAME="your-shop"
        export SHOPIFY_CLIENT_ID="your_api_key"
        export SHOPIFY_CLIENT_SECRET="your_api_secret"
    - The callback URL (SHOPIFY_CALLBACK_HOST/PORT/PATH) must be listed as an
      allowed redirection URL in the app settings
"""

import argparse
import logging
import sys
import threading
import webbrowser
from typing import Optional

from shopify_oauth import ShopifyAuthClient, ShopifyOAuthConfig, create_callback_app
from shopify_oauth.exceptions import ConfigurationError

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def authorize(
    cert: Optional[str] = None,
    key: Optional[str] = None,
    open_browser: bool = True,
    timeout: int = 300,
) -> int:
    """
    Run the authorization flow for the configured shop.

    Returns:
        Exit code (0 on success, 1 on failure or timeout, 2 on configuration error)
    """
    try:
        config = ShopifyOAuthConfig.from_env()
    except ConfigurationError as e:
        print(f"❌ Configuration error:\n{e}")
        return 2

    client = ShopifyAuthClient.from_config(config)
    done = threading.Event()
    granted = []

    def on_authorized(authorization):
        granted.append(authorization)
        done.set()

    app = create_callback_app(
        client,
        redirect_uri=config.callback_url,
        scopes=config.scopes,
        callback_path=config.callback_path,
        on_authorized=on_authorized,
    )
    ssl_context = (cert, key) if cert and key else None

    server = threading.Thread(
        target=app.run,
        kwargs={
            "host": "0.0.0.0",
            "port": config.callback_port,
            "ssl_context": ssl_context,
            "debug": False,
            "use_reloader": False,
        },
        daemon=True,
    )
    server.start()

    scheme = "https" if ssl_context else "http"
    install_url = f"{scheme}://localhost:{config.callback_port}/oauth/install"

    print("\n" + "=" * 70)
    print(f"SHOPIFY OAUTH AUTHORIZATION - {config.shop_name}")
    print("=" * 70)
    print("\nPlease authorize the application by visiting:")
    print(f"\n  {install_url}\n")

    if open_browser:
        try:
            webbrowser.open(install_url)
        except webbrowser.Error as e:
            logger.warning(f"Could not open browser automatically: {e}")

    print("⏳ Waiting for authorization...")

    if not done.wait(timeout=timeout):
        print(f"❌ No authorization received within {timeout} seconds")
        return 1

    authorization = granted[0]
    print("✅ Authorization successful!")
    print(f"   Shop:         {authorization.shop_name}")
    print(f"   Scope:        {', '.join(sorted(authorization.scope or ()))}")
    print(f"   Access token: {authorization.access_token}")
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Authorize this app against a Shopify shop",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--cert", help="TLS certificate for the callback server")
    parser.add_argument("--key", help="TLS private key for the callback server")
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open the browser automatically",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=300,
        help="Seconds to wait for the callback (default: 300)",
    )

    args = parser.parse_args()

    return authorize(
        cert=args.cert,
        key=args.key,
        open_browser=not args.no_browser,
        timeout=args.timeout,
    )


if __name__ == "__main__":
    sys.exit(main())
