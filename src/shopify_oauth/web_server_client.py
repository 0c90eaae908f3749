"""
OAuth 2.0 web server client.

This module implements the authorization code grant from the client side:
- Authorization URL generation (with CSRF state)
- Callback processing (authorization code -> access token)
- Token refresh
- Authorization header for API calls

Callbacks are read from the current Flask request unless the caller passes
the query parameters explicitly.
"""

import logging
import secrets
import threading
import time
from typing import Dict, Iterable, Mapping, Optional, Tuple
from urllib.parse import urlencode

import requests
from flask import has_request_context, request

from .authorization_state import AuthorizationState
from .endpoints import EndpointSet
from .exceptions import (
    AuthorizationError,
    TokenExchangeError,
    TokenNotAvailableError,
    TokenRefreshError,
)
from .token_tracker import ClientAuthorizationTracker

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"

# Issued states older than this are forgotten and rejected
STATE_TTL_SECONDS = 600
MAX_PENDING_STATES = 1000


class WebServerClient:
    """
    OAuth 2.0 client for web applications.

    Responsibilities:
    - Build the URL the user-agent is redirected to
    - Remember which state values were issued and are awaiting a callback
    - Exchange authorization codes for tokens at the token endpoint
    - Refresh access tokens

    Errors from the token endpoint are raised, never retried.
    """

    def __init__(
        self,
        endpoints: EndpointSet,
        client_id: str,
        client_secret: Optional[str],
        authorization_tracker: Optional[ClientAuthorizationTracker] = None,
        timeout: int = 30,
        verify_state: bool = True,
        state_ttl: int = STATE_TTL_SECONDS,
        max_pending_states: int = MAX_PENDING_STATES,
    ):
        """
        Initialize web server client.

        Args:
            endpoints: Authorization server description
            client_id: OAuth client ID
            client_secret: OAuth client secret
            authorization_tracker: Supplies the record each callback is
                processed into (a bare AuthorizationState if not provided)
            timeout: Seconds to wait on the token endpoint
            verify_state: Reject callbacks whose state was not issued here
            state_ttl: Seconds an issued state stays valid
            max_pending_states: Most states kept awaiting a callback; the
                oldest are dropped beyond this
        """
        self.endpoints = endpoints
        self.client_id = client_id
        self.client_secret = client_secret
        self.authorization_tracker = authorization_tracker
        self.timeout = timeout
        self.verify_state = verify_state
        self.state_ttl = state_ttl
        self.max_pending_states = max_pending_states
        # state -> (redirect_uri, issued_at); insertion order is issue order
        self._pending: Dict[str, Tuple[Optional[str], float]] = {}
        self._pending_lock = threading.Lock()

    @property
    def pending_states(self) -> int:
        """Number of issued state values still awaiting a callback."""
        with self._pending_lock:
            return len(self._pending)

    def request_user_authorization(
        self,
        scope: Optional[Iterable[str]] = None,
        redirect_uri: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Tuple[str, str]:
        """
        Generate the authorization URL to redirect the user to.

        Args:
            scope: Access scopes to request
            redirect_uri: Where the authorization server sends the user back to
            state: CSRF state value (a random one is generated if not provided)

        Returns:
            Tuple of (authorization URL, state)
        """
        state = state or secrets.token_urlsafe(24)
        params = {"client_id": self.client_id}
        if scope:
            params["scope"] = ",".join(scope)
        if redirect_uri:
            params["redirect_uri"] = redirect_uri
        params["state"] = state

        with self._pending_lock:
            self._prune_pending(time.monotonic())
            self._pending.pop(state, None)
            self._pending[state] = (redirect_uri, time.monotonic())
            while len(self._pending) > self.max_pending_states:
                self._pending.pop(next(iter(self._pending)))

        url = f"{self.endpoints.authorization_endpoint}?{urlencode(params)}"
        logger.debug(f"Generated authorization URL: {url}")
        return url, state

    def process_user_authorization(
        self,
        request_args: Optional[Mapping[str, str]] = None,
        callback_url: Optional[str] = None,
    ) -> Optional[AuthorizationState]:
        """
        Process an incoming authorization callback.

        Args:
            request_args: Callback query parameters (read from the current
                Flask request if not provided)
            callback_url: URL the callback arrived at (defaults to the
                redirect URI the state was issued with, then the request URL)

        Returns:
            AuthorizationState with tokens, or None if the user denied access
            or the request is not an authorization response

        Raises:
            AuthorizationError: If the state was not issued by this client
            TokenExchangeError: If the code could not be exchanged
        """
        if request_args is None:
            if not has_request_context():
                raise AuthorizationError(
                    "No callback parameters given and no active request to read them from"
                )
            request_args = request.args
            request_url = request.base_url
        else:
            request_url = None

        code = request_args.get("code")
        error = request_args.get("error")
        if not code and not error:
            logger.info("Request is not an authorization response")
            return None

        state = request_args.get("state")
        if error:
            # A denial needs no valid state; just retire the one it carries
            self._discard_state(state)
            error_desc = request_args.get("error_description", "Unknown error")
            logger.info(f"Authorization denied: {error} - {error_desc}")
            return None

        redirect_uri = self._consume_state(state)
        callback_url = callback_url or redirect_uri or request_url

        authorization = self._new_authorization_state(callback_url, state)
        self._exchange_code(code, redirect_uri, authorization)
        authorization.save_changes()
        return authorization

    def refresh_authorization(self, authorization: AuthorizationState) -> AuthorizationState:
        """
        Refresh an access token using the refresh token.

        Args:
            authorization: Record holding the refresh token; updated in place

        Returns:
            The updated authorization record

        Raises:
            TokenNotAvailableError: If the record holds no refresh token
            TokenRefreshError: If the token endpoint rejects the refresh
        """
        if not authorization.refresh_token:
            raise TokenNotAvailableError(
                "No refresh token available. Run authorization flow first."
            )

        logger.info("Refreshing access token")
        data = self._post_token_request(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "refresh_token",
                "refresh_token": authorization.refresh_token,
            },
            TokenRefreshError,
            "Token refresh",
        )
        try:
            authorization.update_from_token_response(data)
        except (KeyError, ValueError) as e:
            logger.error(f"Invalid response from token endpoint: {e}")
            raise TokenRefreshError(f"Invalid response from token endpoint: {e}") from e

        authorization.save_changes()
        logger.info("Successfully refreshed tokens")
        return authorization

    def authorization_header(self, authorization) -> Dict[str, str]:
        """
        Get the header that authorizes an Admin API request.

        Args:
            authorization: Any authorization state exposing access_token

        Returns:
            Dict with the access token header

        Raises:
            TokenNotAvailableError: If no access token is held
        """
        token = authorization.access_token if authorization is not None else None
        if not token:
            raise TokenNotAvailableError("No access token available. Run authorization flow first.")
        return {ACCESS_TOKEN_HEADER: token}

    def _prune_pending(self, now: float) -> None:
        """Drop expired states. Caller holds the pending lock."""
        expired = [s for s, (_, issued) in self._pending.items() if now - issued > self.state_ttl]
        for s in expired:
            del self._pending[s]

    def _discard_state(self, state: Optional[str]) -> None:
        if state is None:
            return
        with self._pending_lock:
            self._pending.pop(state, None)

    def _consume_state(self, state: Optional[str]) -> Optional[str]:
        """Pop an issued state, returning the redirect URI it was issued with."""
        with self._pending_lock:
            self._prune_pending(time.monotonic())
            if state is not None and state in self._pending:
                return self._pending.pop(state)[0]

        if self.verify_state:
            if state is None:
                raise AuthorizationError("Callback carried no state parameter")
            raise AuthorizationError("Callback state was not issued by this client or has expired")
        return None

    def _new_authorization_state(
        self, callback_url: Optional[str], state: Optional[str]
    ) -> AuthorizationState:
        if self.authorization_tracker is None:
            return AuthorizationState(callback=callback_url)
        return self.authorization_tracker.get_authorization_state(callback_url, state)

    def _exchange_code(
        self, code: str, redirect_uri: Optional[str], authorization: AuthorizationState
    ) -> None:
        logger.info("Exchanging authorization code for tokens")
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
        }
        if redirect_uri:
            payload["redirect_uri"] = redirect_uri

        data = self._post_token_request(payload, TokenExchangeError, "Token exchange")
        try:
            authorization.update_from_token_response(data)
        except (KeyError, ValueError) as e:
            logger.error(f"Invalid response from token endpoint: {e}")
            raise TokenExchangeError(f"Invalid response from token endpoint: {e}") from e

        logger.info("Successfully obtained tokens")

    def _post_token_request(self, payload: Dict, error_cls, action: str) -> Dict:
        try:
            response = requests.post(
                self.endpoints.token_endpoint,
                headers={"Accept": "application/json"},
                data=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Network error during {action.lower()}: {e}")
            raise error_cls(f"Network error during {action.lower()}: {e}") from e

        if response.status_code != 200:
            logger.error(f"{action} failed: {response.status_code} - {response.text}")
            raise error_cls(
                f"{action} failed with status {response.status_code}. "
                f"Check that your client_id and client_secret are correct."
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid response from token endpoint: {e}")
            raise error_cls(f"Invalid response from token endpoint: {e}") from e

        if not isinstance(data, dict):
            logger.error(f"Invalid response from token endpoint: {type(data).__name__} body")
            raise error_cls(
                f"Invalid response from token endpoint: expected a JSON object, "
                f"got {type(data).__name__}"
            )
        return data
