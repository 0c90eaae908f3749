"""
In-memory token tracker.

Meant for SHORT TERM USE TOKENS ONLY: tokens and secrets live in process
memory for the lifetime of the owning client and are never written anywhere.

The tracker fills two roles:
- ConsumerTokenManager: token -> secret bookkeeping for the request token /
  access token exchange used by delegation-based protocols
- ClientAuthorizationTracker: hands out a fresh authorization record for each
  OAuth2 callback
"""

import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Tuple

from .authorization_state import AuthorizationState
from .exceptions import ConfigurationError, TokenNotFoundError

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Classification of a tracked token."""

    REQUEST = "request"
    ACCESS = "access"
    INVALID = "invalid"


class ConsumerTokenManager(ABC):
    """Stores token secrets across the request token / access token exchange."""

    @property
    @abstractmethod
    def consumer_key(self) -> str:
        ...

    @property
    @abstractmethod
    def consumer_secret(self) -> Optional[str]:
        ...

    @abstractmethod
    def get_token_secret(self, token: str) -> str:
        ...

    @abstractmethod
    def store_new_request_token(self, token: str, secret: str) -> None:
        ...

    @abstractmethod
    def promote_to_access_token(
        self, request_token: str, access_token: str, access_token_secret: str
    ) -> None:
        ...

    @abstractmethod
    def get_token_type(self, token: str) -> TokenType:
        ...


class ClientAuthorizationTracker(ABC):
    """Supplies the authorization record an OAuth2 callback is processed into."""

    @abstractmethod
    def get_authorization_state(
        self, callback_url: Optional[str], client_state: Optional[str]
    ) -> AuthorizationState:
        ...


class InMemoryTokenTracker(ConsumerTokenManager, ClientAuthorizationTracker):
    """
    Token tracker that only retains tokens in memory.

    A likely application is "sign in with the shop", where the access token
    is used once to identify the shop and then discarded.

    All map access is serialized with a lock so one tracker can back
    callbacks from concurrent requests.
    """

    def __init__(self, consumer_key: str, consumer_secret: Optional[str]):
        """
        Initialize token tracker.

        Args:
            consumer_key: The consumer key (client id)
            consumer_secret: The consumer secret (client secret)

        Raises:
            ConfigurationError: If consumer_key is empty or None
        """
        if not consumer_key:
            raise ConfigurationError("consumer_key cannot be empty")

        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._tokens: Dict[str, Tuple[str, TokenType]] = {}
        self._lock = threading.Lock()

    @property
    def consumer_key(self) -> str:
        return self._consumer_key

    @property
    def consumer_secret(self) -> Optional[str]:
        return self._consumer_secret

    def get_token_secret(self, token: str) -> str:
        """
        Get the secret for a request or access token.

        Args:
            token: The request or access token

        Returns:
            The secret associated with the token

        Raises:
            TokenNotFoundError: If no secret is stored for the token
        """
        with self._lock:
            try:
                return self._tokens[token][0]
            except KeyError:
                raise TokenNotFoundError(token) from None

    def store_new_request_token(self, token: str, secret: str) -> None:
        """
        Store a newly issued, not yet authorized request token.

        Request tokens are never associated with a user account here; that
        association belongs on the access token, once authorization happened.
        An existing entry for the same token is overwritten.

        Args:
            token: The unauthorized request token
            secret: The request token secret
        """
        with self._lock:
            self._tokens[token] = (secret, TokenType.REQUEST)
        logger.debug("Stored new request token")

    def promote_to_access_token(
        self, request_token: str, access_token: str, access_token_secret: str
    ) -> None:
        """
        Expire a request token and store the access token issued for it.

        Removing an unknown request token is a no-op; the access token is
        stored either way.

        Args:
            request_token: The request token being exchanged
            access_token: The newly issued access token
            access_token_secret: The secret for the access token
        """
        with self._lock:
            self._tokens.pop(request_token, None)
            self._tokens[access_token] = (access_token_secret, TokenType.ACCESS)
        logger.debug("Promoted request token to access token")

    def get_token_type(self, token: str) -> TokenType:
        """
        Classify a token as a request token or an access token.

        Args:
            token: The token to classify

        Returns:
            The tag recorded when the token was stored, or TokenType.INVALID
            if the token is not tracked
        """
        with self._lock:
            entry = self._tokens.get(token)
        return entry[1] if entry else TokenType.INVALID

    def get_authorization_state(
        self, callback_url: Optional[str], client_state: Optional[str]
    ) -> AuthorizationState:
        """
        Create the authorization record for an incoming OAuth2 callback.

        Always returns a new record holding only the callback URL; the token
        map is not consulted.

        Args:
            callback_url: URL the authorization server redirected to
            client_state: The state value carried through the authorization request

        Returns:
            Fresh AuthorizationState
        """
        return AuthorizationState(callback=callback_url)
