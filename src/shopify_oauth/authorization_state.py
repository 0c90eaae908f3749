"""
Authorization state records.

AuthorizationState is the generic OAuth2 record produced while processing a
callback. ShopAuthorizationState wraps one of those records together with the
shop it belongs to. The wrapper tolerates a missing record: that is what a
denied authorization looks like, and every read then returns None while every
write, save and delete is dropped.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Set

logger = logging.getLogger(__name__)


def _parse_scope(raw: Any) -> Set[str]:
    # Shopify answers with a comma-separated string; other servers use spaces
    if not raw:
        return set()
    if isinstance(raw, str):
        return {part.strip() for part in raw.replace(" ", ",").split(",") if part.strip()}
    return {str(part) for part in raw}


@dataclass
class AuthorizationState:
    """
    Generic OAuth2 authorization record.

    Attributes:
        callback: Redirect URL the authorization server returned the user to
        access_token: Access token for API calls
        access_token_expiration_utc: When the access token expires (None = never)
        access_token_issue_date_utc: When the access token was issued
        refresh_token: Token for obtaining a new access token, if granted
        scope: Scopes granted by the authorization server
        is_deleted: Set once delete() has been called
    """

    callback: Optional[str] = None
    access_token: Optional[str] = None
    access_token_expiration_utc: Optional[datetime] = None
    access_token_issue_date_utc: Optional[datetime] = None
    refresh_token: Optional[str] = None
    scope: Set[str] = field(default_factory=set)
    is_deleted: bool = False

    @property
    def is_expired(self) -> bool:
        """
        Check if access token is expired.

        Returns:
            True if an expiration is known and has passed, False otherwise
        """
        return self.expires_within(0)

    def expires_within(self, seconds: int) -> bool:
        """
        Check if token expires within given seconds.

        Offline shop tokens carry no expiration and never expire.

        Args:
            seconds: Number of seconds to check

        Returns:
            True if token will expire within the specified time, False otherwise
        """
        if self.access_token_expiration_utc is None:
            return False
        buffer_time = datetime.now(timezone.utc) + timedelta(seconds=seconds)
        return buffer_time >= self.access_token_expiration_utc

    def update_from_token_response(self, data: Mapping[str, Any]) -> None:
        """
        Apply a token endpoint response to this record.

        Args:
            data: Decoded JSON body from the token endpoint

        Raises:
            KeyError: If the response carries no access_token
            ValueError: If expires_in is not a number
        """
        issued = datetime.now(timezone.utc)
        self.access_token = data["access_token"]
        self.access_token_issue_date_utc = issued

        expires_in = data.get("expires_in")
        self.access_token_expiration_utc = (
            issued + timedelta(seconds=int(expires_in)) if expires_in is not None else None
        )

        # Refresh token may or may not be returned; keep existing if not
        if data.get("refresh_token"):
            self.refresh_token = data["refresh_token"]

        if "scope" in data:
            self.scope = _parse_scope(data["scope"])

    def delete(self) -> None:
        """Forget the tokens held by this record."""
        self.access_token = None
        self.access_token_expiration_utc = None
        self.access_token_issue_date_utc = None
        self.refresh_token = None
        self.scope = set()
        self.is_deleted = True

    def save_changes(self) -> None:
        """
        Persist changes to this record.

        The base record lives only in memory, so there is nothing to write.
        Subclasses backed by a session store override this.
        """
        logger.debug("save_changes called on in-memory authorization state")


class ShopAuthorizationState:
    """
    Authorization state that also carries the shop it was issued for.

    Every token field is forwarded to the wrapped record. The shop name lives
    only on the wrapper.
    """

    def __init__(self, shop_name: str, internal_state: Optional[AuthorizationState]):
        self._shop_name = shop_name
        self._internal = internal_state

    def __repr__(self) -> str:
        return (
            f"ShopAuthorizationState(shop_name={self._shop_name!r}, "
            f"authorized={self.is_authorized})"
        )

    @property
    def shop_name(self) -> str:
        return self._shop_name

    @property
    def is_authorized(self) -> bool:
        """True when the wrapped record holds an access token."""
        return bool(self.access_token)

    def _get(self, name: str) -> Any:
        if self._internal is None:
            return None
        return getattr(self._internal, name)

    def _set(self, name: str, value: Any) -> None:
        if self._internal is None:
            logger.debug(f"Dropping write to {name} for {self._shop_name}: no authorization state")
            return
        setattr(self._internal, name, value)

    @property
    def access_token(self) -> Optional[str]:
        return self._get("access_token")

    @access_token.setter
    def access_token(self, value: Optional[str]) -> None:
        self._set("access_token", value)

    @property
    def access_token_expiration_utc(self) -> Optional[datetime]:
        return self._get("access_token_expiration_utc")

    @access_token_expiration_utc.setter
    def access_token_expiration_utc(self, value: Optional[datetime]) -> None:
        self._set("access_token_expiration_utc", value)

    @property
    def access_token_issue_date_utc(self) -> Optional[datetime]:
        return self._get("access_token_issue_date_utc")

    @access_token_issue_date_utc.setter
    def access_token_issue_date_utc(self, value: Optional[datetime]) -> None:
        self._set("access_token_issue_date_utc", value)

    @property
    def callback(self) -> Optional[str]:
        return self._get("callback")

    @callback.setter
    def callback(self, value: Optional[str]) -> None:
        self._set("callback", value)

    @property
    def refresh_token(self) -> Optional[str]:
        return self._get("refresh_token")

    @refresh_token.setter
    def refresh_token(self, value: Optional[str]) -> None:
        self._set("refresh_token", value)

    @property
    def scope(self) -> Optional[Set[str]]:
        """Scopes granted by the authorization server (read-only)."""
        return self._get("scope")

    def delete(self) -> None:
        if self._internal is None:
            return
        self._internal.delete()

    def save_changes(self) -> None:
        if self._internal is None:
            return
        self._internal.save_changes()
