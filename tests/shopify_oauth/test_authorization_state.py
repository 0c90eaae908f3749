"""Tests for authorization state records."""

from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest

from shopify_oauth.authorization_state import AuthorizationState, ShopAuthorizationState


class TestAuthorizationState:
    """Tests for the generic AuthorizationState record."""

    def test_defaults(self):
        """A new record holds nothing but what it was given."""
        state = AuthorizationState(callback="https://app.example.com/cb")

        assert state.callback == "https://app.example.com/cb"
        assert state.access_token is None
        assert state.refresh_token is None
        assert state.scope == set()
        assert state.is_deleted is False

    def test_update_from_shopify_response(self):
        """Shopify's comma-separated scope string is split into a set."""
        state = AuthorizationState()
        state.update_from_token_response(
            {"access_token": "shpat_123", "scope": "read_orders,write_products"}
        )

        assert state.access_token == "shpat_123"
        assert state.scope == {"read_orders", "write_products"}
        assert state.access_token_issue_date_utc is not None
        assert state.access_token_expiration_utc is None
        assert state.is_expired is False

    def test_update_with_expiry_and_refresh_token(self):
        """expires_in and refresh_token are applied when present."""
        state = AuthorizationState(refresh_token="old_refresh")
        state.update_from_token_response(
            {"access_token": "a", "expires_in": 3600, "refresh_token": "new_refresh"}
        )

        assert state.refresh_token == "new_refresh"
        lifetime = state.access_token_expiration_utc - state.access_token_issue_date_utc
        assert lifetime == timedelta(seconds=3600)
        assert state.expires_within(7200) is True
        assert state.expires_within(60) is False

    def test_update_keeps_refresh_token_when_not_returned(self):
        """An existing refresh token survives a response without one."""
        state = AuthorizationState(refresh_token="keep_me")
        state.update_from_token_response({"access_token": "a"})

        assert state.refresh_token == "keep_me"

    def test_update_requires_access_token(self):
        """A response without access_token is rejected."""
        with pytest.raises(KeyError):
            AuthorizationState().update_from_token_response({"scope": "read_orders"})

    def test_is_expired(self):
        """is_expired reflects a past expiration."""
        state = AuthorizationState(
            access_token="a",
            access_token_expiration_utc=datetime.now(timezone.utc) - timedelta(minutes=1),
        )

        assert state.is_expired is True

    def test_delete_clears_tokens(self):
        """delete forgets tokens and marks the record deleted."""
        state = AuthorizationState(access_token="a", refresh_token="r", scope={"read_orders"})
        state.delete()

        assert state.access_token is None
        assert state.refresh_token is None
        assert state.scope == set()
        assert state.is_deleted is True


class TestShopAuthorizationStateWithoutDelegate:
    """ShopAuthorizationState wrapping no record (denied authorization)."""

    @pytest.fixture
    def state(self):
        return ShopAuthorizationState("acme-store", None)

    def test_getters_return_none(self, state):
        """Every getter returns None."""
        assert state.access_token is None
        assert state.access_token_expiration_utc is None
        assert state.access_token_issue_date_utc is None
        assert state.callback is None
        assert state.refresh_token is None
        assert state.scope is None

    def test_shop_name_still_available(self, state):
        """shop_name is returned without a delegate."""
        assert state.shop_name == "acme-store"

    def test_not_authorized(self, state):
        """A denied authorization is not authorized."""
        assert state.is_authorized is False

    def test_writes_are_dropped(self, state):
        """Writes without a delegate are silently ignored."""
        state.access_token = "abc"
        state.refresh_token = "r"
        state.callback = "https://app.example.com/cb"
        state.access_token_expiration_utc = datetime.now(timezone.utc)
        state.access_token_issue_date_utc = datetime.now(timezone.utc)

        assert state.access_token is None
        assert state.refresh_token is None
        assert state.callback is None

    def test_delete_and_save_do_not_raise(self, state):
        """delete and save_changes are no-ops."""
        state.delete()
        state.save_changes()


class TestShopAuthorizationStateWithDelegate:
    """ShopAuthorizationState wrapping a populated record."""

    @pytest.fixture
    def internal(self):
        return AuthorizationState(
            callback="https://app.example.com/cb",
            access_token="shpat_1",
            refresh_token="refresh_1",
            scope={"read_orders"},
        )

    @pytest.fixture
    def state(self, internal):
        return ShopAuthorizationState("acme-store", internal)

    def test_reads_pass_through(self, state, internal):
        """Getters return the delegate's values."""
        assert state.access_token == "shpat_1"
        assert state.refresh_token == "refresh_1"
        assert state.callback == "https://app.example.com/cb"
        assert state.scope is internal.scope
        assert state.is_authorized is True

    def test_write_then_read_access_token(self, state, internal):
        """Writing access_token forwards to the delegate."""
        state.access_token = "abc"

        assert state.access_token == "abc"
        assert internal.access_token == "abc"

    def test_write_timestamps(self, state, internal):
        """Timestamp writes forward to the delegate."""
        issued = datetime(2026, 1, 1, tzinfo=timezone.utc)
        state.access_token_issue_date_utc = issued
        state.access_token_expiration_utc = issued + timedelta(days=1)

        assert internal.access_token_issue_date_utc == issued
        assert internal.access_token_expiration_utc == issued + timedelta(days=1)

    def test_scope_is_read_only(self, state, internal):
        """scope cannot be assigned through the wrapper."""
        with pytest.raises(AttributeError):
            state.scope = {"write_orders"}

        assert internal.scope == {"read_orders"}

    def test_shop_name_is_read_only(self, state):
        """shop_name cannot be reassigned."""
        with pytest.raises(AttributeError):
            state.shop_name = "other-shop"

    def test_shop_name_not_forwarded(self, state, internal):
        """The shop name lives only on the wrapper."""
        assert not hasattr(internal, "shop_name")

    def test_delete_forwards(self, internal):
        """delete forwards to the delegate."""
        internal_mock = mock.Mock(spec=AuthorizationState)
        ShopAuthorizationState("acme-store", internal_mock).delete()

        internal_mock.delete.assert_called_once_with()

    def test_save_changes_forwards(self):
        """save_changes forwards to the delegate."""
        internal_mock = mock.Mock(spec=AuthorizationState)
        ShopAuthorizationState("acme-store", internal_mock).save_changes()

        internal_mock.save_changes.assert_called_once_with()

    def test_repr_hides_tokens(self, state):
        """repr names the shop but not the token."""
        text = repr(state)

        assert "acme-store" in text
        assert "shpat_1" not in text
