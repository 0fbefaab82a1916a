"""Unit tests for the in-memory token store."""

from __future__ import annotations

import gc

import pytest
from authserver.models.token import REFRESH_TOKEN_TYPE, OAuth2Details, OAuth2Token
from authserver.services._shared.errors import TokenNotFoundError
from authserver.services._shared.ports import InMemoryTokenStore

from tests.factories import UserDetailsFactory


@pytest.fixture()
def store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


def test_store_and_read_access_token(store, details):
    token = OAuth2Token(value="at-1")
    store.store_access_token(token, details)

    assert store.read_access_token("at-1") == token
    assert store.read_details_for_access_token("at-1") == details
    assert store.get_access_token(details) == token


def test_reads_of_unknown_values_raise_not_found(store, details):
    with pytest.raises(TokenNotFoundError):
        store.read_access_token("missing")
    with pytest.raises(TokenNotFoundError):
        store.read_details_for_access_token("missing")
    with pytest.raises(TokenNotFoundError):
        store.get_access_token(details)
    with pytest.raises(TokenNotFoundError):
        store.read_refresh_token("missing")
    with pytest.raises(TokenNotFoundError):
        store.read_details_for_refresh_token("missing")


def test_store_access_token_moves_reverse_index(store, details):
    store.store_access_token(OAuth2Token(value="old"), details)
    store.store_access_token(OAuth2Token(value="new"), details)

    assert store.get_access_token(details).value == "new"


def test_removing_stale_token_keeps_newer_binding(store, details):
    store.store_access_token(OAuth2Token(value="old"), details)
    store.store_access_token(OAuth2Token(value="new"), details)

    store.remove_access_token("old")

    assert store.get_access_token(details).value == "new"
    with pytest.raises(TokenNotFoundError):
        store.read_access_token("old")


def test_remove_access_token_clears_forward_and_reverse_entries(store, details):
    store.store_access_token(OAuth2Token(value="at-1"), details)
    store.remove_access_token("at-1")

    with pytest.raises(TokenNotFoundError):
        store.get_access_token(details)
    # removing twice is a no-op
    store.remove_access_token("at-1")


def test_refresh_token_lifecycle(store, details):
    rt = OAuth2Token(value="rt-1", token_type=REFRESH_TOKEN_TYPE)
    store.store_refresh_token(rt, details)

    assert store.read_refresh_token("rt-1") == rt
    assert store.read_details_for_refresh_token("rt-1") == details

    store.remove_refresh_token("rt-1")
    with pytest.raises(TokenNotFoundError):
        store.read_refresh_token("rt-1")
    store.remove_refresh_token("rt-1")


def test_binding_lock_is_shared_per_binding(store, details):
    held = store.binding_lock(details)
    assert store.binding_lock(details.public()) is held


def test_idle_binding_locks_are_released(store, oauth_client):
    for i in range(50):
        binding = OAuth2Details(client=oauth_client, user=UserDetailsFactory(username=f"user-{i}"))
        with store.binding_lock(binding):
            pass
    gc.collect()

    assert len(store._binding_locks) == 0


def test_waiting_caller_keeps_the_lock_alive(store, details):
    held = store.binding_lock(details)
    gc.collect()

    assert len(store._binding_locks) == 1
    assert store.binding_lock(details) is held
