import pytest

from jwt_graphql.storage import TOKEN_KEY, TokenStore


def test_store_starts_empty():
    store = TokenStore()
    assert store.get() is None
    assert TOKEN_KEY not in store
    assert len(store) == 0


def test_store_set_replaces_token():
    store = TokenStore()
    store.set("first")
    store.set("second")
    assert store.get() == "second"
    assert TOKEN_KEY in store
    assert len(store) == 1


def test_store_clear():
    store = TokenStore()
    store.set("tok")
    store.clear()
    assert store.get() is None


def test_store_rejects_empty_token():
    with pytest.raises(ValueError):
        TokenStore().set("")


def test_stores_are_independent():
    a = TokenStore()
    b = TokenStore()
    a.set("tok-a")
    assert b.get() is None
