import pytest
import requests

from storefront.repos.storage import MemoryStorage
from storefront.services.api_client import ApiError
from tests.conftest import CATALOG, CartStack

A, B, C = CATALOG["A"], CATALOG["B"], CATALOG["C"]


def test_startup_with_token_loads_server_cart(storage):
    stack = CartStack(storage, authenticated=True)
    stack.remote.server = {"B": 2}
    stack.start()

    assert stack.cart.authenticated is True
    assert stack.quantities() == {"B": 2}


def test_login_discards_local_cart(local_stack):
    local_stack.cart.add_to_cart(A, 2)
    local_stack.remote.server = {"C": 1}

    local_stack.auth.sign_in("test@example.com", "secret")

    # pozycje z trybu lokalnego NIE trafiaja do koszyka po zalogowaniu
    assert "A" not in local_stack.quantities()
    assert local_stack.quantities() == {"C": 1}
    assert local_stack.remote.server == {"C": 1}


def test_login_with_merge_pushes_local_entries():
    stack = CartStack(MemoryStorage(), merge_on_login=True).start()
    stack.cart.add_to_cart(A, 2)
    stack.remote.server = {"A": 1, "C": 1}

    stack.auth.sign_in("test@example.com", "secret")

    assert stack.quantities() == {"A": 3, "C": 1}
    assert stack.storage.get("cart") is None


def test_merge_keeps_entries_the_server_rejected():
    stack = CartStack(MemoryStorage(), merge_on_login=True).start()
    stack.cart.add_to_cart(A, 2)
    stack.remote.fail.add("add")

    stack.auth.sign_in("test@example.com", "secret")

    assert stack.persisted() == {"A": 2}


def test_logout_restores_pre_login_local_cart(local_stack):
    local_stack.cart.add_to_cart(A, 2)
    local_stack.auth.sign_in("test@example.com", "secret")
    local_stack.cart.add_to_cart(B, 5)

    local_stack.auth.sign_out()

    assert local_stack.cart.authenticated is False
    assert local_stack.quantities() == {"A": 2}


def test_logout_then_mutations_use_local_store(remote_stack):
    remote_stack.cart.add_to_cart(A, 1)
    remote_stack.auth.sign_out()
    remote_stack.remote.calls.clear()

    remote_stack.cart.add_to_cart(C, 2)

    assert remote_stack.remote.calls == []
    assert remote_stack.persisted() == {"C": 2}


def test_backend_failure_on_login_does_not_show_local_entries(local_stack):
    local_stack.cart.add_to_cart(A, 1)
    local_stack.sent.clear()
    local_stack.remote.fail.add("fetch_all")

    local_stack.auth.sign_in("test@example.com", "secret")

    assert local_stack.cart.authenticated is True
    assert "A" not in local_stack.quantities()
    assert local_stack.cart.items == []
    assert [n.level for n in local_stack.sent] == ["error"]
    assert local_stack.sent[0].description == "Failed to load your cart"
    # snapshot lokalny zostaje na wylogowanie
    assert local_stack.persisted() == {"A": 1}


def test_next_mutation_reloads_after_failed_login_fetch(local_stack):
    local_stack.remote.server = {"C": 2}
    local_stack.remote.fail.add("fetch_all")
    local_stack.auth.sign_in("test@example.com", "secret")
    assert local_stack.cart.items == []

    local_stack.remote.fail.clear()
    local_stack.sent.clear()

    assert local_stack.cart.remove_from_cart("C") is True
    assert local_stack.remote.server == {}
    assert local_stack.cart.items == []
    assert [n.description for n in local_stack.sent] == ["Removed Product C from your cart"]


def test_reconciler_raises_when_backend_fails(local_stack):
    local_stack.cart.add_to_cart(A, 1)
    local_stack.remote.fail.add("fetch_all")

    with pytest.raises(requests.ConnectionError):
        local_stack.reconciler.load(authenticated=True, login=True)


def test_auth_transition_clears_before_reload(local_stack):
    local_stack.cart.add_to_cart(A, 1)
    local_stack.remote.server = {"C": 1}
    seen = []
    local_stack.cart.subscribe(seen.append)

    local_stack.auth.sign_in("test@example.com", "secret")

    assert seen[0] == []
    assert [(l.product_id, l.quantity) for l in seen[-1]] == [("C", 1)]


def test_failed_sign_in_keeps_local_cart(local_stack):
    local_stack.cart.add_to_cart(A, 1)

    with pytest.raises(ApiError):
        local_stack.auth.sign_in("test@example.com", "wrong")

    assert local_stack.cart.authenticated is False
    assert local_stack.quantities() == {"A": 1}
