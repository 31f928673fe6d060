from decimal import Decimal

import pytest
import requests

from storefront.domain.schemas import AuthSession, CartLine, Product, User
from storefront.repos.local_cart_repo import LocalCartRepo
from storefront.repos.session_repo import SessionRepo
from storefront.repos.storage import MemoryStorage
from storefront.services.api_client import ApiError
from storefront.services.auth_service import AuthService
from storefront.services.cart_reconciler import CartReconciler
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService
from storefront.services.product_resolver import ProductResolver


def make_product(pid: str, price: str, name: str | None = None, stock: int = 10) -> Product:
    return Product(id=pid, name=name or f"Product {pid}", price=Decimal(price), stock=stock)


CATALOG = {
    "A": make_product("A", "10.00"),
    "B": make_product("B", "5.00"),
    "C": make_product("C", "7.25"),
}

USER = User(id="u1", name="Test", email="test@example.com")


class FakeProductClient:
    def __init__(self, catalog):
        self.catalog = dict(catalog)
        self.calls = []
        self.offline = False

    def fetch_product(self, product_id: str) -> Product:
        self.calls.append(product_id)
        if self.offline:
            raise requests.ConnectionError("network down")
        if product_id not in self.catalog:
            raise ApiError("Product not found", status_code=404)
        return self.catalog[product_id]


class FakeCartClient:
    """Koszyk po stronie serwera trzymany w slowniku."""

    def __init__(self, catalog):
        self.catalog = dict(catalog)
        self.server = {}
        self.calls = []
        self.fail = set()

    def _maybe_fail(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise requests.ConnectionError(f"{name} failed")

    def fetch_all(self):
        self._maybe_fail("fetch_all")
        return [
            CartLine(product_id=pid, quantity=qty, product=self.catalog[pid])
            for pid, qty in self.server.items()
        ]

    def add(self, product_id, quantity=1):
        self._maybe_fail("add")
        self.server[product_id] = self.server.get(product_id, 0) + quantity

    def update(self, product_id, quantity):
        self._maybe_fail("update")
        if product_id not in self.server:
            raise ApiError("Item not in cart", status_code=404)
        self.server[product_id] = quantity

    def remove(self, product_id):
        self._maybe_fail("remove")
        self.server.pop(product_id, None)

    def clear(self):
        self._maybe_fail("clear")
        self.server.clear()


class FakeAuthApi:
    def __init__(self):
        self.token_counter = 0

    def post(self, path, json=None):
        if path == "/auth/signin":
            if json["password"] != "secret":
                raise ApiError("Invalid email or password", status_code=401)
            self.token_counter += 1
            return {"token": f"tok-{self.token_counter}", "user": USER.to_wire()}
        if path == "/auth/signup":
            self.token_counter += 1
            return {
                "token": f"tok-{self.token_counter}",
                "user": {"id": "u2", "name": json["name"], "email": json["email"]},
            }
        raise AssertionError(f"unexpected POST {path}")


class CartStack:
    def __init__(self, storage, authenticated=False, merge_on_login=False):
        self.storage = storage
        self.session_repo = SessionRepo(storage)
        if authenticated:
            self.session_repo.save(AuthSession(token="tok-0", user=USER))
        self.local_repo = LocalCartRepo(storage)
        self.products = FakeProductClient(CATALOG)
        self.remote = FakeCartClient(CATALOG)
        self.notifications = NotificationService()
        self.sent = []
        self.notifications.subscribe(self.sent.append)
        self.auth = AuthService(FakeAuthApi(), self.session_repo)
        self.resolver = ProductResolver(self.products, self.local_repo)
        self.reconciler = CartReconciler(
            self.remote, self.resolver, self.local_repo, merge_on_login=merge_on_login
        )
        self.cart = CartService(
            self.auth, self.reconciler, self.remote, self.local_repo, self.notifications
        )

    def start(self):
        self.cart.load()
        return self

    def persisted(self):
        return {e.product_id: e.quantity for e in self.local_repo.load()}

    def quantities(self):
        return {line.product_id: line.quantity for line in self.cart.items}


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def local_stack(storage):
    return CartStack(storage).start()


@pytest.fixture
def remote_stack(storage):
    return CartStack(storage, authenticated=True).start()
