# storefront/services/cart_service.py
from decimal import Decimal
from typing import Callable, Dict, Iterable, List

import redis
import requests

from storefront.domain.schemas import CartLine, Product
from storefront.repos.local_cart_repo import LocalCartRepo
from storefront.services.api_client import ApiError
from storefront.services.auth_service import AuthService
from storefront.services.cart_client import CartClient
from storefront.services.cart_reconciler import CartReconciler
from storefront.services.notification_service import NotificationService
from storefront.utils.listeners import Listeners
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

REMOTE_ERRORS = (ApiError, requests.RequestException)


class CartService:
    """
    Jedyny punkt wejscia dla koszyka (fasada).

    Trzyma jedyna kopie koszyka w pamieci. Kazda mutacja idzie:
    - zalogowany: najpierw na serwer, potem fetch_all() i podmiana stanu
      (stan z serwera zawsze wygrywa, bez optymistycznych zmian)
    - niezalogowany: zmiana w pamieci + zapis uproszczonego snapshotu lokalnie

    Kazda proba mutacji konczy sie dokladnie jednym powiadomieniem.
    """

    def __init__(
        self,
        auth: AuthService,
        reconciler: CartReconciler,
        cart_client: CartClient,
        local_repo: LocalCartRepo,
        notifications: NotificationService,
    ):
        self.auth = auth
        self.reconciler = reconciler
        self.cart_client = cart_client
        self.local_repo = local_repo
        self.notifications = notifications

        self._lines: Dict[str, CartLine] = {}
        self._loading = False
        # stan w pamieci mogl sie rozjechac z serwerem (nieudany fetch_all)
        self._stale = False
        self._listeners: Listeners[List[CartLine]] = Listeners()
        self._unsubscribe_auth = auth.subscribe(self._on_auth_change)

    # =====================================================
    # QUERY
    # =====================================================
    @property
    def items(self) -> List[CartLine]:
        return [line.model_copy() for line in self._lines.values()]

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total_price(self) -> Decimal:
        total = sum((line.subtotal for line in self._lines.values()), Decimal("0.00"))
        return total.quantize(Decimal("0.01"))

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def authenticated(self) -> bool:
        return self.auth.is_authenticated

    def get_line(self, product_id: str) -> CartLine | None:
        line = self._lines.get(product_id)
        return line.model_copy() if line else None

    def subscribe(self, listener: Callable[[List[CartLine]], None]) -> Callable[[], None]:
        return self._listeners.subscribe(listener)

    # =====================================================
    # LOADING
    # =====================================================
    def load(self, login: bool = False) -> None:
        """Odbudowuje koszyk z wlasciwego zrodla dla biezacego stanu sesji."""
        self._loading = True
        try:
            lines = self.reconciler.load(self.auth.is_authenticated, login=login)
        except (redis.RedisError,) + REMOTE_ERRORS as e:
            # zalogowany: bez koszyka z serwera nie pokazujemy lokalnych pozycji
            logger.error(f"Failed to load cart: {e}")
            self.notifications.error("Failed to load your cart")
            self._stale = self.auth.is_authenticated
            lines = []
        else:
            self._stale = False
        finally:
            self._loading = False
        self._replace(lines)

    def close(self) -> None:
        self._unsubscribe_auth()

    def _on_auth_change(self, authenticated: bool) -> None:
        logger.info(f"Auth state changed (authenticated={authenticated}), reconciling cart")
        # koszyk z poprzedniego trybu jest odrzucany w calosci
        self._replace([])
        self.load(login=authenticated)

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_to_cart(self, product: Product, quantity: int = 1) -> bool:
        if quantity < 1:
            self.notifications.error("Quantity must be at least 1")
            return False

        if self.auth.is_authenticated:
            self._refresh_if_stale()
            return self._remote(
                lambda: self.cart_client.add(product.id, quantity),
                success=f"Added {product.name} to your cart",
                failure="Failed to add item to cart",
            )

        lines = self._snapshot()
        existing = lines.get(product.id)
        if existing:
            existing.quantity += quantity
            message = f"Updated {product.name} quantity in your cart"
        else:
            lines[product.id] = CartLine(product_id=product.id, quantity=quantity, product=product)
            message = f"Added {product.name} to your cart"

        return self._local(lines, success=message, failure="Failed to add item to cart")

    def remove_from_cart(self, product_id: str) -> bool:
        if self.auth.is_authenticated:
            self._refresh_if_stale()

        line = self._lines.get(product_id)
        if line is None:
            self.notifications.success("Item was not in your cart")
            return True

        message = f"Removed {line.product.name} from your cart"

        if self.auth.is_authenticated:
            return self._remote(
                lambda: self.cart_client.remove(product_id),
                success=message,
                failure="Failed to remove item from cart",
            )

        lines = self._snapshot()
        del lines[product_id]
        return self._local(lines, success=message, failure="Failed to remove item from cart")

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        # ilosc <= 0 oznacza usuniecie pozycji
        if quantity <= 0:
            return self.remove_from_cart(product_id)

        if self.auth.is_authenticated:
            self._refresh_if_stale()

        line = self._lines.get(product_id)
        if line is None:
            self.notifications.success("Item was not in your cart")
            return True

        message = f"Updated {line.product.name} quantity in your cart"

        if self.auth.is_authenticated:
            return self._remote(
                lambda: self.cart_client.update(product_id, quantity),
                success=message,
                failure="Failed to update cart item",
            )

        lines = self._snapshot()
        lines[product_id].quantity = quantity
        return self._local(lines, success=message, failure="Failed to update cart item")

    def clear_cart(self) -> bool:
        if self.auth.is_authenticated:
            return self._remote(
                self.cart_client.clear,
                success="Cart has been cleared",
                failure="Failed to clear cart",
            )

        return self._local({}, success="Cart has been cleared", failure="Failed to clear cart")

    # =====================================================
    # INTERNAL
    # =====================================================
    def _snapshot(self) -> Dict[str, CartLine]:
        return {pid: line.model_copy() for pid, line in self._lines.items()}

    def _remote(self, mutation: Callable[[], None], success: str, failure: str) -> bool:
        # zapis na serwerze musi sie zakonczyc przed fetch_all()
        try:
            mutation()
        except REMOTE_ERRORS as e:
            logger.error(f"{failure}: {e}")
            message = e.message if isinstance(e, ApiError) and e.message else failure
            self.notifications.error(message)
            return False

        try:
            lines = self.cart_client.fetch_all()
        except REMOTE_ERRORS as e:
            # zapis sie udal; stan w pamieci odswiezy nastepna mutacja
            logger.error(f"Cart refresh after successful write failed: {e}")
            self._stale = True
            self.notifications.error("Cart updated but could not be refreshed")
            return True

        self._stale = False
        self._replace(lines)
        self.notifications.success(success)
        return True

    def _refresh_if_stale(self) -> None:
        if not self._stale:
            return
        try:
            lines = self.cart_client.fetch_all()
        except REMOTE_ERRORS as e:
            logger.warning(f"Cart is still out of sync with backend: {e}")
            return
        logger.info(f"Reloaded {len(lines)} cart lines from backend")
        self._stale = False
        self._replace(lines)

    def _local(self, lines: Dict[str, CartLine], success: str, failure: str) -> bool:
        try:
            self.local_repo.save(line.to_entry() for line in lines.values())
        except redis.RedisError as e:
            logger.error(f"{failure}: {e}")
            self.notifications.error(failure)
            return False

        self._replace(lines.values())
        self.notifications.success(success)
        return True

    def _replace(self, lines: Iterable[CartLine]) -> None:
        self._lines = {line.product_id: line for line in lines}
        self._listeners.emit(self.items)
