# storefront/services/order_service.py
from typing import List, Optional
from urllib.parse import urlencode

from pydantic import TypeAdapter, ValidationError

from storefront.domain.schemas import OrderCreate, OrderOut
from storefront.services.api_client import ApiClient, ApiError
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_ORDERS = TypeAdapter(List[OrderOut])

_FIELD_MESSAGES = {
    "address": "Address must be at least 10 characters long",
    "phone_number": "Phone number must be at least 8 characters long",
    "phoneNumber": "Phone number must be at least 8 characters long",
}


class AuthRequiredError(PermissionError):
    """Operacja wymaga zalogowanego uzytkownika."""


class OrderService:
    """
    Zamowienia za pobraniem (bez bramki platnosci).
    Stan magazynowy i ceny weryfikuje serwer przy tworzeniu zamowienia.
    """

    def __init__(
        self,
        api: ApiClient,
        auth: AuthService,
        cart: CartService,
        notifications: NotificationService,
    ):
        self.api = api
        self.auth = auth
        self.cart = cart
        self.notifications = notifications

    def place_order(self, address: str, phone_number: str, notes: str | None = None) -> OrderOut:
        """
        Use Case: zlozenie zamowienia z biezacego koszyka.

        1. Wymaga sesji (AuthRequiredError, bez zmian stanu)
        2. Waliduje koszyk i dane dostawy
        3. POST /orders
        4. Czysci koszyk
        """
        if not self.auth.is_authenticated:
            raise AuthRequiredError("Please sign in to checkout")

        lines = self.cart.items
        if not lines:
            raise ValueError("Your cart is empty")

        try:
            payload = OrderCreate(
                items=[line.to_entry() for line in lines],
                address=address,
                phone_number=phone_number,
                notes=notes,
            )
        except ValidationError as e:
            raise ValueError(_validation_message(e))

        try:
            data = self.api.post("/orders", json=payload.to_wire())
        except ApiError as e:
            if e.status_code == 401:
                raise AuthRequiredError(
                    "You must be logged in to place an order. Please sign in and try again."
                ) from e
            raise

        order = OrderOut.model_validate(data)
        logger.info(f"Order {order.id} placed ({len(payload.items)} lines, total {order.total_amount})")

        self.notifications.success(
            "Your order has been placed and will be processed soon.",
            title="Order placed successfully!",
        )
        self.cart.clear_cart()
        return order

    def list_my_orders(self, status: Optional[str] = None, page: int = 1, limit: int = 10) -> List[OrderOut]:
        if not self.auth.is_authenticated:
            raise AuthRequiredError("Please sign in to view your orders")

        params = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        data = self.api.get(f"/orders/my-orders?{urlencode(params)}")
        return _ORDERS.validate_python(data or [])


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    field = str(first["loc"][0]) if first.get("loc") else ""
    return _FIELD_MESSAGES.get(field, first.get("msg", "Invalid order"))
