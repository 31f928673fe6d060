# storefront/services/cart_client.py
from typing import List
from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError

from storefront.domain.schemas import CartLine, RemoteCartLine
from storefront.services.api_client import ApiClient, ApiError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_REMOTE_LINES = TypeAdapter(List[RemoteCartLine])


class CartClient:
    """
    CRUD na koszyku zalogowanego uzytkownika (/cart).
    Po kazdej udanej mutacji wywolujacy pobiera pelny stan przez fetch_all().
    """

    def __init__(self, api: ApiClient):
        self.api = api

    def fetch_all(self) -> List[CartLine]:
        data = self.api.get("/cart")
        try:
            lines = _REMOTE_LINES.validate_python(data or [])
        except ValidationError as e:
            raise ApiError(f"Malformed cart response: {e.error_count()} invalid field(s)")
        return [line.to_line() for line in lines]

    def add(self, product_id: str, quantity: int = 1) -> None:
        self.api.post("/cart", json={"productId": product_id, "quantity": quantity})

    def update(self, product_id: str, quantity: int) -> None:
        self.api.patch(f"/cart/{quote(product_id, safe='')}", json={"quantity": quantity})

    def remove(self, product_id: str) -> None:
        self.api.delete(f"/cart/{quote(product_id, safe='')}")

    def clear(self) -> None:
        self.api.delete("/cart")
