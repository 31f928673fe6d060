# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional
from decimal import Decimal, InvalidOperation
from datetime import datetime


class WireModel(BaseModel):
    """Baza dla modeli przesylanych jako JSON (camelCase na wejsciu i wyjsciu)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Product(WireModel):
    """Snapshot produktu z katalogu (tylko do odczytu)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    price: Decimal = Field(..., ge=0, decimal_places=2)
    image: str = ""
    category_id: str = ""
    subcategory_id: str = ""
    stock: int = Field(0, ge=0)
    rating: float = 0.0
    review_count: int = 0

    @field_validator("price", mode="before")
    @classmethod
    def _round_price(cls, v):
        # JSON podaje float, np. 49.5 -> Decimal("49.50")
        try:
            return Decimal(str(v)).quantize(Decimal("0.01"))
        except InvalidOperation:
            raise ValueError(f"Invalid price: {v!r}")


class PersistedCartEntry(WireModel):
    """Uproszczona pozycja koszyka zapisywana lokalnie (bez danych produktu)."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class CartLine(WireModel):
    """Pozycja koszyka w pamieci: produkt + ilosc."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    product: Product

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity

    def to_entry(self) -> PersistedCartEntry:
        return PersistedCartEntry(product_id=self.product_id, quantity=self.quantity)


class RemoteCartLine(WireModel):
    """Pozycja zwracana przez GET /cart (serwer sam dolacza produkt)."""

    product_id: str
    quantity: int = Field(..., ge=1)
    product: Product

    def to_line(self) -> CartLine:
        return CartLine(product_id=self.product_id, quantity=self.quantity, product=self.product)


class User(WireModel):
    id: str
    name: str
    email: str
    is_admin: bool = False


class AuthSession(WireModel):
    token: str = Field(..., min_length=1)
    user: User


class OrderCreate(WireModel):
    """Payload zamowienia za pobraniem (POST /orders)."""

    items: List[PersistedCartEntry] = Field(..., min_length=1)
    address: str = Field(..., min_length=10)
    phone_number: str = Field(..., min_length=8)
    notes: Optional[str] = None

    @field_validator("address", "phone_number", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("notes", mode="before")
    @classmethod
    def _blank_notes(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v or None


class OrderOut(WireModel):
    id: str
    status: str
    total_amount: Decimal
    address: str
    phone_number: str
    items: List[PersistedCartEntry] = Field(default_factory=list)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("items", mode="before")
    @classmethod
    def _simplify_items(cls, v):
        # serwer moze zwrocic pozycje z dolaczonym produktem
        if isinstance(v, list):
            return [
                {"productId": i.get("productId", i.get("product_id")), "quantity": i.get("quantity")}
                if isinstance(i, dict) else i
                for i in v
            ]
        return v


class Notification(BaseModel):
    level: Literal["success", "error"]
    description: str
    title: Optional[str] = None
