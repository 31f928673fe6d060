from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.domain.schemas import CartLine, OrderCreate, PersistedCartEntry, Product


def test_product_reads_camel_case_and_rounds_price():
    product = Product.model_validate(
        {"id": "1", "name": "Mouse", "price": 49.5, "categoryId": "c1", "reviewCount": 3}
    )
    assert product.price == Decimal("49.50")
    assert product.category_id == "c1"
    assert product.review_count == 3


def test_product_rejects_garbage_price():
    with pytest.raises(ValidationError):
        Product.model_validate({"id": "1", "name": "Mouse", "price": "abc"})


def test_cart_line_requires_positive_quantity():
    product = Product(id="A", name="A", price=Decimal("1.00"))
    with pytest.raises(ValidationError):
        CartLine(product_id="A", quantity=0, product=product)


def test_order_create_strips_and_drops_blank_notes():
    order = OrderCreate(
        items=[PersistedCartEntry(product_id="A", quantity=1)],
        address="  12 Long Street, Town  ",
        phone_number=" 555123456 ",
        notes="   ",
    )
    assert order.address == "12 Long Street, Town"
    assert order.to_wire() == {
        "items": [{"productId": "A", "quantity": 1}],
        "address": "12 Long Street, Town",
        "phoneNumber": "555123456",
    }
