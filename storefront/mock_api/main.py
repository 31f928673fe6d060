# storefront/mock_api/main.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from storefront.utils.logging import configure_logging

configure_logging()
app = FastAPI(title="Storefront API (dev mock)")


PRODUCTS = {
    "1": {"id": "1", "name": "Keyboard", "description": "Mechanical keyboard", "price": 199.99,
          "image": "", "categoryId": "c1", "subcategoryId": "s1", "stock": 10, "rating": 4.5, "reviewCount": 12},
    "2": {"id": "2", "name": "Mouse", "description": "Wireless mouse", "price": 49.50,
          "image": "", "categoryId": "c1", "subcategoryId": "s2", "stock": 25, "rating": 4.1, "reviewCount": 30},
    "3": {"id": "3", "name": "Monitor", "description": "27 inch monitor", "price": 899.00,
          "image": "", "categoryId": "c2", "subcategoryId": "s3", "stock": 3, "rating": 4.8, "reviewCount": 7},
}

# email -> {"password", "user"}
USERS: Dict[str, dict] = {
    "demo@example.com": {
        "password": "demo1234",
        "user": {"id": "u1", "name": "Demo", "email": "demo@example.com", "isAdmin": False},
    },
}
TOKENS: Dict[str, str] = {}                 # token -> user id
CARTS: Dict[str, Dict[str, int]] = {}       # user id -> {productId: quantity}
ORDERS: Dict[str, list] = {}                # user id -> orders


class Credentials(BaseModel):
    email: str
    password: str


class SignupIn(Credentials):
    name: str = Field(..., min_length=1)


class CartItemIn(BaseModel):
    productId: str
    quantity: int = Field(1, ge=1)


class QuantityIn(BaseModel):
    quantity: int = Field(..., ge=1)


class OrderItemIn(BaseModel):
    productId: str
    quantity: int = Field(..., ge=1)


class OrderIn(BaseModel):
    items: list[OrderItemIn] = Field(..., min_length=1)
    address: str = Field(..., min_length=10)
    phoneNumber: str = Field(..., min_length=8)
    notes: Optional[str] = None


@app.exception_handler(HTTPException)
async def _envelope_errors(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.detail})


@app.exception_handler(RequestValidationError)
async def _validation_errors(request: Request, exc: RequestValidationError):
    errors = [
        {"path": [str(p) for p in err["loc"] if p != "body"], "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


def ok(data=None):
    return {"success": True, "data": data}


def current_user_id(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")
    user_id = TOKENS.get(authorization.removeprefix("Bearer "))
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def get_product(product_id: str) -> dict:
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def issue_session(user: dict) -> dict:
    token = uuid.uuid4().hex
    TOKENS[token] = user["id"]
    return ok({"token": token, "user": user})


def cart_lines(user_id: str) -> list:
    cart = CARTS.get(user_id, {})
    return [
        {"productId": pid, "quantity": qty, "product": PRODUCTS[pid]}
        for pid, qty in cart.items()
        if pid in PRODUCTS
    ]


@app.post("/auth/signin")
def signin(payload: Credentials):
    account = USERS.get(payload.email)
    if not account or account["password"] != payload.password:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return issue_session(account["user"])


@app.post("/auth/signup", status_code=201)
def signup(payload: SignupIn):
    if payload.email in USERS:
        raise HTTPException(status_code=409, detail="Email already registered")
    user = {"id": uuid.uuid4().hex, "name": payload.name, "email": payload.email, "isAdmin": False}
    USERS[payload.email] = {"password": payload.password, "user": user}
    return issue_session(user)


@app.get("/products/{product_id}")
def product_detail(product_id: str):
    return ok(get_product(product_id))


@app.get("/cart")
def list_cart(authorization: Optional[str] = Header(None)):
    return ok(cart_lines(current_user_id(authorization)))


@app.post("/cart", status_code=201)
def add_cart_item(payload: CartItemIn, authorization: Optional[str] = Header(None)):
    user_id = current_user_id(authorization)
    product = get_product(payload.productId)
    cart = CARTS.setdefault(user_id, {})
    quantity = cart.get(payload.productId, 0) + payload.quantity
    if quantity > product["stock"]:
        raise HTTPException(status_code=400, detail=f"Only {product['stock']} items available in stock")
    cart[payload.productId] = quantity
    return ok({"productId": payload.productId, "quantity": quantity, "product": product})


@app.patch("/cart/{product_id}")
def update_cart_item(product_id: str, payload: QuantityIn, authorization: Optional[str] = Header(None)):
    cart = CARTS.setdefault(current_user_id(authorization), {})
    if product_id not in cart:
        raise HTTPException(status_code=404, detail="Item not in cart")
    product = get_product(product_id)
    if payload.quantity > product["stock"]:
        raise HTTPException(status_code=400, detail=f"Only {product['stock']} items available in stock")
    cart[product_id] = payload.quantity
    return ok({"productId": product_id, "quantity": payload.quantity, "product": product})


@app.delete("/cart/{product_id}")
def remove_cart_item(product_id: str, authorization: Optional[str] = Header(None)):
    cart = CARTS.setdefault(current_user_id(authorization), {})
    if cart.pop(product_id, None) is None:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return {"success": True, "message": "Item removed from cart"}


@app.delete("/cart")
def clear_cart(authorization: Optional[str] = Header(None)):
    CARTS[current_user_id(authorization)] = {}
    return {"success": True, "message": "Cart cleared"}


@app.post("/orders", status_code=201)
def create_order(payload: OrderIn, authorization: Optional[str] = Header(None)):
    user_id = current_user_id(authorization)
    total = Decimal("0.00")
    for item in payload.items:
        product = get_product(item.productId)
        if item.quantity > product["stock"]:
            raise HTTPException(status_code=400, detail=f"Insufficient stock for {product['name']}")
        total += Decimal(str(product["price"])) * item.quantity

    order = {
        "id": uuid.uuid4().hex,
        "status": "pending",
        "totalAmount": float(total),
        "address": payload.address,
        "phoneNumber": payload.phoneNumber,
        "notes": payload.notes,
        "items": [i.model_dump() for i in payload.items],
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    ORDERS.setdefault(user_id, []).append(order)
    return ok(order)


@app.get("/orders/my-orders")
def my_orders(status: Optional[str] = None, authorization: Optional[str] = Header(None)):
    orders = ORDERS.get(current_user_id(authorization), [])
    if status:
        orders = [o for o in orders if o["status"] == status]
    return ok(orders)
