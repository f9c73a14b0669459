# src/api/crud.py
from __future__ import annotations

from typing import Iterable, List, Optional

from api import models
from api.gateway import ApiResponse, HttpGateway
from utils.config import LOGIN_PATH, REGISTER_PATH

USERS = "/user/api/users"
PRODUCTS = "/product/api/products"
ORDERS = "/order/api/orders"
PAYMENTS = "/payment/api/payments"


def _token_of(data) -> str:
    return data["token"]


def _list_of(parse):
    def convert(data) -> list:
        return [parse(item) for item in data or []]

    return convert


# ---------------------------
# Auth & Registration
# ---------------------------


async def login(gw: HttpGateway, username: str, password: str) -> ApiResponse[str]:
    """Exchange credentials for a bearer token."""
    res = await gw.post(LOGIN_PATH, {"username": username, "password": password})
    return res.map(_token_of)


async def register(
    gw: HttpGateway,
    username: str,
    full_name: str,
    email: str,
    phone: str,
    password: str,
) -> ApiResponse[str]:
    """Create a USER account and return its bearer token."""
    draft = models.UserDraft(
        username=username,
        email=email,
        full_name=full_name,
        phone=phone,
        role=models.Role.USER,
        password=password,
    )
    res = await gw.post(REGISTER_PATH, draft.to_json())
    return res.map(_token_of)


# ---------------------------
# Users
# ---------------------------


async def list_users(gw: HttpGateway) -> ApiResponse[List[models.User]]:
    return (await gw.get(USERS)).map(_list_of(models.User.from_json))


async def get_user(gw: HttpGateway, user_id: int) -> ApiResponse[models.User]:
    return (await gw.get(f"{USERS}/{user_id}")).map(models.User.from_json)


async def create_user(gw: HttpGateway, draft: models.UserDraft) -> ApiResponse[Optional[str]]:
    """
    Admin account creation goes through the registration route so the
    service hashes the password. The response carries a token we do not keep.
    """
    res = await gw.post(REGISTER_PATH, draft.to_json())
    return res.map(lambda data: data.get("token") if isinstance(data, dict) else None)


async def update_user(
    gw: HttpGateway, user_id: int, draft: models.UserDraft
) -> ApiResponse[models.User]:
    res = await gw.put(f"{USERS}/{user_id}", draft.to_json())
    return res.map(models.User.from_json)


async def delete_user(gw: HttpGateway, user_id: int) -> ApiResponse[None]:
    return (await gw.delete(f"{USERS}/{user_id}")).map(lambda _: None)


# ---------------------------
# Products
# ---------------------------


async def list_products(gw: HttpGateway) -> ApiResponse[List[models.Product]]:
    return (await gw.get(PRODUCTS)).map(_list_of(models.Product.from_json))


async def get_product(gw: HttpGateway, product_id: str) -> ApiResponse[models.Product]:
    return (await gw.get(f"{PRODUCTS}/{product_id}")).map(models.Product.from_json)


async def create_product(
    gw: HttpGateway, draft: models.ProductDraft
) -> ApiResponse[models.Product]:
    return (await gw.post(PRODUCTS, draft.to_json())).map(models.Product.from_json)


async def update_product(
    gw: HttpGateway, product_id: str, draft: models.ProductDraft
) -> ApiResponse[models.Product]:
    res = await gw.put(f"{PRODUCTS}/{product_id}", draft.to_json())
    return res.map(models.Product.from_json)


async def delete_product(gw: HttpGateway, product_id: str) -> ApiResponse[None]:
    return (await gw.delete(f"{PRODUCTS}/{product_id}")).map(lambda _: None)


# ---------------------------
# Orders
# ---------------------------


async def list_orders(gw: HttpGateway) -> ApiResponse[List[models.Order]]:
    return (await gw.get(ORDERS)).map(_list_of(models.Order.from_json))


async def get_order(gw: HttpGateway, order_id: str) -> ApiResponse[models.Order]:
    return (await gw.get(f"{ORDERS}/{order_id}")).map(models.Order.from_json)


async def list_user_orders(gw: HttpGateway, user_id: int) -> ApiResponse[List[models.Order]]:
    return (await gw.get(f"{ORDERS}/user/{user_id}")).map(_list_of(models.Order.from_json))


async def create_order(
    gw: HttpGateway, user_id: int, items: Iterable[tuple[str, int]]
) -> ApiResponse[models.Order]:
    """
    Place an order for (product_id, quantity) pairs.
    Prices and names are resolved by the order service, not sent from here.
    """
    body = {
        "userId": user_id,
        "items": [{"productId": pid, "quantity": qty} for pid, qty in items],
    }
    return (await gw.post(ORDERS, body)).map(models.Order.from_json)


async def update_order_status(
    gw: HttpGateway, order_id: str, status: models.OrderStatus
) -> ApiResponse[None]:
    res = await gw.put(f"{ORDERS}/{order_id}/status", params={"status": status.value})
    return res.map(lambda _: None)


# ---------------------------
# Payments
# ---------------------------


async def list_payments(gw: HttpGateway) -> ApiResponse[List[models.Payment]]:
    return (await gw.get(PAYMENTS)).map(_list_of(models.Payment.from_json))


async def list_user_payments(
    gw: HttpGateway, user_id: int
) -> ApiResponse[List[models.Payment]]:
    res = await gw.get(f"{PAYMENTS}/user/{user_id}")
    return res.map(_list_of(models.Payment.from_json))


async def pay(gw: HttpGateway, order_id: str) -> ApiResponse[Optional[models.Payment]]:
    """
    Simulated payment: one request, no method payload and no idempotency key.
    """
    res = await gw.post(f"{PAYMENTS}/pay", params={"orderId": order_id})
    return res.map(lambda data: models.Payment.from_json(data) if data else None)
