"""
User-level actions: each one is a short sequence of service calls plus
the local state change that goes with it. None of them raise on a failed
request; the outcome comes back as a FlowResult for the screen to show.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

import api.crud as crud
from api.models import Order, OrderStatus, Product
from store import policy, session
from store.policy import Route
from utils.logger import get_logger
from utils.state import AppState

_logger = get_logger(__name__)


@dataclass(frozen=True)
class FlowResult:
    success: bool
    message: str = ""
    route: Optional[Route] = None
    data: Any = None


def _failed(message: str, error: Optional[str] = None) -> FlowResult:
    return FlowResult(False, f"{message}: {error}" if error else message)


# ---------------------------
# Sign in / out
# ---------------------------


async def sign_in(state: AppState, username: str, password: str) -> FlowResult:
    # the password goes out exactly as typed
    username = username.strip()
    if not username or not password.strip():
        return _failed("All fields required")

    res = await crud.login(state.gateway, username, password)
    if not res.success:
        return _failed("Invalid credentials")

    state.session.save(res.data)
    role = session.role(res.data)
    _logger.info(f"{username} signed in as {role.value if role else 'unknown role'}")
    return FlowResult(True, "Welcome back!", Route(policy.landing_route(role)))


async def sign_up(
    state: AppState,
    username: str,
    full_name: str,
    email: str,
    phone: str,
    password: str,
) -> FlowResult:
    fields = [v.strip() for v in (username, full_name, email, phone)]
    if not all(fields) or not password.strip():
        return _failed("All fields are required")

    res = await crud.register(state.gateway, *fields, password)
    if not res.success:
        return _failed("Registration failed", res.error)

    state.session.save(res.data)
    return FlowResult(True, "Welcome to QuickBite!", Route(policy.MENU))


def sign_out(state: AppState) -> FlowResult:
    state.session.clear()
    return FlowResult(True, "Logout successful.", Route(policy.LOGIN))


# ---------------------------
# Checkout & payment
# ---------------------------


async def place_order(state: AppState) -> FlowResult:
    """
    Send the cart as a new order. The cart is cleared only once the
    order service has accepted it; from then on the server owns the order.
    """
    if state.cart.is_empty:
        return _failed("Your cart is empty")
    user_id = state.session.user_id
    if user_id is None:
        return FlowResult(False, "Please sign in again", Route(policy.LOGIN))

    items = [(line.product_id, line.quantity) for line in state.cart.lines()]
    res = await crud.create_order(state.gateway, user_id, items)
    if not res.success:
        return _failed("Failed to place order", res.error)

    order: Order = res.data
    state.cart.clear()
    state.last_order_id = order.id
    _logger.info(f"Order {order.id} placed with {len(items)} line(s)")
    return FlowResult(
        True, "Order placed", Route("payment", {"order_id": order.id}), order
    )


async def pay_order(state: AppState, order_id: Optional[str]) -> FlowResult:
    """One simulated payment attempt; a failure is reported, never retried."""
    if not order_id:
        return _failed("Order ID missing")

    res = await crud.pay(state.gateway, order_id)
    if not res.success:
        return _failed("Payment failed", res.error)

    _logger.info(f"Payment recorded for order {order_id}")
    return FlowResult(
        True, "Payment successful", Route("order_detail", {"order_id": order_id}), res.data
    )


def reorder(state: AppState, order: Order, products: Iterable[Product]) -> FlowResult:
    """Put the items of a past order back into the cart at today's prices."""
    catalog = {p.id: p for p in products}
    added, missing = 0, []
    for item in order.items:
        product = catalog.get(item.product_id)
        if product is None:
            missing.append(item.product_name)
            continue
        state.cart.add(product, item.quantity)
        added += 1

    if not added:
        return _failed("None of these items are available any more")
    message = f"{added} item(s) added to cart"
    if missing:
        message += f"; unavailable: {', '.join(missing)}"
    return FlowResult(True, message, Route("cart"))


# ---------------------------
# Admin
# ---------------------------


async def set_order_status(
    state: AppState, order_id: str, status: OrderStatus
) -> FlowResult:
    """
    Ask the order service to move an order to `status`. Any target is allowed
    here; the service decides which transitions are legal.
    """
    res = await crud.update_order_status(state.gateway, order_id, status)
    if not res.success:
        return _failed("Failed to update order status", res.error)
    return FlowResult(True, "Order status updated", data=status)
