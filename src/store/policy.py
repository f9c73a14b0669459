"""
Who may see which screen.

`authorize` is the only access check: the app runs it before switching modes
and every protected screen runs it again on mount and resume.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from api.models import Role
from store import session

LOGIN = "login"
REGISTER = "register"
MENU = "menu"
ADMIN_DASHBOARD = "admin_dashboard"

PUBLIC_ROUTES = frozenset({LOGIN, REGISTER})
CUSTOMER_ROUTES = frozenset({MENU, "cart", "orders", "order_detail", "payment", "payments"})
ADMIN_ROUTES = frozenset(
    {ADMIN_DASHBOARD, "admin_orders", "admin_products", "admin_users", "admin_payments"}
)


@dataclass(frozen=True)
class Route:
    name: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect: Optional[str] = None


def landing_route(role: Optional[Role]) -> str:
    return ADMIN_DASHBOARD if role is Role.ADMIN else MENU


def authorize(route: str, token: Optional[str], now: Optional[float] = None) -> AccessDecision:
    if route in PUBLIC_ROUTES:
        return AccessDecision(True)
    if route not in CUSTOMER_ROUTES and route not in ADMIN_ROUTES:
        return AccessDecision(False, LOGIN)
    if not session.is_valid(token, now):
        return AccessDecision(False, LOGIN)
    if route in ADMIN_ROUTES and session.role(token) is not Role.ADMIN:
        return AccessDecision(False, MENU)
    return AccessDecision(True)
