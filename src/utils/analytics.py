"""
Aggregations and search filters over collections fetched in full.

There is no pagination or server-side join: screens fetch whole collections
and cross-reference them here by id.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from api.models import Order, OrderStatus, Payment, PaymentStatus, Product, Role, User
from utils.pure import parse_timestamp

T = TypeVar("T")


def index_by_id(items: Iterable[T]) -> Dict[object, T]:
    return {item.id: item for item in items}


def sort_newest_first(items: Iterable[T]) -> List[T]:
    """Newest `created_at` first; items without a timestamp go last."""
    return sorted(
        items,
        key=lambda it: parse_timestamp(it.created_at) or datetime.min,
        reverse=True,
    )


# ---------------------------
# Admin dashboard
# ---------------------------


@dataclass(frozen=True)
class DashboardMetrics:
    total_revenue: Decimal
    total_orders: int
    total_users: int
    total_products: int


def dashboard_metrics(
    orders: Sequence[Order],
    products: Sequence[Product],
    users: Sequence[User],
) -> DashboardMetrics:
    return DashboardMetrics(
        total_revenue=sum((o.total_amount for o in orders), Decimal("0")),
        total_orders=len(orders),
        total_users=len(users),
        total_products=len(products),
    )


def orders_by_status(orders: Iterable[Order]) -> Dict[OrderStatus, int]:
    """Counts per status, in declaration order, omitting empty statuses."""
    counts = Counter(o.status for o in orders)
    return {s: counts[s] for s in OrderStatus if counts[s]}


def revenue_by_day(
    orders: Iterable[Order], days: int = 14, today: Optional[date] = None
) -> List[Tuple[date, Decimal]]:
    """Order totals per calendar day from `today - days` to `today` inclusive."""
    today = today or date.today()
    buckets: Dict[date, Decimal] = {
        today - timedelta(days=i): Decimal("0") for i in range(days, -1, -1)
    }
    for o in orders:
        created = parse_timestamp(o.created_at)
        if created and created.date() in buckets:
            buckets[created.date()] += o.total_amount
    return list(buckets.items())


@dataclass(frozen=True)
class ProductSales:
    product_id: str
    name: str
    quantity: int


def top_products(orders: Iterable[Order], k: int = 5) -> List[ProductSales]:
    """Best sellers by quantity ordered across all orders."""
    qty: Counter = Counter()
    names: Dict[str, str] = {}
    for o in orders:
        for it in o.items:
            qty[it.product_id] += it.quantity
            names[it.product_id] = it.product_name
    return [ProductSales(pid, names.get(pid, "Unknown"), n) for pid, n in qty.most_common(k)]


def recent_payments(payments: Iterable[Payment], k: int = 8) -> List[Payment]:
    return sort_newest_first(payments)[:k]


# ---------------------------
# Customer payment history
# ---------------------------


@dataclass(frozen=True)
class PaymentSummary:
    total_payments: int
    total_spent: Decimal
    successful: int
    failed: int
    last_success: Optional[Payment]


def payment_summary(payments: Sequence[Payment]) -> PaymentSummary:
    succeeded = [p for p in payments if p.status is PaymentStatus.SUCCESS]
    newest = sort_newest_first(succeeded)
    return PaymentSummary(
        total_payments=len(payments),
        total_spent=sum((p.amount for p in succeeded), Decimal("0")),
        successful=len(succeeded),
        failed=sum(1 for p in payments if p.status is PaymentStatus.FAILED),
        last_success=newest[0] if newest else None,
    )


# ---------------------------
# Filters
# ---------------------------


def filter_products(
    products: Iterable[Product], query: str = "", category: Optional[str] = None
) -> List[Product]:
    q = query.strip().lower()
    return [
        p
        for p in products
        if q in p.name.lower() and (not category or p.category == category)
    ]


def categories(products: Iterable[Product]) -> List[str]:
    return sorted({p.category for p in products if p.category})


def filter_orders(
    orders: Iterable[Order], query: str = "", users: Optional[Dict[object, User]] = None
) -> List[Order]:
    """Match on order id, user id or the owner's username."""
    q = query.strip().lower()
    if not q:
        return list(orders)
    users = users or {}

    def matches(o: Order) -> bool:
        owner = users.get(o.user_id)
        return (
            q in o.id.lower()
            or q in str(o.user_id)
            or (owner is not None and q in owner.username.lower())
        )

    return [o for o in orders if matches(o)]


def filter_users(
    users: Iterable[User], query: str = "", role: Optional[Role] = None
) -> List[User]:
    q = query.strip().lower()
    return [
        u
        for u in users
        if (not q or q in u.username.lower() or q in u.email.lower() or q in str(u.id))
        and (role is None or u.role is role)
    ]


def filter_payments(
    payments: Iterable[Payment], query: str = "", status: Optional[PaymentStatus] = None
) -> List[Payment]:
    q = query.strip().lower()
    return [
        p
        for p in payments
        if (
            not q
            or q in p.id.lower()
            or q in p.order_id.lower()
            or (p.user_id is not None and q in str(p.user_id))
        )
        and (status is None or p.status is status)
    ]
