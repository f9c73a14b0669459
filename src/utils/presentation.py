# how statuses and roles look, wherever they are shown
from dataclasses import dataclass
from typing import Dict, List, Union

from rich.text import Text

from api.models import OrderStatus, PaymentStatus, Role

Presentable = Union[OrderStatus, PaymentStatus, Role]


@dataclass(frozen=True)
class Badge:
    label: str
    style: str
    icon: str


BADGES: Dict[Presentable, Badge] = {
    OrderStatus.PENDING: Badge("Pending", "bold yellow", "◔"),
    OrderStatus.CONFIRMED: Badge("Confirmed", "bold blue", "⛟"),
    OrderStatus.DELIVERED: Badge("Delivered", "bold green", "✔"),
    OrderStatus.CANCELLED: Badge("Cancelled", "bold red", "✘"),
    PaymentStatus.PENDING: Badge("Payment pending", "yellow", "◔"),
    PaymentStatus.SUCCESS: Badge("Paid", "green", "✔"),
    PaymentStatus.FAILED: Badge("Payment failed", "red", "✘"),
    Role.ADMIN: Badge("Admin", "bold magenta", "★"),
    Role.USER: Badge("Customer", "bold green", "●"),
}

# canonical forward path; CANCELLED sits outside it
ORDER_STEPS: List[OrderStatus] = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.DELIVERED,
]

# dialog tone -> (primary button variant, secondary button variant)
TONES: Dict[str, tuple] = {
    "default": ("primary", "default"),
    "positive": ("success", "default"),
    "warning": ("warning", "default"),
    "error": ("error", "primary"),
}


def badge(value: Presentable) -> Badge:
    return BADGES[value]


def badge_text(value: Presentable) -> Text:
    b = BADGES[value]
    return Text(f"{b.icon} {b.label}", style=b.style)


def badge_markup(value: Presentable) -> str:
    b = BADGES[value]
    return f"[{b.style}]{b.icon} {b.label}[/]"


def progress_line(status: OrderStatus) -> str:
    """One-line tracker, e.g. "● Pending ── ● Confirmed ── ○ Delivered"."""
    if status is OrderStatus.CANCELLED:
        return badge_markup(status)
    reached = ORDER_STEPS.index(status)
    parts = []
    for i, step in enumerate(ORDER_STEPS):
        b = BADGES[step]
        parts.append(f"[{b.style}]● {b.label}[/]" if i <= reached else f"[dim]○ {b.label}[/]")
    return " ── ".join(parts)
