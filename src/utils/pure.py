import os
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Literal, Optional, Tuple

from api.models import Order
from store.cart import compute_totals
from utils.config import CURRENCY_SYMBOL


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows; cells are str()-ed and "|" is escaped.
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all left.

    Returns:
        str: Markdown formatted table, or "" when there is nothing to show.
    """
    if not rows and not headers:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    def cell(value) -> str:
        return str(value).replace("|", "\\|").replace("\n", " ")

    headers = [cell(h) for h in headers]
    rows = [[cell(c) for c in row] for row in rows]

    if aligns is None:
        aligns = ["l"] * len(headers)
    elif len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {"l": ":---", "c": ":---:", "r": "---:"}

    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join(align_map[a] for a in aligns) + " |",
    ]
    lines += ["| " + " | ".join(row) + " |" for row in rows]
    return "\n".join(lines)


def format_money(amount) -> str:
    return f"{CURRENCY_SYMBOL}{Decimal(str(amount)):,.2f}"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """ISO-8601 -> naive local datetime, or None."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def pretty_date(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    dt = parse_timestamp(value)
    return dt.strftime("%d %b %Y, %H:%M") if dt else value


def estimate_eta(
    created_at: Optional[str], now: Optional[datetime] = None
) -> Optional[Tuple[str, int]]:
    """
    Delivery estimate shown on the order tracker: 15 to 35 minutes after
    creation, picked from the creation timestamp so it is stable across refreshes.

    Returns (eta as HH:MM, whole minutes left, never negative) or None.
    """
    created = parse_timestamp(created_at)
    if created is None:
        return None
    millis = int(created.timestamp() * 1000)
    eta = created + timedelta(minutes=15 + (millis % 1000) % 21)
    now = now or datetime.now()
    minutes_left = max(0, round((eta - now).total_seconds() / 60))
    return eta.strftime("%H:%M"), minutes_left


def invoice_text(order: Order) -> str:
    totals = compute_totals(order.total_amount)
    lines = [
        f"Invoice - Order {order.id}",
        f"Date: {pretty_date(order.created_at)}",
        "",
        "Items:",
    ]
    lines += [
        f" - {it.product_name} x {it.quantity}  @ {format_money(it.unit_price)}"
        f"  = {format_money(it.subtotal)}"
        for it in order.items
    ]
    lines += [
        "",
        f"Subtotal: {format_money(totals.subtotal)}",
        f"Delivery: {format_money(totals.delivery)}",
        f"GST (5%): {format_money(totals.tax)}",
        f"Total: {format_money(totals.total)}",
        "",
        "Thank you for ordering with QuickBite!",
    ]
    return "\n".join(lines)


def write_invoice(order: Order, directory: str) -> str:
    """Write the invoice as invoice-<order id>.txt and return its path."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"invoice-{order.id}.txt")
    with open(path, "w", encoding="utf-8") as f:
        f.write(invoice_text(order) + "\n")
    return path
