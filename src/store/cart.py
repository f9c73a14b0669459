from __future__ import annotations

import json
from dataclasses import asdict, dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from api.models import Product, to_decimal
from store.storage import MemoryStorage
from utils.config import CART_KEY, DELIVERY_FEE, TAX_RATE
from utils.logger import get_logger

_logger = get_logger(__name__)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    delivery: Decimal
    tax: Decimal
    total: Decimal


def compute_totals(subtotal: Decimal) -> Totals:
    """
    Bill for a given item subtotal: flat delivery when anything is ordered,
    5% tax on the subtotal alone. Used by cart, checkout, payment and invoice.
    """
    subtotal = to_decimal(subtotal)
    delivery = DELIVERY_FEE if subtotal > 0 else Decimal("0")
    tax = (subtotal * TAX_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    return Totals(subtotal, delivery, tax, subtotal + delivery + tax)


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    image_url: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_json(self) -> dict:
        data = asdict(self)
        data["unit_price"] = str(self.unit_price)
        return data

    @classmethod
    def from_json(cls, data: dict) -> CartLine:
        return cls(
            product_id=str(data["product_id"]),
            name=data["name"],
            unit_price=to_decimal(data["unit_price"]),
            quantity=max(1, int(data["quantity"])),
            image_url=data.get("image_url"),
        )


class CartStore:
    """
    Ordered product-id -> line mapping, written back to storage after every change.

    - at most one line per product
    - quantities never drop below 1; only remove() or clear() drop a line
    """

    def __init__(self, storage: MemoryStorage) -> None:
        self._storage = storage
        self._lines: Dict[str, CartLine] = self._load()

    def _load(self) -> Dict[str, CartLine]:
        raw = self._storage.get_item(CART_KEY)
        if not raw:
            return {}
        try:
            lines = [CartLine.from_json(item) for item in json.loads(raw)]
        except (KeyError, TypeError, ValueError, ArithmeticError) as err:
            _logger.warning(f"Discarding unreadable cart data: {err}")
            return {}
        return {line.product_id: line for line in lines}

    def _save(self) -> None:
        self._storage.set_item(
            CART_KEY, json.dumps([line.to_json() for line in self._lines.values()])
        )

    def reload(self) -> None:
        self._lines = self._load()

    def add(self, product: Product, qty: int = 1) -> CartLine:
        if qty < 1:
            raise ValueError(f"quantity must be at least 1, got {qty}")
        existing = self._lines.get(product.id)
        if existing:
            line = replace(existing, quantity=existing.quantity + qty)
        else:
            line = CartLine(product.id, product.name, product.price, qty, product.image_url)
        self._lines[product.id] = line
        self._save()
        return line

    def set_quantity(self, product_id: str, qty: int) -> Optional[CartLine]:
        line = self._lines.get(product_id)
        if line is None:
            return None
        line = replace(line, quantity=max(1, int(qty)))
        self._lines[product_id] = line
        self._save()
        return line

    def increment(self, product_id: str) -> Optional[CartLine]:
        line = self._lines.get(product_id)
        return self.set_quantity(product_id, line.quantity + 1) if line else None

    def decrement(self, product_id: str) -> Optional[CartLine]:
        line = self._lines.get(product_id)
        return self.set_quantity(product_id, line.quantity - 1) if line else None

    def remove(self, product_id: str) -> None:
        if self._lines.pop(product_id, None) is not None:
            self._save()

    def clear(self) -> None:
        self._lines = {}
        self._storage.remove_item(CART_KEY)

    def get(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def totals(self) -> Totals:
        return compute_totals(self.subtotal())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)
