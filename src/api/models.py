# dataclass projections of the user, product, order and payment services

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


def to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal
    description: str = ""
    image_url: Optional[str] = None
    category: str = ""
    stock_quantity: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Product:
        return cls(
            id=str(data["id"]),
            name=data["name"],
            price=to_decimal(data.get("price")),
            description=data.get("description") or "",
            image_url=data.get("imageUrl"),
            category=data.get("category") or "",
            stock_quantity=data.get("stockQuantity"),
        )


@dataclass(frozen=True)
class ProductDraft:
    """Body for product create/update. Price is required and positive."""

    name: str
    price: Decimal
    description: str = ""
    category: str = ""
    image_url: str = ""
    stock_quantity: int = 1

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": float(self.price),
            "category": self.category,
            "imageUrl": self.image_url,
            "stockQuantity": self.stock_quantity,
        }


@dataclass(frozen=True)
class User:
    id: int
    username: str
    email: str
    role: Role
    phone: str = ""
    full_name: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> User:
        return cls(
            id=int(data["id"]),
            username=data["username"],
            email=data.get("email") or "",
            role=Role(data.get("role") or "USER"),
            phone=data.get("phone") or "",
            full_name=data.get("fullName") or "",
            created_at=_opt_str(data.get("createdAt")),
        )


@dataclass(frozen=True)
class UserDraft:
    """
    Body for account create/update.
    The password is write-only: sent when set, never read back from the service.
    """

    username: str
    email: str
    full_name: str = ""
    phone: str = ""
    role: Role = Role.USER
    password: str = ""

    def to_json(self) -> Dict[str, Any]:
        body = {
            "username": self.username,
            "email": self.email,
            "fullName": self.full_name,
            "phone": self.phone,
            "role": self.role.value,
        }
        if self.password:
            body["passwordHash"] = self.password
        return body


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> OrderItem:
        unit_price = to_decimal(data.get("price", data.get("unitPrice")))
        quantity = int(data["quantity"])
        subtotal = data.get("subtotal")
        return cls(
            product_id=str(data["productId"]),
            product_name=data.get("productName") or "Unknown Product",
            quantity=quantity,
            unit_price=unit_price,
            subtotal=to_decimal(subtotal) if subtotal is not None else unit_price * quantity,
        )


@dataclass(frozen=True)
class Order:
    id: str
    user_id: int
    status: OrderStatus
    payment_status: PaymentStatus
    total_amount: Decimal
    items: List[OrderItem] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    payment_reference_id: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Order:
        return cls(
            id=str(data["id"]),
            user_id=int(data["userId"]),
            status=OrderStatus(data.get("status") or "PENDING"),
            payment_status=PaymentStatus(data.get("paymentStatus") or "PENDING"),
            total_amount=to_decimal(data.get("totalAmount")),
            items=[OrderItem.from_json(it) for it in data.get("items") or []],
            created_at=_opt_str(data.get("createdAt")),
            updated_at=_opt_str(data.get("updatedAt")),
            payment_reference_id=data.get("paymentReferenceId"),
        )

    def with_status(self, status: OrderStatus) -> Order:
        return replace(self, status=status)


@dataclass(frozen=True)
class Payment:
    id: str
    order_id: str
    amount: Decimal
    status: PaymentStatus
    user_id: Optional[int] = None
    created_at: Optional[str] = None
    payment_reference_id: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Payment:
        user_id = data.get("userId")
        return cls(
            id=str(data["id"]),
            order_id=str(data["orderId"]),
            amount=to_decimal(data.get("amount")),
            status=PaymentStatus(data.get("status") or "PENDING"),
            user_id=None if user_id is None else int(user_id),
            created_at=_opt_str(data.get("createdAt")),
            payment_reference_id=data.get("paymentReferenceId"),
            updated_at=_opt_str(data.get("updatedAt")),
        )
