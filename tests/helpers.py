import json
import os
import sys
import time

import httpx
import jwt

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from api.gateway import HttpGateway  # noqa: E402
from store.cart import CartStore  # noqa: E402
from store.session import Session  # noqa: E402
from store.storage import MemoryCookieJar, MemoryStorage  # noqa: E402
from utils.config import Settings  # noqa: E402
from utils.state import AppState  # noqa: E402

BASE_URL = "http://quickbite.test"


def make_token(sub="alice", user_id=7, role="USER", exp_in=3600, **extra) -> str:
    """Mint a signed token; the client never checks the signature."""
    claims = {"sub": sub, "userId": user_id, "role": role, "iat": int(time.time())}
    if exp_in is not None:
        claims["exp"] = int(time.time()) + exp_in
    claims.update(extra)
    return jwt.encode(claims, "test-secret", algorithm="HS256")


class FakeServices:
    """
    httpx.MockTransport handler.

    routes map (METHOD, path) to (status, json payload) or to a callable
    taking the request and returning an httpx.Response. Every request is kept.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(route):
            return route(request)
        status, payload = route
        return httpx.Response(status, json=payload)

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request):
        return json.loads(request.content) if request.content else None


def make_state(routes=None, token=None):
    """AppState over in-memory storage and a fake set of services."""
    services = FakeServices(routes)
    session = Session(MemoryCookieJar(), 3600)
    if token:
        session.save(token)
    gateway = HttpGateway(
        BASE_URL, lambda: session.token, transport=httpx.MockTransport(services)
    )
    state = AppState.create(
        settings=Settings(api_url=BASE_URL),
        session=session,
        cart=CartStore(MemoryStorage()),
        gateway=gateway,
    )
    return state, services


def product_json(pid="p1", name="Paneer Tikka", price=100, category="Starters", stock=10):
    return {
        "id": pid,
        "name": name,
        "price": price,
        "description": f"Fresh {name}",
        "imageUrl": f"https://img.test/{pid}.png",
        "category": category,
        "stockQuantity": stock,
    }


def order_json(
    oid="o1",
    user_id=7,
    status="PENDING",
    payment_status="PENDING",
    items=None,
    created_at="2024-05-01T12:00:00",
):
    items = items if items is not None else [
        {"productId": "p1", "productName": "Paneer Tikka", "quantity": 2, "price": 100, "subtotal": 200}
    ]
    return {
        "id": oid,
        "userId": user_id,
        "status": status,
        "paymentStatus": payment_status,
        "totalAmount": sum(it["subtotal"] for it in items),
        "items": items,
        "createdAt": created_at,
    }


def payment_json(pid="pay1", order_id="o1", amount=240, status="SUCCESS", created_at="2024-05-01T12:05:00"):
    return {
        "id": pid,
        "orderId": order_id,
        "userId": 7,
        "amount": amount,
        "status": status,
        "createdAt": created_at,
        "paymentReferenceId": f"REF-{pid}",
    }
