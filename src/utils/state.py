from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from api.gateway import HttpGateway
from store.cart import CartStore
from store.session import Session
from store.storage import FileCookieJar, MemoryStorage
from utils.config import Settings, settings as default_settings


@dataclass
class AppState:
    """
    Everything a screen may read or change, handed to the app at construction.

    Fields:
      - session: cookie-backed bearer token and its decoded claims
      - cart: the per-run cart
      - gateway: HTTP access to the four services, authenticated from `session`
      - last_order_id: the order most recently placed from this run
    """

    settings: Settings
    session: Session
    cart: CartStore
    gateway: HttpGateway
    last_order_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        session: Optional[Session] = None,
        cart: Optional[CartStore] = None,
        gateway: Optional[HttpGateway] = None,
    ) -> AppState:
        settings = settings if settings is not None else default_settings
        if session is None:
            session = Session(
                FileCookieJar(settings.cookie_path), settings.cookie_max_age
            )
        if cart is None:
            cart = CartStore(MemoryStorage())
        if gateway is None:
            gateway = HttpGateway(
                settings.api_url,
                lambda: session.token,
                timeout=settings.request_timeout,
            )
        return cls(settings, session, cart, gateway)

    @property
    def user_id(self) -> Optional[int]:
        return self.session.user_id

    async def close(self) -> None:
        await self.gateway.aclose()
