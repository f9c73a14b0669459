import unittest

import httpx
from helpers import BASE_URL, FakeServices

from api.gateway import HttpGateway
from store.cart import CartStore
from store.session import Session
from store.storage import MemoryCookieJar, MemoryStorage
from utils.config import Settings
from utils.state import AppState


class AppStateTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_injected_parts_are_kept_even_when_empty(self):
        settings = Settings(api_url=BASE_URL)
        session = Session(MemoryCookieJar(), 60)
        cart = CartStore(MemoryStorage())
        gateway = HttpGateway(BASE_URL, lambda: None, transport=httpx.MockTransport(FakeServices()))

        state = AppState.create(settings=settings, session=session, cart=cart, gateway=gateway)
        self.addAsyncCleanup(state.close)

        # an empty cart has len() == 0 and must still be the one passed in
        self.assertEqual(len(cart), 0)
        self.assertIs(state.cart, cart)
        self.assertIs(state.session, session)
        self.assertIs(state.gateway, gateway)
        self.assertIs(state.settings, settings)

    async def test_defaults_are_built_when_nothing_is_injected(self):
        state = AppState.create(
            settings=Settings(api_url=BASE_URL), session=Session(MemoryCookieJar(), 60)
        )
        self.addAsyncCleanup(state.close)

        self.assertTrue(state.cart.is_empty)
        self.assertIsNone(state.last_order_id)
        self.assertIsNone(state.user_id)


if __name__ == "__main__":
    unittest.main()
