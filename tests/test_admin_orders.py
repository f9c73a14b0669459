import unittest

from helpers import make_state, make_token, order_json, payment_json, product_json
from textual.widgets import DataTable, Select

from main import QuickBiteApp
from store.policy import Route
from views.scr_admin_orders import AdminOrdersScreen

ORDERS = "/order/api/orders"


def _status_path(order_id):
    return f"{ORDERS}/{order_id}/status"


class AdminOrdersScreenTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        routes = {
            ("GET", ORDERS): (
                200,
                [
                    order_json("newer", status="PENDING", created_at="2024-05-02T12:00:00"),
                    order_json("older", status="CONFIRMED", created_at="2024-05-01T12:00:00"),
                ],
            ),
            ("GET", "/user/api/users"): (
                200,
                [{"id": 7, "username": "alice", "email": "a@x.io", "role": "USER"}],
            ),
            ("GET", "/product/api/products"): (200, [product_json()]),
            ("GET", "/payment/api/payments"): (200, [payment_json()]),
            ("PUT", _status_path("newer")): (200, None),
            ("PUT", _status_path("older")): (200, None),
        }
        admin = make_token(sub="root", user_id=1, role="ADMIN")
        self.state, self.services = make_state(routes, admin)
        self.select_changes = []

    async def asyncTearDown(self):
        await self.state.close()

    def record(self, message):
        if isinstance(message, Select.Changed):
            self.select_changes.append(message.value)

    async def settle(self, app, pilot):
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

    def status_updates(self):
        return self.services.calls("PUT", _status_path("newer")) + self.services.calls(
            "PUT", _status_path("older")
        )

    async def test_moving_the_cursor_never_sends_a_status_update(self):
        app = QuickBiteApp(self.state)
        async with app.run_test(size=(160, 50), message_hook=self.record) as pilot:
            await self.settle(app, pilot)
            await app.navigate(Route("admin_orders"))
            await self.settle(app, pilot)

            screen = app.screen
            self.assertIsInstance(screen, AdminOrdersScreen)
            table = screen.query_one(DataTable)
            self.assertEqual(table.row_count, 2)

            # rapid highlights between a PENDING and a CONFIRMED order
            for row in (1, 0, 1, 0, 1):
                table.move_cursor(row=row)
            await self.settle(app, pilot)

            select = screen.query_one("#select-status", Select)
            self.assertEqual(select.value, "CONFIRMED")
            self.assertEqual(self.select_changes, [])
            self.assertEqual(self.status_updates(), [])

    async def test_picking_a_status_updates_only_the_highlighted_order(self):
        app = QuickBiteApp(self.state)
        async with app.run_test(size=(160, 50), message_hook=self.record) as pilot:
            await self.settle(app, pilot)
            await app.navigate(Route("admin_orders"))
            await self.settle(app, pilot)

            screen = app.screen
            screen.query_one(DataTable).move_cursor(row=1)
            await self.settle(app, pilot)

            screen.query_one("#select-status", Select).value = "DELIVERED"
            await self.settle(app, pilot)

            self.assertEqual(self.services.calls("PUT", _status_path("newer")), [])
            updates = self.services.calls("PUT", _status_path("older"))
            self.assertEqual(len(updates), 1)
            self.assertEqual(updates[0].url.params["status"], "DELIVERED")


if __name__ == "__main__":
    unittest.main()
