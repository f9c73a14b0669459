import unittest
from decimal import Decimal

import httpx
from helpers import BASE_URL, FakeServices, order_json, payment_json, product_json

import api.crud as crud
from api.gateway import HttpGateway
from api.models import OrderStatus, PaymentStatus, ProductDraft, Role, UserDraft


class CrudTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.services = FakeServices()
        self.gw = HttpGateway(
            BASE_URL, lambda: "tok", transport=httpx.MockTransport(self.services)
        )

    async def asyncTearDown(self):
        await self.gw.aclose()

    def route(self, method, path, status=200, payload=None):
        self.services.routes[(method, path)] = (status, payload)

    # ---------- Auth & registration ----------

    async def test_login_returns_token(self):
        self.route("POST", "/user/api/users/login", payload={"token": "abc"})
        res = await crud.login(self.gw, "alice", "pw")
        self.assertTrue(res.success)
        self.assertEqual(res.data, "abc")

    async def test_login_without_token_field_is_malformed(self):
        self.route("POST", "/user/api/users/login", payload={"ok": True})
        res = await crud.login(self.gw, "alice", "pw")
        self.assertFalse(res.success)
        self.assertEqual(res.error, "Malformed response")

    async def test_register_posts_a_user_account(self):
        self.route("POST", "/user/api/users/register", payload={"token": "new"})
        res = await crud.register(self.gw, "bob", "Bob B", "bob@x.io", "999", "secret")

        self.assertEqual(res.data, "new")
        body = FakeServices.body(self.services.requests[0])
        self.assertEqual(
            body,
            {
                "username": "bob",
                "email": "bob@x.io",
                "fullName": "Bob B",
                "phone": "999",
                "role": "USER",
                "passwordHash": "secret",
            },
        )

    # ---------- Users ----------

    async def test_list_users(self):
        self.route(
            "GET",
            "/user/api/users",
            payload=[
                {"id": 1, "username": "root", "email": "r@x.io", "role": "ADMIN"},
                {"id": "2", "username": "amy", "email": "a@x.io", "role": "USER", "fullName": "Amy"},
            ],
        )
        res = await crud.list_users(self.gw)
        self.assertEqual([u.id for u in res.data], [1, 2])
        self.assertIs(res.data[0].role, Role.ADMIN)
        self.assertEqual(res.data[1].full_name, "Amy")

    async def test_get_user(self):
        self.route(
            "GET",
            "/user/api/users/5",
            payload={"id": 5, "username": "eve", "email": "e@x.io", "role": "USER"},
        )
        res = await crud.get_user(self.gw, 5)
        self.assertEqual(res.data.username, "eve")

    async def test_get_missing_user_is_a_failure(self):
        self.route("GET", "/user/api/users/5", status=404, payload={"message": "User not found"})
        res = await crud.get_user(self.gw, 5)
        self.assertFalse(res.success)
        self.assertEqual(res.error, "User not found")

    async def test_update_user_without_password_does_not_send_one(self):
        self.route(
            "PUT",
            "/user/api/users/5",
            payload={"id": 5, "username": "eve", "email": "e@x.io", "role": "USER"},
        )
        draft = UserDraft(username="eve", email="e@x.io")
        res = await crud.update_user(self.gw, 5, draft)

        self.assertTrue(res.success)
        self.assertNotIn("passwordHash", FakeServices.body(self.services.requests[0]))

    async def test_create_user_goes_through_registration(self):
        self.route("POST", "/user/api/users/register", payload={"token": "t"})
        draft = UserDraft(username="boss", email="b@x.io", role=Role.ADMIN, password="pw")
        res = await crud.create_user(self.gw, draft)

        self.assertTrue(res.success)
        body = FakeServices.body(self.services.requests[0])
        self.assertEqual(body["role"], "ADMIN")
        self.assertEqual(body["passwordHash"], "pw")

    async def test_delete_user(self):
        self.route("DELETE", "/user/api/users/5", status=204)
        res = await crud.delete_user(self.gw, 5)
        self.assertTrue(res.success)
        self.assertIsNone(res.data)

    # ---------- Products ----------

    async def test_list_products_parses_decimal_prices(self):
        self.route("GET", "/product/api/products", payload=[product_json(price="120.50")])
        res = await crud.list_products(self.gw)
        product = res.data[0]
        self.assertEqual(product.price, Decimal("120.50"))
        self.assertEqual(product.image_url, "https://img.test/p1.png")
        self.assertEqual(product.stock_quantity, 10)

    async def test_get_product(self):
        self.route("GET", "/product/api/products/p1", payload=product_json(price=75))
        res = await crud.get_product(self.gw, "p1")
        self.assertEqual(res.data.id, "p1")
        self.assertEqual(res.data.price, Decimal("75"))

    async def test_create_product_body(self):
        self.route("POST", "/product/api/products", payload=product_json())
        draft = ProductDraft(name="Paneer Tikka", price=Decimal("100"), category="Starters")
        await crud.create_product(self.gw, draft)

        body = FakeServices.body(self.services.requests[0])
        self.assertEqual(
            set(body), {"name", "description", "price", "category", "imageUrl", "stockQuantity"}
        )
        self.assertEqual(body["price"], 100.0)

    async def test_update_and_delete_product_paths(self):
        self.route("PUT", "/product/api/products/p1", payload=product_json())
        self.route("DELETE", "/product/api/products/p1", status=204)
        draft = ProductDraft(name="Paneer Tikka", price=Decimal("100"))

        self.assertTrue((await crud.update_product(self.gw, "p1", draft)).success)
        self.assertTrue((await crud.delete_product(self.gw, "p1")).success)

    async def test_malformed_product_list_is_a_failure(self):
        self.route("GET", "/product/api/products", payload=[{"name": "no id"}])
        res = await crud.list_products(self.gw)
        self.assertFalse(res.success)

    # ---------- Orders ----------

    async def test_create_order_sends_ids_and_quantities_only(self):
        self.route("POST", "/order/api/orders", payload=order_json())
        res = await crud.create_order(self.gw, 7, [("p1", 2), ("p2", 1)])

        self.assertEqual(res.data.id, "o1")
        self.assertEqual(
            FakeServices.body(self.services.requests[0]),
            {
                "userId": 7,
                "items": [{"productId": "p1", "quantity": 2}, {"productId": "p2", "quantity": 1}],
            },
        )

    async def test_order_parsing(self):
        self.route("GET", "/order/api/orders/o1", payload=order_json(status="CONFIRMED"))
        order = (await crud.get_order(self.gw, "o1")).data
        self.assertIs(order.status, OrderStatus.CONFIRMED)
        self.assertIs(order.payment_status, PaymentStatus.PENDING)
        self.assertEqual(order.total_amount, Decimal("200"))
        self.assertEqual(order.items[0].unit_price, Decimal("100"))
        self.assertEqual(order.items[0].subtotal, Decimal("200"))

    async def test_list_user_orders_path(self):
        self.route("GET", "/order/api/orders/user/7", payload=[order_json(), order_json("o2")])
        res = await crud.list_user_orders(self.gw, 7)
        self.assertEqual([o.id for o in res.data], ["o1", "o2"])

    async def test_update_order_status_uses_query_param(self):
        self.route("PUT", "/order/api/orders/o1/status", payload=None)
        res = await crud.update_order_status(self.gw, "o1", OrderStatus.DELIVERED)

        self.assertTrue(res.success)
        request = self.services.requests[0]
        self.assertEqual(request.url.params["status"], "DELIVERED")
        self.assertEqual(request.content, b"")

    # ---------- Payments ----------

    async def test_pay_sends_order_id_as_query_param_and_no_body(self):
        self.route("POST", "/payment/api/payments/pay", payload=payment_json())
        res = await crud.pay(self.gw, "o1")

        self.assertTrue(res.success)
        self.assertIs(res.data.status, PaymentStatus.SUCCESS)
        request = self.services.requests[0]
        self.assertEqual(request.url.params["orderId"], "o1")
        self.assertEqual(request.content, b"")

    async def test_list_payments(self):
        self.route("GET", "/payment/api/payments", payload=[payment_json(), payment_json("pay2")])
        self.route("GET", "/payment/api/payments/user/7", payload=[payment_json()])

        self.assertEqual(len((await crud.list_payments(self.gw)).data), 2)
        self.assertEqual(len((await crud.list_user_payments(self.gw, 7)).data), 1)


if __name__ == "__main__":
    unittest.main()
