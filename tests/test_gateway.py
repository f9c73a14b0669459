import unittest

import httpx
from helpers import BASE_URL, FakeServices

from api.gateway import ApiResponse, HttpGateway


class HttpGatewayTestCase(unittest.IsolatedAsyncioTestCase):
    def make_gateway(self, handler, token=None):
        gw = HttpGateway(BASE_URL, lambda: token, transport=httpx.MockTransport(handler))
        self.addAsyncCleanup(gw.aclose)
        return gw

    # ---------- headers ----------

    async def test_bearer_header_when_token_present(self):
        services = FakeServices({("GET", "/product/api/products"): (200, [])})
        gw = self.make_gateway(services, token="tok-123")

        res = await gw.get("/product/api/products")

        self.assertTrue(res.success)
        request = services.requests[0]
        self.assertEqual(request.headers["Authorization"], "Bearer tok-123")
        self.assertEqual(request.headers["Content-Type"], "application/json")

    async def test_no_authorization_header_without_token(self):
        services = FakeServices({("POST", "/user/api/users/login"): (200, {"token": "t"})})
        gw = self.make_gateway(services)

        await gw.post("/user/api/users/login", {"username": "a", "password": "b"})

        request = services.requests[0]
        self.assertNotIn("Authorization", request.headers)
        self.assertEqual(FakeServices.body(request), {"username": "a", "password": "b"})

    async def test_query_params_are_sent(self):
        services = FakeServices({("PUT", "/order/api/orders/o1/status"): (200, None)})
        gw = self.make_gateway(services)

        await gw.put("/order/api/orders/o1/status", params={"status": "CONFIRMED"})

        self.assertEqual(services.requests[0].url.params["status"], "CONFIRMED")

    # ---------- failures ----------

    async def test_non_2xx_uses_message_field(self):
        gw = self.make_gateway(FakeServices({("GET", "/x"): (409, {"message": "Out of stock"})}))
        res = await gw.get("/x")
        self.assertFalse(res.success)
        self.assertEqual(res.status, 409)
        self.assertEqual(res.error, "Out of stock")
        self.assertIsNone(res.data)

    async def test_non_2xx_without_message_falls_back_to_body(self):
        def handler(request):
            return httpx.Response(400, text="bad things")

        res = await self.make_gateway(handler).get("/x")
        self.assertFalse(res.success)
        self.assertEqual(res.error, "bad things")

    async def test_non_2xx_with_empty_body_falls_back_to_reason(self):
        def handler(request):
            return httpx.Response(503)

        res = await self.make_gateway(handler).get("/x")
        self.assertFalse(res.success)
        self.assertEqual(res.status, 503)
        self.assertEqual(res.error, "Service Unavailable")

    async def test_network_error_is_status_500(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        res = await self.make_gateway(handler).get("/x")
        self.assertFalse(res.success)
        self.assertEqual(res.status, 500)
        self.assertEqual(res.error, "connection refused")

    async def test_success_with_non_json_body_has_no_data(self):
        def handler(request):
            return httpx.Response(200, text="OK, not json")

        res = await self.make_gateway(handler).get("/x")
        self.assertTrue(res.success)
        self.assertIsNone(res.data)

    # ---------- map ----------

    def test_map_converts_data(self):
        res = ApiResponse(True, 200, {"n": 2}).map(lambda d: d["n"] * 2)
        self.assertEqual(res, ApiResponse(True, 200, 4))

    def test_map_malformed_payload_is_a_failure(self):
        res = ApiResponse(True, 200, {}).map(lambda d: d["missing"])
        self.assertFalse(res.success)
        self.assertEqual(res.status, 200)
        self.assertEqual(res.error, "Malformed response")

    def test_map_keeps_failures(self):
        failed = ApiResponse(False, 404, None, "Not found")
        self.assertEqual(failed.map(lambda d: d["x"]), failed)


if __name__ == "__main__":
    unittest.main()
