import time
import unittest

from helpers import make_token

from api.models import Role
from store import policy
from store.policy import authorize, landing_route


class PolicyTestCase(unittest.TestCase):
    def setUp(self):
        self.user = make_token(role="USER")
        self.admin = make_token(sub="root", user_id=1, role="ADMIN")

    def test_public_routes_always_allowed(self):
        for token in (None, "garbage", self.user, self.admin):
            self.assertTrue(authorize(policy.LOGIN, token).allowed)
            self.assertTrue(authorize(policy.REGISTER, token).allowed)

    def test_no_session_redirects_to_login(self):
        for route in sorted(policy.CUSTOMER_ROUTES | policy.ADMIN_ROUTES):
            with self.subTest(route=route):
                decision = authorize(route, None)
                self.assertFalse(decision.allowed)
                self.assertEqual(decision.redirect, policy.LOGIN)

    def test_expired_session_redirects_to_login(self):
        expired = make_token(exp_in=-1)
        self.assertEqual(authorize("cart", expired).redirect, policy.LOGIN)
        # the same token is fine before it expires
        self.assertTrue(authorize("cart", expired, now=time.time() - 3600).allowed)

    def test_customer_on_admin_route_goes_to_menu(self):
        decision = authorize("admin_users", self.user)
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.redirect, policy.MENU)

    def test_customer_routes_allow_any_signed_in_role(self):
        for route in sorted(policy.CUSTOMER_ROUTES):
            with self.subTest(route=route):
                self.assertTrue(authorize(route, self.user).allowed)
                self.assertTrue(authorize(route, self.admin).allowed)

    def test_admin_routes_allow_admin(self):
        for route in sorted(policy.ADMIN_ROUTES):
            with self.subTest(route=route):
                self.assertTrue(authorize(route, self.admin).allowed)

    def test_unknown_route_redirects_to_login(self):
        decision = authorize("backdoor", self.admin)
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.redirect, policy.LOGIN)

    def test_landing_route(self):
        self.assertEqual(landing_route(Role.ADMIN), policy.ADMIN_DASHBOARD)
        self.assertEqual(landing_route(Role.USER), policy.MENU)
        self.assertEqual(landing_route(None), policy.MENU)


if __name__ == "__main__":
    unittest.main()
