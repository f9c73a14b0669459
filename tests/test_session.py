import base64
import json
import os
import tempfile
import time
import unittest

from helpers import make_token

from api.models import Role
from store import session
from store.session import Session
from store.storage import FileCookieJar, MemoryCookieJar
from store.token import decode_token, mask_token
from utils.config import AUTH_COOKIE


def _b64(obj) -> str:
    raw = json.dumps(obj).encode() if not isinstance(obj, bytes) else obj
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


class TokenCodecTestCase(unittest.TestCase):
    # ---------- decode ----------

    def test_decode_returns_claims_without_checking_signature(self):
        token = make_token(sub="bob", user_id=3, role="ADMIN")
        claims = decode_token(token)
        self.assertEqual(claims["sub"], "bob")
        self.assertEqual(claims["userId"], 3)
        self.assertEqual(claims["role"], "ADMIN")

    def test_decode_ignores_expiry(self):
        claims = decode_token(make_token(exp_in=-60))
        self.assertEqual(claims["sub"], "alice")

    def test_decode_malformed_tokens_are_empty(self):
        header = _b64({"alg": "HS256", "typ": "JWT"})
        for token in [
            None,
            "",
            "abc",
            "a.b",
            f"{header}.!!!not-base64!!!.sig",
            f"{header}.{_b64(b'not json')}.sig",
            f"{header}.{_b64([1, 2, 3])}.sig",
        ]:
            with self.subTest(token=token):
                self.assertEqual(decode_token(token), {})

    def test_mask_token_never_shows_the_whole_token(self):
        token = make_token()
        masked = mask_token(token)
        self.assertNotEqual(masked, token)
        self.assertTrue(masked.startswith(token[:8]))
        self.assertEqual(mask_token(None), "<none>")


class SessionGateTestCase(unittest.TestCase):
    # ---------- is_valid ----------

    def test_valid_token(self):
        self.assertTrue(session.is_valid(make_token()))

    def test_expiry_is_strict(self):
        now = time.time()
        token = make_token(exp=int(now) + 100)
        self.assertTrue(session.is_valid(token, now=int(now) + 99))
        self.assertFalse(session.is_valid(token, now=int(now) + 100))
        self.assertFalse(session.is_valid(token, now=int(now) + 101))

    def test_missing_or_empty_claims_are_invalid(self):
        self.assertFalse(session.is_valid(make_token(sub="")))
        self.assertFalse(session.is_valid(make_token(user_id=0)))
        self.assertFalse(session.is_valid(make_token(role="")))
        self.assertFalse(session.is_valid(make_token(exp_in=None)))

    def test_non_numeric_exp_is_invalid(self):
        self.assertFalse(session.is_valid(make_token(exp="tomorrow")))
        self.assertFalse(session.is_valid(make_token(exp=True)))

    def test_absent_token_is_invalid(self):
        self.assertFalse(session.is_valid(None))
        self.assertFalse(session.is_valid(""))
        self.assertFalse(session.is_valid("garbage"))

    # ---------- accessors ----------

    def test_accessors(self):
        token = make_token(sub="carol", user_id="12", role="ADMIN")
        self.assertIs(session.role(token), Role.ADMIN)
        self.assertEqual(session.user_id(token), 12)
        self.assertEqual(session.username(token), "carol")

    def test_accessors_are_best_effort(self):
        token = make_token(role="CHEF", user_id="n/a")
        self.assertIsNone(session.role(token))
        self.assertIsNone(session.user_id(token))
        self.assertIsNone(session.role(None))
        self.assertIsNone(session.username("garbage"))

    # ---------- Session ----------

    def test_save_and_clear(self):
        s = Session(MemoryCookieJar(), 3600)
        self.assertIsNone(s.token)
        self.assertFalse(s.is_valid())

        token = make_token(sub="dave", user_id=4)
        s.save(token)
        self.assertEqual(s.token, token)
        self.assertTrue(s.is_valid())
        self.assertEqual(s.username, "dave")
        self.assertEqual(s.user_id, 4)
        self.assertIs(s.role, Role.USER)
        self.assertEqual(s.claims["sub"], "dave")

        s.clear()
        self.assertIsNone(s.token)
        self.assertIsNone(s.role)
        self.assertEqual(s.claims, {})

    def test_session_survives_restart_through_cookie_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "session.json")
            token = make_token()
            Session(FileCookieJar(path), 3600).save(token)

            # a new process reads the same file
            restored = Session(FileCookieJar(path), 3600)
            self.assertEqual(restored.token, token)
            self.assertTrue(restored.is_valid())

    def test_cookie_name(self):
        jar = MemoryCookieJar()
        Session(jar, 3600).save(make_token())
        self.assertIsNotNone(jar.get(AUTH_COOKIE))


if __name__ == "__main__":
    unittest.main()
