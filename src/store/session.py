from __future__ import annotations

import time
from typing import Any, Dict, Optional

from api.models import Role
from store.storage import FileCookieJar
from store.token import decode_token, mask_token
from utils.config import AUTH_COOKIE
from utils.logger import get_logger

_logger = get_logger(__name__)

REQUIRED_CLAIMS = ("sub", "userId", "role")


def is_valid(token: Optional[str], now: Optional[float] = None) -> bool:
    """
    True when the token decodes, carries subject, user id and role,
    and its `exp` (seconds since epoch) is strictly after `now`.
    """
    if not token:
        return False
    claims = decode_token(token)
    if not claims:
        return False
    if any(not claims.get(name) for name in REQUIRED_CLAIMS):
        return False
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return False
    now = time.time() if now is None else now
    return exp > now


def role(token: Optional[str]) -> Optional[Role]:
    value = decode_token(token).get("role")
    try:
        return Role(value)
    except ValueError:
        return None


def user_id(token: Optional[str]) -> Optional[int]:
    value = decode_token(token).get("userId")
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def username(token: Optional[str]) -> Optional[str]:
    value = decode_token(token).get("sub")
    return str(value) if value else None


class Session:
    """
    The signed-in visitor, backed by a single cookie holding the raw token.

    Nothing is cached: every accessor re-reads the cookie, so a logout
    is seen by the next check.
    """

    def __init__(self, jar: FileCookieJar, max_age: int) -> None:
        self._jar = jar
        self._max_age = max_age

    @property
    def token(self) -> Optional[str]:
        return self._jar.get(AUTH_COOKIE)

    def save(self, token: str) -> None:
        _logger.info(f"Session started for {username(token)} ({mask_token(token)})")
        self._jar.set(AUTH_COOKIE, token, self._max_age)

    def clear(self) -> None:
        _logger.info("Session cleared")
        self._jar.delete(AUTH_COOKIE)

    def is_valid(self, now: Optional[float] = None) -> bool:
        return is_valid(self.token, now)

    @property
    def claims(self) -> Dict[str, Any]:
        return decode_token(self.token)

    @property
    def role(self) -> Optional[Role]:
        return role(self.token)

    @property
    def user_id(self) -> Optional[int]:
        return user_id(self.token)

    @property
    def username(self) -> Optional[str]:
        return username(self.token)
