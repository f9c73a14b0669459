"""
Client-side persistence.

MemoryStorage lives as long as the app process (the cart);
FileCookieJar survives restarts until a cookie's max age runs out (the session token).
"""

from __future__ import annotations

import json
import os
import time
from typing import Dict, Optional

from utils.logger import get_logger

_logger = get_logger(__name__)


class MemoryStorage:
    """String key/value store that is dropped when the app exits."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class FileCookieJar:
    """
    Named cookies with an absolute expiry, stored as one JSON file.

    The file is written owner read/write only (0600).
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _read(self) -> Dict[str, dict]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as err:
            _logger.warning(f"Ignoring unreadable cookie file {self.path}: {err}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, cookies: Dict[str, dict]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(cookies, f)
        os.chmod(self.path, 0o600)

    def get(self, name: str, now: Optional[float] = None) -> Optional[str]:
        cookies = self._read()
        cookie = cookies.get(name)
        if not isinstance(cookie, dict):
            return None
        now = time.time() if now is None else now
        expires = cookie.get("expires")
        # a hand-edited expiry that is not a number counts as expired
        if not isinstance(expires, (int, float)) or isinstance(expires, bool) or expires <= now:
            del cookies[name]
            self._write(cookies)
            return None
        return cookie.get("value")

    def set(self, name: str, value: str, max_age: int, now: Optional[float] = None) -> None:
        now = time.time() if now is None else now
        cookies = self._read()
        cookies[name] = {"value": value, "expires": now + max_age}
        self._write(cookies)

    def delete(self, name: str) -> None:
        cookies = self._read()
        if cookies.pop(name, None) is not None:
            self._write(cookies)


class MemoryCookieJar(FileCookieJar):
    """Same contract as FileCookieJar without touching disk."""

    def __init__(self) -> None:
        super().__init__("")
        self._cookies: Dict[str, dict] = {}

    def _read(self) -> Dict[str, dict]:
        return dict(self._cookies)

    def _write(self, cookies: Dict[str, dict]) -> None:
        self._cookies = dict(cookies)
