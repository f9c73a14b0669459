import os
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


def _optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


class Settings(BaseModel):
    api_url: str = os.getenv("QUICKBITE_API_URL", "http://localhost:8080")
    cookie_path: str = os.path.expanduser(
        os.getenv("QUICKBITE_COOKIE_PATH", "~/.quickbite/session.json")
    )
    cookie_max_age: int = int(os.getenv("QUICKBITE_COOKIE_MAX_AGE", str(60 * 60 * 24 * 7)))
    # None means requests wait as long as the server takes
    request_timeout: Optional[float] = _optional_float(
        os.getenv("QUICKBITE_REQUEST_TIMEOUT")
    )
    invoice_dir: str = os.getenv("QUICKBITE_INVOICE_DIR", "invoices")
    debug: bool = bool(os.getenv("DEBUG"))


AUTH_COOKIE = "quickbite_token"
CART_KEY = "quickbite_cart_v1"

LOGIN_PATH = "/user/api/users/login"
REGISTER_PATH = "/user/api/users/register"

DELIVERY_FEE = Decimal("30")
TAX_RATE = Decimal("0.05")
CURRENCY_SYMBOL = "₹"

settings = Settings()
