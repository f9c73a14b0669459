from typing import Any, Dict, Optional

import jwt

from utils.logger import get_logger

_logger = get_logger(__name__)

# claims are read for UI branching only; the services re-check the signature
_NO_VERIFY = {
    "verify_signature": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


def decode_token(token: Optional[str]) -> Dict[str, Any]:
    """
    Decode the payload segment of a bearer token into its claims.

    Returns an empty dict for a missing or malformed token.
    """
    if not token or not isinstance(token, str):
        return {}
    try:
        claims = jwt.decode(token, options=_NO_VERIFY)
    except jwt.PyJWTError as err:
        _logger.debug(f"Token decode failed for {mask_token(token)}: {err}")
        return {}
    return claims if isinstance(claims, dict) else {}


def mask_token(token: Optional[str]) -> str:
    if not token:
        return "<none>"
    return token if len(token) <= 12 else f"{token[:8]}...{token[-6:]}"
