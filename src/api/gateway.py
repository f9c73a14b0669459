# the single wire boundary to the user, product, order and payment services
from __future__ import annotations

from dataclasses import dataclass
from decimal import InvalidOperation
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

import httpx

from utils.logger import get_logger

_logger = get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """
    Uniform result of every service call.

    Network failures and non-2xx responses both come back as success=False;
    callers branch on `success`, never on exceptions.
    """

    success: bool
    status: int
    data: Optional[T] = None
    error: Optional[str] = None

    def map(self, fn: Callable[[Any], U]) -> ApiResponse[U]:
        """Convert `data` on success. A payload that does not convert is a failure."""
        if not self.success:
            return ApiResponse(False, self.status, None, self.error)
        try:
            return ApiResponse(True, self.status, fn(self.data))
        except (KeyError, TypeError, ValueError, InvalidOperation) as err:
            _logger.warning(f"Malformed response payload ({type(err).__name__}: {err})")
            return ApiResponse(False, self.status, None, "Malformed response")


def _error_message(payload: Any, reason: str) -> str:
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    if payload:
        return str(payload)
    return reason or "Request failed"


class HttpGateway:
    """
    Issues JSON requests against the API base url, attaching the bearer token
    returned by `token_provider` when one exists.

    No retries and no timeout unless one is configured.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], Optional[str]],
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url, transport=transport, timeout=timeout
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse[Any]:
        _logger.debug(f"{method} {path} params={params}")
        try:
            res = await self._client.request(
                method,
                path,
                json=body,
                params=params,
                headers=self._headers(),
            )
        except httpx.HTTPError as err:
            _logger.warning(f"{method} {path} failed: {err!r}")
            return ApiResponse(False, 500, None, str(err) or "Network error")

        try:
            payload = res.json()
        except ValueError:
            payload = None

        if not res.is_success:
            error = _error_message(payload if payload is not None else res.text, res.reason_phrase)
            _logger.warning(f"{method} {path} -> {res.status_code}: {error}")
            return ApiResponse(False, res.status_code, None, error)

        return ApiResponse(True, res.status_code, payload)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse[Any]:
        return await self.request("GET", path, params=params)

    async def post(
        self, path: str, body: Any = None, params: Optional[Dict[str, Any]] = None
    ) -> ApiResponse[Any]:
        return await self.request("POST", path, body=body, params=params)

    async def put(
        self, path: str, body: Any = None, params: Optional[Dict[str, Any]] = None
    ) -> ApiResponse[Any]:
        return await self.request("PUT", path, body=body, params=params)

    async def delete(self, path: str) -> ApiResponse[Any]:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()
