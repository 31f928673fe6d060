# storefront/services/api_client.py
from typing import Any, Callable, Optional

import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import STOREFRONT_API_URL, HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Odpowiedz API inna niz 2xx albo z `success: false`."""

    def __init__(self, message: str, status_code: int | None = None, errors: list | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


def error_message(status_code: int, body: Any) -> str:
    if not isinstance(body, dict):
        return f"HTTP error! status: {status_code}"

    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        parts = []
        for err in errors:
            if not isinstance(err, dict):
                parts.append(str(err))
                continue
            path = ".".join(str(p) for p in err.get("path") or [])
            msg = err.get("message", "")
            parts.append(f"{path}: {msg}" if path else msg)
        joined = ", ".join(p for p in parts if p)
        if joined:
            return joined

    return body.get("message") or f"HTTP error! status: {status_code}"


class ApiClient:
    """
    Wspolny transport REST: base URL, token Bearer, koperta {success, data, message}.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or STOREFRONT_API_URL).rstrip("/")
        self.token_provider = token_provider or (lambda: None)
        self.timeout = timeout if timeout is not None else HTTP_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.info(f"{method} {url}")

        resp = self.session.request(
            method,
            url,
            json=json,
            headers=self._headers(),
            timeout=self.timeout,
        )

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.ok:
            message = error_message(resp.status_code, body)
            logger.error(f"API Error [{resp.status_code}] {method} {url}: {message}")
            errors = body.get("errors") if isinstance(body, dict) else None
            raise ApiError(message, status_code=resp.status_code, errors=errors)

        if not isinstance(body, dict):
            raise ApiError("Malformed API response", status_code=resp.status_code)

        if body.get("success") is False:
            raise ApiError(body.get("message") or "Request failed", status_code=resp.status_code)

        return body.get("data")

    @http_retry()
    def get(self, path: str) -> Any:
        return self.request("GET", path)

    # mutacje nie sa powtarzane: ponowiony POST moglby zdublowac ilosc
    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
