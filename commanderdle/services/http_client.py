"""
JSON HTTP client with bounded exponential-backoff retry.

Topdeck in particular has intermittent origin timeouts and 5xx bursts,
so every call is retried on connection failure or a non-2xx status:

    attempt 1 fails -> wait 1s
    attempt 2 fails -> wait 2s
    attempt 3 fails -> NetworkExhausted

A response that arrives but is not JSON is a MalformedResponse and is
not retried.
"""

import logging
import time
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

import httpx

from commanderdle.config import USER_AGENT
from commanderdle.models.failure import MalformedResponse, NetworkExhausted

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 45.0
DEFAULT_MAX_ATTEMPTS = 3


def exponential_backoff(attempt: int) -> float:
    """Delay in seconds after the given failed attempt (1-based): 1, 2, 4, ..."""
    return float(2 ** (attempt - 1))


class HttpRetryClient:
    """
    Authenticated JSON client for one upstream API.

    Args:
        base_url: Prefix for every endpoint path
        api_key: Sent verbatim as the Authorization header when set
        timeout_s: Per-request timeout
        max_attempts: Total tries per call, including the first
        backoff: Maps a failed attempt number to a delay in seconds
        sleep: Blocking sleep; tests pass a no-op
        client: Optional preconfigured httpx client (not closed by us)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff: Callable[[int], float] = exponential_backoff,
        sleep: Callable[[float], None] = time.sleep,
        client: httpx.Client | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self._backoff = backoff
        self._sleep = sleep

        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if api_key:
            headers["Authorization"] = api_key

        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers=headers,
            timeout=timeout_s,
            follow_redirects=True,
        )
        if client is not None:
            self._client.headers.update(headers)

    def get(self, endpoint: str, query: Mapping[str, Any] | None = None) -> Any:
        """GET endpoint and return the decoded JSON body."""
        return self._request("GET", endpoint, params=dict(query or {}))

    def post(self, endpoint: str, body: Mapping[str, Any] | None = None) -> Any:
        """POST a JSON body to endpoint and return the decoded JSON body."""
        return self._request("POST", endpoint, json=dict(body or {}))

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        last_error = ""

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self._client.request(method, url, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                last_error = f"HTTP {e.response.status_code}"
            except httpx.RequestError as e:
                last_error = str(e) or type(e).__name__
            else:
                return _decode_json(response, url)

            if attempt < self.max_attempts:
                delay = self._backoff(attempt)
                logger.warning(
                    "%s %s failed (attempt %d/%d): %s; retrying in %.1fs",
                    method,
                    url,
                    attempt,
                    self.max_attempts,
                    last_error,
                    delay,
                )
                self._sleep(delay)

        logger.error("%s %s failed after %d attempts: %s", method, url, self.max_attempts, last_error)
        raise NetworkExhausted(url, self.max_attempts, last_error)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpRetryClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _decode_json(response: httpx.Response, url: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponse(url, f"Response is not JSON: {e}") from e
