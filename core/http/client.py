"""
HTTP Client

Synchronous client for the off-chain collaborators. The only remote call
today is the GitHub issue listing in orchestrator.tokenlog, so the client
knows about GitHub's rate-limit headers and retries the statuses GitHub
uses for transient failures.
"""

from __future__ import annotations

import json as jsonlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import requests


logger = logging.getLogger(__name__)


# Statuses worth another attempt; everything else is returned as-is
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True)
class HttpResponse:
    """Status, body and headers of a finished request."""
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @classmethod
    def from_requests(cls, response: requests.Response) -> "HttpResponse":
        return cls(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=response.elapsed.total_seconds() * 1000,
        )

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def rate_limit_remaining(self) -> Optional[int]:
        """Value of X-RateLimit-Remaining, when the server sent one."""
        for name, value in self.headers.items():
            if name.lower() == "x-ratelimit-remaining":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Raises:
            HttpError: If the body is not valid JSON (GitHub answers some
                failures with an HTML page)
        """
        try:
            return jsonlib.loads(self.content)
        except ValueError as e:
            raise HttpError(
                f"Response from {self.url or 'server'} is not JSON: {e}",
                status_code=self.status_code,
                response=self,
            ) from e

    def raise_for_status(self) -> None:
        if not self.ok:
            raise HttpError(
                f"HTTP {self.status_code}",
                status_code=self.status_code,
                response=self,
            )


class HttpError(Exception):
    """Transport failure, unusable body or an error status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[HttpResponse] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HttpClient:
    """
    requests session with default headers, a default timeout and a
    bounded retry.

    Transport errors and RETRY_STATUSES are retried up to max_retries
    extra times, sleeping retry_backoff * attempt seconds in between. When
    retries run out on a retryable status, that last response is returned
    so the caller can inspect it.

    Usage:
        with HttpClient(default_headers={"User-Agent": "sol-commons-tokenlog"}) as client:
            response = client.get("https://api.github.com/repos/o/r/issues")
            if response.ok:
                issues = response.json()
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_retries: int = 1,
        retry_backoff: float = 0.0,
        default_headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max(max_retries, 0)
        self.retry_backoff = max(retry_backoff, 0.0)
        self.default_headers = dict(default_headers or {})
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.default_headers)
        return self._session

    def _pause(self, attempt: int) -> None:
        if self.retry_backoff:
            time.sleep(self.retry_backoff * attempt)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Send a request, retrying transient failures.

        Raises:
            HttpError: If every attempt fails at the transport level
        """
        attempts = self.max_retries + 1
        last_error: Optional[requests.RequestException] = None

        for attempt in range(1, attempts + 1):
            try:
                raw = self.session.request(
                    method=method,
                    url=url,
                    headers=headers,
                    params=params,
                    timeout=timeout or self.timeout,
                )
            except requests.RequestException as e:
                last_error = e
                logger.debug(f"{method} {url} attempt {attempt}/{attempts} failed: {e}")
                if attempt < attempts:
                    self._pause(attempt)
                continue

            response = HttpResponse.from_requests(raw)
            if response.status_code in RETRY_STATUSES and attempt < attempts:
                logger.debug(f"{method} {url} attempt {attempt}/{attempts} got {response.status_code}")
                self._pause(attempt)
                continue
            return response

        raise HttpError(f"{method} {url} failed after {attempts} attempt(s): {last_error}") from last_error

    def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        return self.request("GET", url, headers=headers, params=params, timeout=timeout)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
