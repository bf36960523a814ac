"""
Rate-limited, retrying HTTP executor.

Every outbound request made by a metadata provider goes through
`RateLimitedExecutor`. Each attempt first takes a permit from the provider's
limiter, then performs the call; failed attempts are retried according to the
provider's `RetryConfig`. The response is read exactly once and closed before
returning, on success and error paths alike.

Automated tests should pass a fake `session` and never hit a live source.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

import requests

from seriesmeta.http.deadline import remaining_seconds
from seriesmeta.http.errors import (
    DeadlineExceeded,
    NotFound,
    RateLimitTimeout,
    RequestFailed,
    TransportFailure,
)
from seriesmeta.http.rate_limit import RateLimiter
from seriesmeta.http.registry import ResilienceRegistry
from seriesmeta.http.retry import RetryConfig, build_retrying

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_USER_AGENT = "seriesmeta/0.1 (python-requests)"
DEFAULT_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True)
class HttpRequest:
    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, Any] | None = None
    body: bytes | None = None
    timeout_seconds: float | None = None


@dataclass(frozen=True)
class HttpResponse:
    body: bytes
    status_code: int
    headers: Mapping[str, str]

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")


def _read_text(response: requests.Response) -> str:
    return response.text or ""


def _read_envelope(response: requests.Response) -> HttpResponse:
    return HttpResponse(
        body=response.content or b"",
        status_code=response.status_code,
        headers=dict(response.headers),
    )


def _read_bytes(response: requests.Response) -> bytes:
    content = response.content
    if not content:
        raise TransportFailure("Response body is empty.", status_code=response.status_code, url=response.url)
    return content


def _status_error(response: requests.Response, url: str) -> RequestFailed:
    body = response.text or ""
    if response.status_code == 404:
        return NotFound(404, body, url=url)
    return RequestFailed(response.status_code, body, url=url)


class RateLimitedExecutor:
    def __init__(
        self,
        name: str,
        *,
        rate_limiter: RateLimiter,
        retry: RetryConfig | None = None,
        session: requests.Session | None = None,
        default_headers: Mapping[str, str] | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.name = name
        self._rate_limiter = rate_limiter
        self._retry = retry or RetryConfig()
        self._session = session or requests.Session()
        self._default_headers = {"user-agent": DEFAULT_USER_AGENT, **(default_headers or {})}
        self._timeout_seconds = timeout_seconds
        self._sleep = sleep

    @classmethod
    def from_registry(cls, registry: ResilienceRegistry, name: str, **kwargs: Any) -> RateLimitedExecutor:
        policy = registry.get(name)
        return cls(name, rate_limiter=policy.rate_limiter, retry=policy.retry, **kwargs)

    def execute(self, request: HttpRequest) -> str:
        return self._call(request, _read_text)

    def execute_with_response(self, request: HttpRequest) -> HttpResponse:
        return self._call(request, _read_envelope)

    def execute_with_bytes(self, request: HttpRequest) -> bytes:
        return self._call(request, _read_bytes)

    def _call(self, request: HttpRequest, reader: Callable[[requests.Response], T]) -> T:
        retrying = build_retrying(self._retry, name=self.name, sleep=self._backoff_sleep)
        return retrying(self._attempt, request, reader)

    def _backoff_sleep(self, seconds: float) -> None:
        # A backoff that would outlast the caller deadline fails now instead of sleeping.
        remaining = remaining_seconds()
        if remaining is not None and remaining < seconds:
            raise DeadlineExceeded(
                f"{self.name}: {max(remaining, 0.0):.2f}s left before deadline, retry backoff needs {seconds:.2f}s."
            )
        self._sleep(seconds)

    def _attempt(self, request: HttpRequest, reader: Callable[[requests.Response], T]) -> T:
        self._admit(request)
        timeout = self._network_timeout(request)
        headers = {**self._default_headers, **dict(request.headers)}

        logger.debug("%s %s %s", self.name, request.method, request.url)
        try:
            response = self._session.request(
                request.method,
                request.url,
                params=request.params,
                headers=headers,
                data=request.body,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            raise TransportFailure(f"{self.name} request failed: {exc}", url=request.url) from exc

        with response:
            if not 200 <= response.status_code < 300:
                raise _status_error(response, request.url)
            return reader(response)

    def _admit(self, request: HttpRequest) -> None:
        remaining = remaining_seconds()
        if remaining is None:
            self._rate_limiter.acquire()
            return

        if remaining <= 0:
            raise DeadlineExceeded(f"{self.name}: deadline passed before admission.", url=request.url)
        try:
            self._rate_limiter.acquire(timeout_seconds=remaining)
        except RateLimitTimeout as exc:
            left = remaining_seconds()
            if left is not None and left <= 0:
                raise DeadlineExceeded(
                    f"{self.name}: deadline passed while waiting for admission.",
                    url=request.url,
                ) from exc
            raise

    def _network_timeout(self, request: HttpRequest) -> float:
        timeout = request.timeout_seconds or self._timeout_seconds
        remaining = remaining_seconds()
        if remaining is None:
            return timeout
        if remaining <= 0:
            raise DeadlineExceeded(f"{self.name}: deadline passed before the request was sent.", url=request.url)
        return min(timeout, remaining)
