from __future__ import annotations


class HttpClientError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body_snippet: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet
        self.url = url


class TransportFailure(HttpClientError):
    """Connection-level failure (DNS, refused connection, read timeout, empty body)."""


class RateLimitTimeout(HttpClientError):
    """No rate-limiter permit was granted within the admission timeout."""


class DeadlineExceeded(HttpClientError):
    """The caller-supplied deadline passed before the call could complete."""


class RequestFailed(HttpClientError):
    def __init__(self, status_code: int, body: str, *, url: str | None = None) -> None:
        super().__init__(
            f"Request failed with HTTP {status_code}.",
            status_code=status_code,
            body_snippet=(body or "")[:400],
            url=url,
        )
        self.body = body


class NotFound(RequestFailed):
    """The remote source reports the requested resource as absent."""
