from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import tenacity
from tenacity import RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from seriesmeta.http.errors import RequestFailed, TransportFailure

logger = logging.getLogger(__name__)


def default_retry_on_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code < 600


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    backoff_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    max_backoff_seconds: float = 10.0
    retry_on_status: Callable[[int], bool] = default_retry_on_status

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1 (got {self.max_attempts}).")
        if self.backoff_seconds < 0:
            raise ValueError(f"backoff_seconds must be >= 0 (got {self.backoff_seconds}).")


def is_retryable(exc: BaseException, config: RetryConfig) -> bool:
    if isinstance(exc, TransportFailure):
        return True
    if isinstance(exc, RequestFailed) and exc.status_code is not None:
        return bool(config.retry_on_status(exc.status_code))
    return False


def _log_before_sleep(name: str) -> Callable[[RetryCallState], None]:
    def _hook(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait_s = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "%s: attempt %d failed (%s); retrying in %.2fs",
            name,
            retry_state.attempt_number,
            exc,
            wait_s,
        )

    return _hook


def build_retrying(
    config: RetryConfig,
    *,
    name: str,
    sleep: Callable[[float], None] = time.sleep,
) -> tenacity.Retrying:
    """
    Build a fresh Tenacity controller for one logical call.

    The last error is re-raised unchanged once attempts are exhausted.
    """

    return tenacity.Retrying(
        retry=retry_if_exception(lambda exc: is_retryable(exc, config)),
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(
            multiplier=config.backoff_seconds,
            exp_base=config.backoff_multiplier,
            max=config.max_backoff_seconds,
        ),
        sleep=sleep,
        before_sleep=_log_before_sleep(name),
        reraise=True,
    )
