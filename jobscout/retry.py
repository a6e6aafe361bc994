"""Retry decorator with exponential backoff for transient backend failures."""
from __future__ import annotations

import functools
import random
import time
from typing import Any, Callable, Iterator

from jobscout.errors import TransientServiceError
from jobscout.log import get_logger

log = get_logger(__name__)


def backoff_delays(
    retries: int,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
) -> Iterator[float]:
    """Seconds to wait before each of *retries* further attempts."""
    for n in range(retries):
        delay = min(base_delay * backoff_factor**n, max_delay)
        yield delay * (0.5 + random.random()) if jitter else delay


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: tuple[type[BaseException], ...] = (TransientServiceError,),
    sleep: Callable[[float], None] = time.sleep,
) -> Callable:
    """Retry the wrapped call while it raises one of *retryable*.

    After *max_attempts* calls the last error propagates unchanged, so the
    caller sees the same exception type it would without the decorator.
    """
    max_attempts = max(1, int(max_attempts))

    def decorator(fn: Callable) -> Callable:
        name = fn.__qualname__

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delays = backoff_delays(
                max_attempts - 1, base_delay, max_delay, backoff_factor, jitter
            )
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    delay = next(delays, None)
                    if delay is None:
                        log.error("%s gave up after %d attempts: %s", name, attempt, exc)
                        raise
                    log.warning(
                        "%s failed on attempt %d/%d (%s); next try in %.1fs",
                        name,
                        attempt,
                        max_attempts,
                        exc,
                        delay,
                    )
                    sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
