from typing import Any, Callable

from .base import JobsServiceBase
from .http import HttpJobsService
from .mock import MockJobsService

from jobscout.log import get_logger

log = get_logger(__name__)

__all__ = [
    "JobsServiceBase", "HttpJobsService", "MockJobsService",
    "get_jobs_service",
]


def get_jobs_service(
    settings: dict[str, Any],
    token_getter: Callable[[], str | None] | None = None,
) -> JobsServiceBase:
    api = settings.get("api", {})
    base_url = (api.get("base_url") or "").strip()

    if api.get("enabled") and base_url:
        log.info("Using HTTP jobs backend at %s", base_url)
        return HttpJobsService(
            base_url,
            timeout=float(api.get("timeout", 10.0)),
            retry_attempts=int(api.get("retry_attempts", 3)),
            retry_base_delay=float(api.get("retry_base_delay", 1.0)),
            token_getter=token_getter,
        )

    if api.get("enabled"):
        log.warning("api.enabled is set but api.base_url is empty, using mock backend")
    latency = float(settings.get("mock", {}).get("latency_seconds", 0.0))
    log.info("Using mock jobs backend (latency %.2fs)", latency)
    return MockJobsService(latency=latency)
