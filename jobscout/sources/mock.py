"""Mock jobs backend: serves the synthetic catalog through the query service."""
from __future__ import annotations

import random
import time
from datetime import datetime, timezone

from jobscout.constants import JOBS_PER_PAGE
from jobscout.log import get_logger
from jobscout.models import ApiResponse, JobFilters, Pagination
from jobscout.query import query as run_query
from jobscout.sources.base import JobsServiceBase
from jobscout.catalog import build_catalog, find_job

log = get_logger(__name__)

APPLICATION_STATUSES: tuple[str, ...] = ("pending", "reviewed", "accepted", "rejected")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class MockJobsService(JobsServiceBase):
    def __init__(self, latency: float = 0.0, now: datetime | None = None) -> None:
        self.latency = latency
        # Fixed clock for reproducible catalogs; None means "current time per call".
        self.now = now

    def _simulate_latency(self) -> None:
        if self.latency > 0:
            time.sleep(self.latency)

    def fetch_jobs(
        self, page: int = 1, query: str = "", filters: JobFilters | None = None
    ) -> ApiResponse:
        self._simulate_latency()
        result = run_query(page, query, filters, catalog=build_catalog(self.now))
        log.debug(
            "Mock fetch page=%d query=%r -> %d of %d", page, query, len(result.items), result.total
        )
        return ApiResponse(
            data=result.items,
            message="Jobs fetched successfully",
            success=True,
            pagination=Pagination(
                page=page, limit=JOBS_PER_PAGE, total=result.total, has_more=result.has_more
            ),
        )

    def fetch_job_details(self, job_id: str) -> ApiResponse:
        self._simulate_latency()
        return ApiResponse(
            data=find_job(job_id, self.now),
            message="Job details fetched successfully",
            success=True,
        )

    def apply_for_job(
        self, job_id: str, cover_letter: str | None = None, resume: str | None = None
    ) -> ApiResponse:
        self._simulate_latency()
        find_job(job_id, self.now)
        application_id = f"app_{time.time_ns() // 1_000_000}"
        log.info("Mock application %s submitted for job %s", application_id, job_id)
        return ApiResponse(
            data={"applicationId": application_id},
            message="Application submitted successfully",
            success=True,
        )

    def get_application_status(self, application_id: str) -> ApiResponse:
        self._simulate_latency()
        return ApiResponse(
            data={"status": random.choice(APPLICATION_STATUSES), "appliedAt": _now_iso()},
            message="Application status fetched successfully",
            success=True,
        )
