from __future__ import annotations

from abc import ABC, abstractmethod

from jobscout.constants import POPULAR_JOBS_COUNT
from jobscout.models import ApiResponse, JobFilters


class JobsServiceBase(ABC):
    """Backend contract consumed by the jobs slice. Every call returns an ApiResponse."""

    @abstractmethod
    def fetch_jobs(
        self, page: int = 1, query: str = "", filters: JobFilters | None = None
    ) -> ApiResponse:
        pass

    @abstractmethod
    def fetch_job_details(self, job_id: str) -> ApiResponse:
        pass

    @abstractmethod
    def apply_for_job(
        self, job_id: str, cover_letter: str | None = None, resume: str | None = None
    ) -> ApiResponse:
        pass

    @abstractmethod
    def get_application_status(self, application_id: str) -> ApiResponse:
        pass

    def search_jobs(self, query: str, filters: JobFilters | None = None) -> ApiResponse:
        return self.fetch_jobs(1, query, filters)

    def fetch_popular_jobs(self) -> ApiResponse:
        response = self.fetch_jobs(1, "", None)
        return ApiResponse(
            data=list(response.data)[:POPULAR_JOBS_COUNT],
            message=response.message,
            success=response.success,
            pagination=response.pagination,
        )

    def fetch_jobs_by_category(self, category: str) -> ApiResponse:
        return self.fetch_jobs(1, "", JobFilters(category=category))
