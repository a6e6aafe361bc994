"""Text search, structured filtering and pagination over the job catalog."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from jobscout.constants import JOBS_PER_PAGE
from jobscout.errors import ValidationError
from jobscout.models import Job, JobFilters
from jobscout.catalog import build_catalog


@dataclass(frozen=True)
class QueryResult:
    items: list[Job]
    total: int
    has_more: bool


def _normalize(s: str | None) -> str:
    return (s or "").lower().strip()


def matches_search(job: Job, text: str) -> bool:
    """Case-insensitive substring match on title, company, location or category."""
    needle = _normalize(text)
    if not needle:
        return True
    return any(
        needle in field.lower()
        for field in (job.title, job.company, job.location, job.category)
    )


def matches_filters(job: Job, filters: JobFilters) -> bool:
    if filters.location and _normalize(filters.location) not in job.location.lower():
        return False
    if filters.type and job.type != filters.type:
        return False
    if filters.category and job.category != filters.category:
        return False
    if filters.salary_range:
        if job.salary is None:
            return False
        rng = filters.salary_range
        if job.salary.min < rng.min or job.salary.max > rng.max:
            return False
    return True


def filter_jobs(
    jobs: Iterable[Job],
    search_text: str = "",
    filters: JobFilters | None = None,
) -> list[Job]:
    filters = filters or JobFilters()
    return [j for j in jobs if matches_search(j, search_text) and matches_filters(j, filters)]


def paginate(jobs: list[Job], page: int, size: int = JOBS_PER_PAGE) -> QueryResult:
    if page < 1:
        raise ValidationError(f"Page must be >= 1, got {page}")
    start = (page - 1) * size
    return QueryResult(
        items=jobs[start:start + size],
        total=len(jobs),
        has_more=page * size < len(jobs),
    )


def query(
    page: int = 1,
    search_text: str = "",
    filters: JobFilters | None = None,
    catalog: list[Job] | None = None,
    size: int = JOBS_PER_PAGE,
) -> QueryResult:
    """Search, filter, then return one page of the catalog."""
    jobs = catalog if catalog is not None else build_catalog()
    return paginate(filter_jobs(jobs, search_text, filters), page, size)
