"""HTTP jobs backend speaking the {data, message, success, pagination} envelope."""
from __future__ import annotations

from typing import Any, Callable

import requests

from jobscout.constants import JOBS_PER_PAGE
from jobscout.errors import NotFoundError, ServiceError, TransientServiceError
from jobscout.log import get_logger
from jobscout.models import ApiResponse, Job, JobFilters, Pagination
from jobscout.retry import retry
from jobscout.sources.base import JobsServiceBase

log = get_logger(__name__)


def _envelope(body: Any, data: Any) -> ApiResponse:
    try:
        pagination = Pagination.from_dict(body.get("pagination"))
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ServiceError(f"malformed pagination in response: {exc}") from exc
    return ApiResponse(
        data=data,
        message=str(body.get("message", "")),
        success=bool(body.get("success", True)),
        pagination=pagination,
    )


class HttpJobsService(JobsServiceBase):
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_base_delay: float = 1.0,
        token_getter: Callable[[], str | None] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_getter = token_getter
        self._request = retry(
            max_attempts=retry_attempts,
            base_delay=retry_base_delay,
            retryable=(TransientServiceError,),
        )(self._request_once)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.token_getter() if self.token_getter else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request_once(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            if method == "GET":
                r = requests.get(url, params=params, headers=self._headers(), timeout=self.timeout)
            else:
                r = requests.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise TransientServiceError(f"{method} {path} failed: {exc}") from exc
        except requests.RequestException as exc:
            raise ServiceError(f"{method} {path} failed: {exc}") from exc

        if r.status_code == 404:
            raise NotFoundError(f"{path} not found")
        if r.status_code >= 500:
            raise TransientServiceError(
                f"{method} {path} returned {r.status_code}", status_code=r.status_code
            )
        if r.status_code >= 400:
            raise ServiceError(
                f"{method} {path} returned {r.status_code}", status_code=r.status_code
            )
        try:
            body = r.json()
        except ValueError as exc:
            raise ServiceError(f"{method} {path} returned invalid JSON") from exc
        if not isinstance(body, dict) or "data" not in body:
            raise ServiceError(f"{method} {path} returned no envelope")
        if body.get("success") is False:
            raise ServiceError(body.get("message") or f"{method} {path} was not successful")
        return body

    def _parse_jobs(self, path: str, raw: Any) -> list[Job]:
        try:
            return [Job.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as exc:
            raise ServiceError(f"{path} returned malformed jobs: {exc}") from exc

    def fetch_jobs(
        self, page: int = 1, query: str = "", filters: JobFilters | None = None
    ) -> ApiResponse:
        params: dict[str, Any] = {"page": page, "limit": JOBS_PER_PAGE, "search": query}
        params.update((filters or JobFilters()).to_params())
        body = self._request("GET", "/jobs", params=params)
        jobs = self._parse_jobs("/jobs", body["data"])
        log.debug("HTTP fetch page=%d query=%r -> %d jobs", page, query, len(jobs))
        return _envelope(body, jobs)

    def fetch_job_details(self, job_id: str) -> ApiResponse:
        path = f"/jobs/{job_id}"
        body = self._request("GET", path)
        try:
            job = Job.from_dict(body["data"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ServiceError(f"{path} returned a malformed job: {exc}") from exc
        return _envelope(body, job)

    def apply_for_job(
        self, job_id: str, cover_letter: str | None = None, resume: str | None = None
    ) -> ApiResponse:
        payload = {k: v for k, v in {"coverLetter": cover_letter, "resume": resume}.items() if v}
        body = self._request("POST", f"/jobs/{job_id}/apply", payload=payload)
        return _envelope(body, body["data"])

    def get_application_status(self, application_id: str) -> ApiResponse:
        body = self._request("GET", f"/applications/{application_id}")
        return _envelope(body, body["data"])
