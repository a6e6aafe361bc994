"""Jobs slice: the browsing window, saved jobs and recently viewed."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from jobscout.constants import RECENTLY_VIEWED_LIMIT, StorageKeys
from jobscout.formatting import remove_duplicates
from jobscout.log import get_logger
from jobscout.models import Job, JobFilters
from jobscout.state.actions import (
    FULFILLED,
    PENDING,
    REJECTED,
    Action,
    Fulfilled,
    Result,
    lifecycle,
    run_async_action,
)
from jobscout.state.auth import LOGOUT
from jobscout.storage import KeyValueStorage, read_json

if TYPE_CHECKING:
    from jobscout.state.store import RootState, Store

log = get_logger(__name__)

FETCH_JOBS = "jobs/fetchJobs"
SEARCH_JOBS = "jobs/searchJobs"
FETCH_JOB_DETAILS = "jobs/fetchJobDetails"
LOAD_SAVED_JOBS = "jobs/loadSavedJobs"
LOAD_RECENTLY_VIEWED = "jobs/loadRecentlyViewed"
SAVE_JOB = "jobs/saveJob"
UNSAVE_JOB = "jobs/unsaveJob"
ADD_TO_RECENTLY_VIEWED = "jobs/addToRecentlyViewed"
SET_SEARCH_QUERY = "jobs/setSearchQuery"
SET_FILTERS = "jobs/setFilters"
CLEAR_JOBS = "jobs/clearJobs"
RESET_JOBS_STATE = "jobs/resetJobsState"


@dataclass(frozen=True)
class JobsState:
    jobs: tuple[Job, ...] = ()
    saved_jobs: tuple[Job, ...] = ()
    recently_viewed: tuple[Job, ...] = ()
    is_loading: bool = False
    search_query: str = ""
    filters: JobFilters = field(default_factory=JobFilters)
    has_more: bool = True
    page: int = 1
    # Request id of the newest fetch/search; older responses are ignored.
    list_request_id: int = 0
    # A load-more started while a search is in flight never takes over the tag.
    search_in_flight: bool = False

    def is_saved(self, job_id: str) -> bool:
        return any(j.id == job_id for j in self.saved_jobs)


def _is_current(state: JobsState, action: Action) -> bool:
    return action.meta.get("request_id") == state.list_request_id


def _list_reducer(state: JobsState, action: Action) -> JobsState:
    t = action.type
    if t == lifecycle(FETCH_JOBS, PENDING):
        page = (action.meta.get("arg") or {}).get("page", 1)
        if page == 1:
            return replace(
                state,
                list_request_id=action.meta["request_id"],
                is_loading=True,
                search_in_flight=False,
            )
        if state.search_in_flight:
            return state
        return replace(state, list_request_id=action.meta["request_id"])
    if t == lifecycle(SEARCH_JOBS, PENDING):
        return replace(
            state,
            list_request_id=action.meta["request_id"],
            is_loading=True,
            search_in_flight=True,
        )

    if not _is_current(state, action):
        return state
    state = replace(state, search_in_flight=False)

    if t == lifecycle(FETCH_JOBS, FULFILLED):
        payload = action.payload
        if payload["page"] == 1:
            jobs = tuple(payload["jobs"])
        else:
            jobs = state.jobs + tuple(payload["jobs"])
        return replace(
            state,
            jobs=jobs,
            is_loading=False,
            has_more=payload["has_more"],
            page=payload["page"],
        )
    if t == lifecycle(SEARCH_JOBS, FULFILLED):
        payload = action.payload
        return replace(
            state,
            jobs=tuple(payload["jobs"]),
            is_loading=False,
            search_query=payload["query"],
            filters=payload["filters"],
            page=1,
            has_more=True,
        )
    # Rejected: keep whatever is already loaded.
    return replace(state, is_loading=False)


_LIST_ACTIONS = {
    lifecycle(prefix, stage)
    for prefix in (FETCH_JOBS, SEARCH_JOBS)
    for stage in (PENDING, FULFILLED, REJECTED)
}


def jobs_reducer(state: JobsState, action: Action) -> JobsState:
    t = action.type
    if t in _LIST_ACTIONS:
        return _list_reducer(state, action)

    if t == lifecycle(LOAD_SAVED_JOBS, FULFILLED):
        return replace(state, saved_jobs=tuple(action.payload))
    if t == lifecycle(LOAD_RECENTLY_VIEWED, FULFILLED):
        return replace(state, recently_viewed=tuple(action.payload))

    if t == SAVE_JOB:
        job: Job = action.payload
        if state.is_saved(job.id):
            return state
        return replace(state, saved_jobs=state.saved_jobs + (job,))
    if t == UNSAVE_JOB:
        if not state.is_saved(action.payload):
            return state
        return replace(
            state, saved_jobs=tuple(j for j in state.saved_jobs if j.id != action.payload)
        )
    if t == ADD_TO_RECENTLY_VIEWED:
        job = action.payload
        rest = tuple(j for j in state.recently_viewed if j.id != job.id)
        return replace(state, recently_viewed=((job,) + rest)[:RECENTLY_VIEWED_LIMIT])

    if t == SET_SEARCH_QUERY:
        return replace(state, search_query=action.payload)
    if t == SET_FILTERS:
        return replace(state, filters=action.payload)
    if t == CLEAR_JOBS:
        return replace(state, jobs=(), page=1, has_more=True)
    if t == RESET_JOBS_STATE:
        return replace(
            state,
            jobs=(),
            is_loading=False,
            search_query="",
            filters=JobFilters(),
            has_more=True,
            page=1,
        )
    if t == lifecycle(LOGOUT, FULFILLED):
        return replace(state, saved_jobs=(), recently_viewed=())
    return state


# ── Plain actions ────────────────────────────────────────────────────────


def set_search_query(query: str) -> Action:
    return Action(SET_SEARCH_QUERY, payload=query)


def set_filters(filters: JobFilters) -> Action:
    return Action(SET_FILTERS, payload=filters)


def clear_jobs() -> Action:
    return Action(CLEAR_JOBS)


def reset_jobs_state() -> Action:
    return Action(RESET_JOBS_STATE)


# ── Persistence adapter ──────────────────────────────────────────────────


def read_stored_jobs(
    storage: KeyValueStorage, key: str, limit: int | None = None
) -> tuple[Job, ...]:
    """Jobs stored under *key*; anything unreadable loads as an empty list."""
    raw = read_json(storage, key, [])
    if not isinstance(raw, list):
        log.warning("Stored %s is not a list, ignoring", key)
        return ()
    try:
        jobs = [Job.from_dict(item) for item in raw]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        log.warning("Stored %s holds a malformed job, ignoring: %s", key, exc)
        return ()
    jobs = remove_duplicates(jobs, key=lambda j: j.id)
    return tuple(jobs[:limit] if limit else jobs)


def _persist_saved(store: Store) -> bool:
    return store.persist(
        StorageKeys.SAVED_JOBS, lambda s: [j.to_dict() for j in s.jobs.saved_jobs]
    )


def _persist_recent(store: Store) -> bool:
    return store.persist(
        StorageKeys.RECENTLY_VIEWED, lambda s: [j.to_dict() for j in s.jobs.recently_viewed]
    )


def _list_is_stale(state: RootState, request_id: int) -> bool:
    return state.jobs.list_request_id != request_id


# ── Thunks ───────────────────────────────────────────────────────────────


def fetch_jobs(
    store: Store,
    page: int = 1,
    search_query: str = "",
    filters: JobFilters | None = None,
) -> Result:
    """Load one page. Page 1 replaces the list; later pages append to it."""

    def work() -> dict[str, Any]:
        response = store.jobs_service.fetch_jobs(page, search_query, filters)
        pagination = response.pagination
        return {
            "jobs": tuple(response.data),
            "page": page,
            "has_more": bool(pagination and pagination.has_more),
            "total": pagination.total if pagination else len(response.data),
        }

    return run_async_action(
        store,
        FETCH_JOBS,
        work,
        arg={"page": page, "search_query": search_query, "filters": filters},
        is_stale=_list_is_stale,
    )


def search_jobs(store: Store, query: str, filters: JobFilters | None = None) -> Result:
    filters = filters or JobFilters()

    def work() -> dict[str, Any]:
        response = store.jobs_service.search_jobs(query, filters)
        return {"jobs": tuple(response.data), "query": query, "filters": filters}

    return run_async_action(
        store,
        SEARCH_JOBS,
        work,
        arg={"query": query, "filters": filters},
        is_stale=_list_is_stale,
    )


def fetch_job_details(store: Store, job_id: str) -> Result:
    return run_async_action(
        store,
        FETCH_JOB_DETAILS,
        lambda: store.jobs_service.fetch_job_details(job_id).data,
        arg=job_id,
    )


def load_saved_jobs(store: Store) -> Result:
    return run_async_action(
        store, LOAD_SAVED_JOBS, lambda: read_stored_jobs(store.storage, StorageKeys.SAVED_JOBS)
    )


def load_recently_viewed(store: Store) -> Result:
    return run_async_action(
        store,
        LOAD_RECENTLY_VIEWED,
        lambda: read_stored_jobs(
            store.storage, StorageKeys.RECENTLY_VIEWED, limit=RECENTLY_VIEWED_LIMIT
        ),
    )


def save_job(store: Store, job: Job) -> Result:
    if store.state.jobs.is_saved(job.id):
        return Fulfilled(SAVE_JOB, store.state.jobs.saved_jobs)
    state = store.dispatch(Action(SAVE_JOB, payload=job))
    return Fulfilled(SAVE_JOB, state.jobs.saved_jobs, persisted=_persist_saved(store))


def unsave_job(store: Store, job_id: str) -> Result:
    if not store.state.jobs.is_saved(job_id):
        return Fulfilled(UNSAVE_JOB, store.state.jobs.saved_jobs)
    state = store.dispatch(Action(UNSAVE_JOB, payload=job_id))
    return Fulfilled(UNSAVE_JOB, state.jobs.saved_jobs, persisted=_persist_saved(store))


def add_to_recently_viewed(store: Store, job: Job) -> Result:
    state = store.dispatch(Action(ADD_TO_RECENTLY_VIEWED, payload=job))
    return Fulfilled(
        ADD_TO_RECENTLY_VIEWED, state.jobs.recently_viewed, persisted=_persist_recent(store)
    )
