"""Jobs slice: paging, search, saved jobs, recently viewed and stale responses."""

import json
import threading

import pytest

from jobscout.auth import MockAuthService
from jobscout.catalog import generate_job
from jobscout.constants import RECENTLY_VIEWED_LIMIT, StorageKeys
from jobscout.errors import NotFoundError, TransientServiceError
from jobscout.models import JobFilters
from jobscout.query import matches_search
from jobscout.sources.mock import MockJobsService
from jobscout.state import Store
from jobscout.state.jobs import (
    JobsState,
    add_to_recently_viewed,
    clear_jobs,
    fetch_job_details,
    fetch_jobs,
    jobs_reducer,
    load_recently_viewed,
    load_saved_jobs,
    read_stored_jobs,
    reset_jobs_state,
    save_job,
    search_jobs,
    set_filters,
    set_search_query,
    unsave_job,
)
from jobscout.storage import MemoryStorage

from conftest import FIXED_NOW


class GatedJobsService(MockJobsService):
    """Blocks page-2 fetches until ``release`` is set."""

    def __init__(self):
        super().__init__(now=FIXED_NOW)
        self.entered = threading.Event()
        self.release = threading.Event()

    def fetch_jobs(self, page=1, query="", filters=None):
        if page == 2:
            self.entered.set()
            assert self.release.wait(timeout=5)
        return super().fetch_jobs(page, query, filters)


class FlakyJobsService(MockJobsService):
    def __init__(self):
        super().__init__(now=FIXED_NOW)
        self.fail = False

    def fetch_jobs(self, page=1, query="", filters=None):
        if self.fail:
            raise TransientServiceError("backend unavailable")
        return super().fetch_jobs(page, query, filters)


class TestPaging:
    def test_first_page_replaces(self, store):
        result = fetch_jobs(store)

        assert result.ok
        jobs = store.state.jobs
        assert len(jobs.jobs) == 10
        assert jobs.page == 1
        assert jobs.has_more
        assert not jobs.is_loading
        assert result.payload["total"] == 102

    def test_second_page_appends(self, store):
        fetch_jobs(store, page=1)
        first_ids = [j.id for j in store.state.jobs.jobs]

        fetch_jobs(store, page=2)

        jobs = store.state.jobs
        assert len(jobs.jobs) == 20
        assert jobs.page == 2
        assert [j.id for j in jobs.jobs[:10]] == first_ids

    def test_last_page_has_no_more(self, store):
        fetch_jobs(store, page=11)
        assert store.state.jobs.has_more is False

    def test_page_one_again_resets(self, store):
        fetch_jobs(store, page=1)
        fetch_jobs(store, page=2)
        fetch_jobs(store, page=1)
        assert len(store.state.jobs.jobs) == 10
        assert store.state.jobs.page == 1

    def test_failed_load_more_keeps_loaded_jobs(self):
        service = FlakyJobsService()
        store = Store(service, MockAuthService(), MemoryStorage())
        try:
            fetch_jobs(store, page=1)
            service.fail = True

            result = fetch_jobs(store, page=2)

            assert not result.ok
            assert result.message == "backend unavailable"
            assert len(store.state.jobs.jobs) == 10
            assert store.state.jobs.page == 1
            assert not store.state.jobs.is_loading
        finally:
            store.close()


class TestSearch:
    def test_search_replaces_list(self, store):
        fetch_jobs(store, page=2)

        result = search_jobs(store, "Design")

        jobs = store.state.jobs
        assert result.ok
        assert len(jobs.jobs) == 10
        assert all(matches_search(j, "design") for j in jobs.jobs)
        assert jobs.page == 1
        assert jobs.search_query == "Design"

    def test_search_records_filters(self, store):
        filters = JobFilters(type="remote")
        search_jobs(store, "", filters)
        jobs = store.state.jobs
        assert jobs.filters == filters
        assert all(j.type == "remote" for j in jobs.jobs)

    def test_no_match(self, store):
        result = search_jobs(store, "zzzz-nothing")
        assert result.ok
        assert store.state.jobs.jobs == ()


def test_stale_load_more_is_discarded():
    service = GatedJobsService()
    with Store(service, MockAuthService(), MemoryStorage()) as store:
        fetch_jobs(store, page=1)
        pending = store.submit(fetch_jobs, page=2)
        assert service.entered.wait(timeout=5)

        search_jobs(store, "Design")
        searched = store.state.jobs.jobs
        service.release.set()
        late = pending.result(timeout=5)

        assert late.ok
        assert late.superseded
        assert store.state.jobs.jobs == searched
        assert store.state.jobs.page == 1
        assert store.state.jobs.search_query == "Design"


class GatedSearchService(MockJobsService):
    """Blocks searches (non-empty query) until ``release`` is set."""

    def __init__(self):
        super().__init__(now=FIXED_NOW)
        self.entered = threading.Event()
        self.release = threading.Event()

    def fetch_jobs(self, page=1, query="", filters=None):
        if query:
            self.entered.set()
            assert self.release.wait(timeout=5)
        return super().fetch_jobs(page, query, filters)


def test_load_more_does_not_supersede_pending_search():
    service = GatedSearchService()
    with Store(service, MockAuthService(), MemoryStorage()) as store:
        fetch_jobs(store, page=1)
        pending = store.submit(search_jobs, "Design")
        assert service.entered.wait(timeout=5)

        load_more = fetch_jobs(store, page=2)
        assert load_more.superseded
        assert len(store.state.jobs.jobs) == 10

        service.release.set()
        searched = pending.result(timeout=5)

        assert not searched.superseded
        jobs = store.state.jobs
        assert jobs.search_query == "Design"
        assert jobs.page == 1
        assert len(jobs.jobs) == 10
        assert all(matches_search(j, "design") for j in jobs.jobs)
        assert not jobs.search_in_flight
        assert not jobs.is_loading


class TestDetails:
    def test_found(self, store):
        result = fetch_job_details(store, "7")
        assert result.ok
        assert result.payload == generate_job(7, FIXED_NOW)

    def test_missing(self, store):
        result = fetch_job_details(store, "101")
        assert not result.ok
        with pytest.raises(NotFoundError):
            result.unwrap()


class TestSavedJobs:
    def test_save_is_idempotent(self, store, sample_job):
        save_job(store, sample_job)
        result = save_job(store, sample_job)

        assert result.ok
        assert store.state.jobs.saved_jobs == (sample_job,)
        stored = json.loads(store.storage.get(StorageKeys.SAVED_JOBS))
        assert [j["id"] for j in stored] == [sample_job.id]

    def test_unsave(self, store, sample_job):
        save_job(store, sample_job)
        unsave_job(store, sample_job.id)

        assert store.state.jobs.saved_jobs == ()
        assert not store.state.jobs.is_saved(sample_job.id)
        assert json.loads(store.storage.get(StorageKeys.SAVED_JOBS)) == []

    def test_unsave_unknown_is_noop(self, store):
        result = unsave_job(store, "nope")
        assert result.ok
        assert store.storage.get(StorageKeys.SAVED_JOBS) is None

    def test_failed_write_keeps_memory(self, make_store, failing_storage, sample_job):
        store = make_store(failing_storage)
        result = save_job(store, sample_job)
        assert result.ok
        assert result.persisted is False
        assert store.state.jobs.is_saved(sample_job.id)

    def test_reload(self, store, make_store, sample_jobs):
        for job in sample_jobs[:3]:
            save_job(store, job)
        restored = make_store(store.storage)

        load_saved_jobs(restored)

        assert restored.state.jobs.saved_jobs == tuple(sample_jobs[:3])

    def test_malformed_storage_loads_empty(self, make_store):
        storage = MemoryStorage({StorageKeys.SAVED_JOBS: json.dumps([{"id": "1"}])})
        store = make_store(storage)
        result = load_saved_jobs(store)
        assert result.ok
        assert store.state.jobs.saved_jobs == ()

    def test_non_list_loads_empty(self):
        storage = MemoryStorage({StorageKeys.SAVED_JOBS: json.dumps({"a": 1})})
        assert read_stored_jobs(storage, StorageKeys.SAVED_JOBS) == ()


class TestRecentlyViewed:
    def test_move_to_front(self, store, sample_jobs):
        a, b = sample_jobs[:2]
        add_to_recently_viewed(store, a)
        add_to_recently_viewed(store, b)
        add_to_recently_viewed(store, a)

        assert store.state.jobs.recently_viewed == (a, b)

    def test_capped(self, store, sample_jobs):
        for job in sample_jobs:
            add_to_recently_viewed(store, job)

        recent = store.state.jobs.recently_viewed
        assert len(recent) == RECENTLY_VIEWED_LIMIT
        assert recent[0] == sample_jobs[-1]
        assert sample_jobs[0] not in recent
        stored = json.loads(store.storage.get(StorageKeys.RECENTLY_VIEWED))
        assert len(stored) == RECENTLY_VIEWED_LIMIT

    def test_load_dedupes_and_caps(self, make_store, sample_jobs):
        raw = [j.to_dict() for j in sample_jobs] + [sample_jobs[0].to_dict()]
        store = make_store(MemoryStorage({StorageKeys.RECENTLY_VIEWED: json.dumps(raw)}))

        load_recently_viewed(store)

        recent = store.state.jobs.recently_viewed
        assert len(recent) == RECENTLY_VIEWED_LIMIT
        assert recent[0] == sample_jobs[0]


class TestPlainActions:
    def test_query_and_filters(self):
        state = jobs_reducer(JobsState(), set_search_query("react"))
        state = jobs_reducer(state, set_filters(JobFilters(category="Design")))
        assert state.search_query == "react"
        assert state.filters.category == "Design"

    def test_clear_jobs_keeps_saved(self, sample_job):
        state = JobsState(jobs=(sample_job,), saved_jobs=(sample_job,), page=3, has_more=False)
        state = jobs_reducer(state, clear_jobs())
        assert state.jobs == ()
        assert state.saved_jobs == (sample_job,)
        assert state.page == 1
        assert state.has_more

    def test_reset_keeps_saved_and_recent(self, sample_job):
        state = JobsState(
            jobs=(sample_job,),
            saved_jobs=(sample_job,),
            recently_viewed=(sample_job,),
            search_query="x",
            filters=JobFilters(type="remote"),
        )
        state = jobs_reducer(state, reset_jobs_state())
        assert state.jobs == ()
        assert state.search_query == ""
        assert state.filters == JobFilters()
        assert state.saved_jobs == (sample_job,)
        assert state.recently_viewed == (sample_job,)


class TestDamagedStorageFile:
    def test_invalid_utf8_loads_empty(self, make_store, file_storage):
        file_storage.path.write_bytes(b'{"saved_jobs": "\xff\xfe"}')
        store = make_store(file_storage)

        result = load_saved_jobs(store)

        assert result.ok
        assert store.state.jobs.saved_jobs == ()

    def test_save_recovers_from_invalid_utf8(self, make_store, file_storage, sample_job):
        file_storage.path.write_bytes(b"\xff\xfe")
        store = make_store(file_storage)

        result = save_job(store, sample_job)

        assert result.ok
        assert result.persisted

    def test_save_recovers_from_corrupt_document(self, make_store, file_storage, sample_job):
        file_storage.path.write_text("{not json", encoding="utf-8")
        store = make_store(file_storage)

        result = save_job(store, sample_job)

        assert result.persisted
        reloaded = make_store(file_storage)
        load_saved_jobs(reloaded)
        assert reloaded.state.jobs.saved_jobs == (sample_job,)
