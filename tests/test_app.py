"""Wiring: building a store from settings and rehydrating it on start."""

import json

from jobscout.app import create_storage, create_store, start
from jobscout.auth import DEMO_USER
from jobscout.config import DEFAULT_SETTINGS
from jobscout.constants import DEMO_EMAIL, DEMO_PASSWORD, StorageKeys
from jobscout.sources import HttpJobsService, MockJobsService, get_jobs_service
from jobscout.state.auth import login_user
from jobscout.state.jobs import add_to_recently_viewed, save_job
from jobscout.state.ui import save_preferences, set_theme
from jobscout.storage import FileStorage, MemoryStorage


def _settings(tmp_path, **overrides):
    settings = json.loads(json.dumps(DEFAULT_SETTINGS))
    settings["storage"]["dir"] = str(tmp_path)
    for section, values in overrides.items():
        settings[section].update(values)
    return settings


def test_create_storage_backends(tmp_path):
    assert isinstance(create_storage(_settings(tmp_path)), FileStorage)
    assert isinstance(create_storage(_settings(tmp_path, storage={"backend": "memory"})), MemoryStorage)


def test_file_storage_path(tmp_path):
    storage = create_storage(_settings(tmp_path, storage={"filename": "app.json"}))
    assert storage.path == tmp_path / "app.json"


def test_jobs_service_selection(tmp_path):
    assert isinstance(get_jobs_service(_settings(tmp_path)), MockJobsService)
    api = {"enabled": True, "base_url": "https://api.example.com"}
    assert isinstance(get_jobs_service(_settings(tmp_path, api=api)), HttpJobsService)
    # Enabled without a URL falls back to the mock.
    assert isinstance(get_jobs_service(_settings(tmp_path, api={"enabled": True})), MockJobsService)


def test_http_backend_sees_current_token(tmp_path):
    api = {"enabled": True, "base_url": "https://api.example.com"}
    with create_store(_settings(tmp_path, api=api), storage=MemoryStorage()) as store:
        assert store.jobs_service.token_getter() is None
        login_user(store, DEMO_EMAIL, DEMO_PASSWORD)
        assert store.jobs_service.token_getter() == store.state.auth.token


def test_start_on_empty_storage(tmp_path):
    with create_store(_settings(tmp_path)) as store:
        results = start(store)

        assert set(results) == {"auth", "saved_jobs", "recently_viewed", "preferences"}
        assert all(r.ok for r in results.values())
        assert store.state.auth.status == "loggedOut"


def test_restart_restores_everything(tmp_path, sample_job):
    settings = _settings(tmp_path)
    with create_store(settings) as store:
        login_user(store, DEMO_EMAIL, DEMO_PASSWORD)
        save_job(store, sample_job)
        add_to_recently_viewed(store, sample_job)
        store.dispatch(set_theme("dark"))
        save_preferences(store)

    with create_store(settings) as store:
        start(store)
        state = store.state

    assert state.auth.user == DEMO_USER
    assert state.auth.is_authenticated
    assert state.jobs.saved_jobs == (sample_job,)
    assert state.jobs.recently_viewed == (sample_job,)
    assert state.ui.theme == "dark"
    stored = json.loads((tmp_path / "storage.json").read_text(encoding="utf-8"))
    assert StorageKeys.USER_TOKEN in stored


def test_start_survives_damaged_storage_file(tmp_path):
    (tmp_path / "storage.json").write_bytes(b"\xff\xfe")
    with create_store(_settings(tmp_path)) as store:
        results = start(store)
    assert all(r.ok for r in results.values())
    assert store.state.auth.status == "loggedOut"
