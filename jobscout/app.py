"""Build a ready-to-use store from configuration and rehydrate it from storage."""
from __future__ import annotations

from typing import Any

from jobscout.auth import MockAuthService
from jobscout.config import load_settings, storage_dir
from jobscout.log import get_logger
from jobscout.sources import get_jobs_service
from jobscout.state import Store
from jobscout.state.actions import Result
from jobscout.state.auth import load_stored_auth
from jobscout.state.jobs import load_recently_viewed, load_saved_jobs
from jobscout.state.ui import load_preferences
from jobscout.storage import FileStorage, KeyValueStorage, MemoryStorage

log = get_logger(__name__)


def create_storage(settings: dict[str, Any]) -> KeyValueStorage:
    cfg = settings.get("storage", {})
    if cfg.get("backend") == "memory":
        log.info("Using in-memory storage (nothing survives a restart)")
        return MemoryStorage()
    path = storage_dir(settings) / cfg.get("filename", "storage.json")
    log.info("Using file storage at %s", path)
    return FileStorage(path)


def create_store(
    settings: dict[str, Any] | None = None,
    storage: KeyValueStorage | None = None,
) -> Store:
    settings = settings or load_settings()
    latency = float(settings.get("mock", {}).get("latency_seconds", 0.0))

    store: Store | None = None

    def current_token() -> str | None:
        return store.state.auth.token if store is not None else None

    store = Store(
        jobs_service=get_jobs_service(settings, token_getter=current_token),
        auth_service=MockAuthService(latency=latency),
        storage=storage or create_storage(settings),
        max_workers=int(settings.get("workers", 4)),
    )
    return store


def start(store: Store) -> dict[str, Result]:
    """Rehydrate session, saved jobs, recently viewed and UI preferences."""
    results = {
        "auth": load_stored_auth(store),
        "saved_jobs": load_saved_jobs(store),
        "recently_viewed": load_recently_viewed(store),
        "preferences": load_preferences(store),
    }
    state = store.state
    log.info(
        "Started: status=%s, saved=%d, recently_viewed=%d",
        state.auth.status,
        len(state.jobs.saved_jobs),
        len(state.jobs.recently_viewed),
    )
    return results
