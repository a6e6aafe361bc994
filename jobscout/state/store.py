"""Single store holding the auth, jobs and ui slices.

Reducers are pure; every commit goes through ``Store.dispatch``, which
serializes updates under one lock. Thunks (the functions in the slice
modules) do service and storage I/O around those commits and may run on the
store's worker pool via ``Store.submit``.
"""
from __future__ import annotations

import itertools
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable

from jobscout.auth import MockAuthService
from jobscout.log import get_logger
from jobscout.sources.base import JobsServiceBase
from jobscout.state.actions import Action, Result
from jobscout.state.auth import AuthState, auth_reducer
from jobscout.state.jobs import JobsState, jobs_reducer
from jobscout.state.ui import UIState, ui_reducer
from jobscout.storage import KeyValueStorage, write_json

log = get_logger(__name__)

Listener = Callable[["RootState", Action], None]


@dataclass(frozen=True)
class RootState:
    auth: AuthState = field(default_factory=AuthState)
    jobs: JobsState = field(default_factory=JobsState)
    ui: UIState = field(default_factory=UIState)


def root_reducer(state: RootState, action: Action) -> RootState:
    return RootState(
        auth=auth_reducer(state.auth, action),
        jobs=jobs_reducer(state.jobs, action),
        ui=ui_reducer(state.ui, action),
    )


class Store:
    def __init__(
        self,
        jobs_service: JobsServiceBase,
        auth_service: MockAuthService,
        storage: KeyValueStorage,
        max_workers: int = 4,
        initial_state: RootState | None = None,
    ) -> None:
        self.jobs_service = jobs_service
        self.auth_service = auth_service
        self.storage = storage
        self.max_workers = max_workers
        self._state = initial_state or RootState()
        self._lock = threading.Lock()
        self._persist_lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._request_ids = itertools.count(1)
        self._executor: ThreadPoolExecutor | None = None

    @property
    def state(self) -> RootState:
        return self._state

    def dispatch(self, action: Action) -> RootState:
        """Apply *action* and return the state it produced."""
        with self._lock:
            self._state = root_reducer(self._state, action)
            state = self._state
            listeners = list(self._listeners)
        log.debug("dispatch %s", action.type)
        for listener in listeners:
            try:
                listener(state, action)
            except Exception as exc:
                log.error("Listener %r failed on %s: %s", listener, action.type, exc)
        return state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def next_request_id(self) -> int:
        with self._lock:
            return next(self._request_ids)

    def persist(self, key: str, select: Callable[[RootState], Any]) -> bool:
        """Write the selected part of the *current* state to storage.

        Writers are serialized and always read the latest state, so the last
        write to land reflects every committed update.
        """
        with self._persist_lock:
            return write_json(self.storage, key, select(self._state))

    def submit(self, thunk: Callable[..., Result], *args: Any, **kwargs: Any) -> Future:
        """Run ``thunk(self, *args, **kwargs)`` on the worker pool."""
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="jobscout"
                )
            executor = self._executor
        return executor.submit(thunk, self, *args, **kwargs)

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
