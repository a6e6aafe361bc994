"""Auth slice: session state, its reducer, and the login/register/logout thunks."""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from jobscout.constants import SESSION_KEYS, StorageKeys
from jobscout.errors import StorageError
from jobscout.log import get_logger
from jobscout.models import AuthPayload, User
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
from jobscout.storage import KeyValueStorage, remove_keys

if TYPE_CHECKING:
    from jobscout.state.store import Store

log = get_logger(__name__)

LOGIN = "auth/loginUser"
REGISTER = "auth/registerUser"
LOGOUT = "auth/logoutUser"
LOAD_STORED_AUTH = "auth/loadStoredAuth"
UPDATE_PROFILE = "auth/updateProfile"
CLEAR_AUTH_ERROR = "auth/clearAuthError"
SET_USER = "auth/setUser"

LOGGED_OUT = "loggedOut"
LOADING = "loading"
LOGGED_IN = "loggedIn"


@dataclass(frozen=True)
class AuthState:
    user: User | None = None
    token: str | None = None
    is_loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.token)

    @property
    def status(self) -> str:
        if self.is_loading:
            return LOADING
        return LOGGED_IN if self.is_authenticated else LOGGED_OUT


_SESSION_STARTED = {lifecycle(LOGIN, FULFILLED), lifecycle(REGISTER, FULFILLED)}
_SESSION_PENDING = {
    lifecycle(LOGIN, PENDING),
    lifecycle(REGISTER, PENDING),
    lifecycle(LOAD_STORED_AUTH, PENDING),
}
_SESSION_FAILED = {
    lifecycle(LOGIN, REJECTED),
    lifecycle(REGISTER, REJECTED),
    lifecycle(LOAD_STORED_AUTH, REJECTED),
    lifecycle(LOGOUT, FULFILLED),
}


def auth_reducer(state: AuthState, action: Action) -> AuthState:
    t = action.type
    if t in _SESSION_PENDING:
        return replace(state, is_loading=True)
    if t in _SESSION_STARTED:
        payload: AuthPayload = action.payload
        return AuthState(user=payload.user, token=payload.token, is_loading=False)
    if t in _SESSION_FAILED:
        return AuthState()
    if t == lifecycle(LOAD_STORED_AUTH, FULFILLED):
        if action.payload is None:
            return replace(state, is_loading=False)
        return AuthState(user=action.payload.user, token=action.payload.token)
    if t in (lifecycle(UPDATE_PROFILE, FULFILLED), SET_USER):
        return replace(state, user=action.payload)
    if t == CLEAR_AUTH_ERROR:
        return replace(state, is_loading=False)
    return state


# ── Plain actions ────────────────────────────────────────────────────────


def clear_auth_error() -> Action:
    return Action(CLEAR_AUTH_ERROR)


def set_user(user: User) -> Action:
    return Action(SET_USER, payload=user)


# ── Persistence adapter ──────────────────────────────────────────────────


def _persist_session(store: Store) -> bool:
    token_ok = store.persist(StorageKeys.USER_TOKEN, lambda s: s.auth.token)
    user_ok = store.persist(
        StorageKeys.USER_DATA, lambda s: s.auth.user.to_dict() if s.auth.user else None
    )
    return token_ok and user_ok


def read_stored_session(storage: KeyValueStorage) -> AuthPayload | None:
    """Stored token + user, or None when either is missing or unreadable."""
    try:
        values = storage.multi_get([StorageKeys.USER_TOKEN, StorageKeys.USER_DATA])
    except StorageError as exc:
        log.warning("Could not read stored session: %s", exc)
        return None

    raw_token = values.get(StorageKeys.USER_TOKEN)
    raw_user = values.get(StorageKeys.USER_DATA)
    if not raw_token or not raw_user:
        return None
    try:
        token = json.loads(raw_token)
        user = User.from_dict(json.loads(raw_user))
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        log.warning("Stored session is malformed, ignoring: %s", exc)
        return None
    if not isinstance(token, str) or not token:
        return None
    return AuthPayload(user=user, token=token)


# ── Thunks ───────────────────────────────────────────────────────────────


def _with_session_persisted(store: Store, result: Result) -> Result:
    if not result.ok:
        return result
    return replace(result, persisted=_persist_session(store))


def login_user(store: Store, email: str, password: str) -> Result:
    result = run_async_action(
        store,
        LOGIN,
        lambda: store.auth_service.login(email, password).data,
        arg={"email": email},
    )
    return _with_session_persisted(store, result)


def register_user(
    store: Store,
    username: str,
    email: str,
    password: str,
    confirm_password: str,
) -> Result:
    result = run_async_action(
        store,
        REGISTER,
        lambda: store.auth_service.register(username, email, password, confirm_password).data,
        arg={"username": username, "email": email},
    )
    return _with_session_persisted(store, result)


def logout_user(store: Store) -> Result:
    """Clear the session in memory first, then drop every session key from storage."""
    store.dispatch(Action(lifecycle(LOGOUT, FULFILLED)))
    persisted = remove_keys(store.storage, SESSION_KEYS)
    log.info("Logged out%s", "" if persisted else " (stored session could not be cleared)")
    return Fulfilled(LOGOUT, None, persisted=persisted)


def load_stored_auth(store: Store) -> Result:
    return run_async_action(store, LOAD_STORED_AUTH, lambda: read_stored_session(store.storage))


def update_profile(store: Store, **fields: Any) -> Result:
    result = run_async_action(
        store,
        UPDATE_PROFILE,
        lambda: store.auth_service.update_profile(**fields).data,
        arg=fields,
    )
    if not result.ok:
        return result
    persisted = store.persist(
        StorageKeys.USER_DATA, lambda s: s.auth.user.to_dict() if s.auth.user else None
    )
    return replace(result, persisted=persisted)
