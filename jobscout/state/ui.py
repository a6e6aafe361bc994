"""UI slice: messages, active tab, search history and display preferences."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import TYPE_CHECKING, Any

from jobscout.constants import SEARCH_HISTORY_LIMIT, StorageKeys
from jobscout.errors import ValidationError
from jobscout.formatting import remove_duplicates
from jobscout.log import get_logger
from jobscout.state.actions import FULFILLED, Action, Fulfilled, Result, lifecycle, run_async_action
from jobscout.storage import KeyValueStorage, read_json

if TYPE_CHECKING:
    from jobscout.state.store import Store

log = get_logger(__name__)

SET_LOADING = "ui/setLoading"
SET_ERROR = "ui/setError"
SET_SUCCESS_MESSAGE = "ui/setSuccessMessage"
CLEAR_MESSAGES = "ui/clearMessages"
SET_ACTIVE_TAB = "ui/setActiveTab"
ADD_TO_SEARCH_HISTORY = "ui/addToSearchHistory"
CLEAR_SEARCH_HISTORY = "ui/clearSearchHistory"
UPDATE_NOTIFICATION_SETTINGS = "ui/updateNotificationSettings"
SET_THEME = "ui/setTheme"
SET_LANGUAGE = "ui/setLanguage"
LOAD_PREFERENCES = "ui/loadPreferences"
SAVE_PREFERENCES = "ui/savePreferences"

THEMES: tuple[str, ...] = ("light", "dark")
DEFAULT_TAB = "JobList"


@dataclass(frozen=True)
class NotificationSettings:
    enabled: bool = True
    job_alerts: bool = True
    application_updates: bool = True


@dataclass(frozen=True)
class UIState:
    is_loading: bool = False
    error: str | None = None
    success_message: str | None = None
    active_tab: str = DEFAULT_TAB
    search_history: tuple[str, ...] = ()
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    theme: str = "light"
    language: str = "en"


def _push_history(history: tuple[str, ...], query: str) -> tuple[str, ...]:
    query = query.strip()
    if not query or query in history:
        return history
    return ((query,) + history)[:SEARCH_HISTORY_LIMIT]


def ui_reducer(state: UIState, action: Action) -> UIState:
    t = action.type
    if t == SET_LOADING:
        return replace(state, is_loading=action.payload)
    if t == SET_ERROR:
        return replace(state, error=action.payload, is_loading=False)
    if t == SET_SUCCESS_MESSAGE:
        return replace(state, success_message=action.payload)
    if t == CLEAR_MESSAGES:
        return replace(state, error=None, success_message=None)
    if t == SET_ACTIVE_TAB:
        return replace(state, active_tab=action.payload)
    if t == ADD_TO_SEARCH_HISTORY:
        return replace(state, search_history=_push_history(state.search_history, action.payload))
    if t == CLEAR_SEARCH_HISTORY:
        return replace(state, search_history=())
    if t == UPDATE_NOTIFICATION_SETTINGS:
        return replace(state, notifications=replace(state.notifications, **action.payload))
    if t == SET_THEME:
        return replace(state, theme=action.payload)
    if t == SET_LANGUAGE:
        return replace(state, language=action.payload)
    if t == lifecycle(LOAD_PREFERENCES, FULFILLED):
        return replace(state, **action.payload)
    return state


# ── Plain actions ────────────────────────────────────────────────────────


def set_loading(value: bool) -> Action:
    return Action(SET_LOADING, payload=bool(value))


def set_error(message: str | None) -> Action:
    return Action(SET_ERROR, payload=message)


def set_success_message(message: str | None) -> Action:
    return Action(SET_SUCCESS_MESSAGE, payload=message)


def clear_messages() -> Action:
    return Action(CLEAR_MESSAGES)


def set_active_tab(tab: str) -> Action:
    return Action(SET_ACTIVE_TAB, payload=tab)


def add_to_search_history(query: str) -> Action:
    return Action(ADD_TO_SEARCH_HISTORY, payload=query)


def clear_search_history() -> Action:
    return Action(CLEAR_SEARCH_HISTORY)


def update_notification_settings(**changes: bool) -> Action:
    known = set(NotificationSettings.__dataclass_fields__)
    unknown = set(changes) - known
    if unknown:
        raise ValidationError(f"Unknown notification settings: {', '.join(sorted(unknown))}")
    return Action(UPDATE_NOTIFICATION_SETTINGS, payload={k: bool(v) for k, v in changes.items()})


def set_theme(theme: str) -> Action:
    if theme not in THEMES:
        raise ValidationError(f"Theme must be one of {', '.join(THEMES)}, got {theme!r}")
    return Action(SET_THEME, payload=theme)


def set_language(language: str) -> Action:
    return Action(SET_LANGUAGE, payload=language)


# ── Persistence adapter ──────────────────────────────────────────────────


def read_preferences(storage: KeyValueStorage) -> dict[str, Any]:
    """Whatever valid preferences are stored; bad entries are skipped, not raised."""
    prefs: dict[str, Any] = {}

    history = read_json(storage, StorageKeys.SEARCH_HISTORY, [])
    if isinstance(history, list):
        queries = [q.strip() for q in history if isinstance(q, str) and q.strip()]
        prefs["search_history"] = tuple(remove_duplicates(queries, key=lambda q: q))[
            :SEARCH_HISTORY_LIMIT
        ]

    settings = read_json(storage, StorageKeys.APP_SETTINGS, {})
    if not isinstance(settings, dict):
        return prefs
    if settings.get("theme") in THEMES:
        prefs["theme"] = settings["theme"]
    if isinstance(settings.get("language"), str) and settings["language"]:
        prefs["language"] = settings["language"]
    notifications = settings.get("notifications")
    if isinstance(notifications, dict):
        known = NotificationSettings.__dataclass_fields__
        prefs["notifications"] = NotificationSettings(
            **{k: bool(v) for k, v in notifications.items() if k in known}
        )
    return prefs


# ── Thunks ───────────────────────────────────────────────────────────────


def load_preferences(store: Store) -> Result:
    return run_async_action(store, LOAD_PREFERENCES, lambda: read_preferences(store.storage))


def save_preferences(store: Store) -> Result:
    history_ok = store.persist(StorageKeys.SEARCH_HISTORY, lambda s: list(s.ui.search_history))
    settings_ok = store.persist(
        StorageKeys.APP_SETTINGS,
        lambda s: {
            "theme": s.ui.theme,
            "language": s.ui.language,
            "notifications": asdict(s.ui.notifications),
        },
    )
    return Fulfilled(SAVE_PREFERENCES, None, persisted=history_ok and settings_ok)
