"""Fixed lookup lists, storage keys and limits."""
from __future__ import annotations

JOB_TYPES: tuple[str, ...] = ("full-time", "part-time", "contract", "remote")

JOB_CATEGORIES: tuple[str, ...] = (
    "Technology",
    "Marketing",
    "Design",
    "Sales",
    "Customer Service",
    "Human Resources",
    "Finance",
    "Operations",
    "Engineering",
    "Healthcare",
)

JOBS_PER_PAGE = 10
CATALOG_SIZE = 100
POPULAR_JOBS_COUNT = 5
RECENTLY_VIEWED_LIMIT = 20
SEARCH_HISTORY_LIMIT = 10


class StorageKeys:
    USER_TOKEN = "user_token"
    USER_DATA = "user_data"
    SAVED_JOBS = "saved_jobs"
    RECENTLY_VIEWED = "recently_viewed"
    SEARCH_HISTORY = "search_history"
    APP_SETTINGS = "app_settings"


# Keys dropped on logout
SESSION_KEYS: tuple[str, ...] = (
    StorageKeys.USER_TOKEN,
    StorageKeys.USER_DATA,
    StorageKeys.SAVED_JOBS,
    StorageKeys.RECENTLY_VIEWED,
)

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password123"
PLACEHOLDER_AVATAR = "https://via.placeholder.com/150"
