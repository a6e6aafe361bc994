"""Turn raw job data into display strings."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")

_UNEXPECTED = "An unexpected error occurred"


def _parse_iso(value: str) -> datetime:
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(value: str, now: datetime | None = None) -> str:
    """Relative age for recent postings, calendar date (M/D/YYYY) after a week."""
    posted = _parse_iso(value)
    now = now or datetime.now(timezone.utc)
    hours = int((now - posted).total_seconds() // 3600)

    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"
    if hours < 24 * 7:
        return f"{hours // 24}d ago"
    return f"{posted.month}/{posted.day}/{posted.year}"


def _short_number(num: int | float) -> str:
    if num >= 1000:
        # Half-up, so 2500 reads as 3k rather than the banker's-rounded 2k.
        return f"{int(num / 1000 + 0.5)}k"
    return str(num)


def format_salary(min_amount: int, max_amount: int, currency: str = "USD") -> str:
    if currency == "USD":
        return f"${_short_number(min_amount)} - ${_short_number(max_amount)}"
    return f"{currency} {_short_number(min_amount)} - {_short_number(max_amount)}"


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def capitalize_first_letter(text: str) -> str:
    return text[:1].upper() + text[1:]


def generate_initials(name: str) -> str:
    return "".join(word[:1] for word in name.split(" ")).upper()[:2]


def remove_duplicates(items: Iterable[T], key: Callable[[T], Any]) -> list[T]:
    """Keep the first item for each key, preserving order."""
    seen: set[Any] = set()
    out: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        out.append(item)
    return out


def sort_by_date(jobs: Iterable[T], ascending: bool = False) -> list[T]:
    """Sort anything with a ``posted_at`` ISO timestamp, newest first by default."""
    return sorted(jobs, key=lambda j: _parse_iso(j.posted_at), reverse=not ascending)


def get_error_message(error: Any) -> str:
    if isinstance(error, str):
        return error
    if isinstance(error, BaseException) and str(error):
        return str(error)
    if isinstance(error, dict):
        message = error.get("message")
        if message:
            return str(message)
    return _UNEXPECTED


def safe_json_parse(raw: str | None, default: T) -> T:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (ValueError, TypeError):
        return default
