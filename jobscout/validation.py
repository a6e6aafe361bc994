"""Format checks for form input."""
from __future__ import annotations

import re
from urllib.parse import urlparse

# Patterns are applied with fullmatch, so a trailing newline never passes.
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_RE = re.compile(r"\+?[\d\s\-()]{10,}")
# At least one lowercase, one uppercase and one digit; 8+ chars from a fixed set.
PASSWORD_RE = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}")


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.fullmatch(email or ""))


def validate_password(password: str) -> bool:
    return bool(PASSWORD_RE.fullmatch(password or ""))


def validate_phone(phone: str) -> bool:
    return bool(PHONE_RE.fullmatch(phone or ""))


def is_valid_url(value: str) -> bool:
    try:
        parsed = urlparse(value or "")
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)
