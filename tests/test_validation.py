"""Form input format checks."""

import pytest

from jobscout.validation import is_valid_url, validate_email, validate_password, validate_phone


@pytest.mark.parametrize(
    "email, ok",
    [
        ("demo@example.com", True),
        ("first.last@sub.example.org", True),
        ("no-at-sign.com", False),
        ("two@@example.com", False),
        ("spaces in@example.com", False),
        ("", False),
    ],
)
def test_validate_email(email, ok):
    assert validate_email(email) is ok


@pytest.mark.parametrize(
    "password, ok",
    [
        ("Password1", True),
        ("Str0ng@Pass", True),
        ("password1", False),
        ("PASSWORD1", False),
        ("Password", False),
        ("Pa1", False),
        ("Password 1", False),
    ],
)
def test_validate_password(password, ok):
    assert validate_password(password) is ok


@pytest.mark.parametrize(
    "phone, ok",
    [
        ("+1 (555) 123-4567", True),
        ("5551234567", True),
        ("12345", False),
        ("555-CALL-NOW", False),
    ],
)
def test_validate_phone(phone, ok):
    assert validate_phone(phone) is ok


def test_is_valid_url():
    assert is_valid_url("https://example.com/apply/1")
    assert is_valid_url("mailto:jobs@example.com")
    assert not is_valid_url("not a url")
    assert not is_valid_url("")


def test_trailing_newline_is_rejected():
    assert not validate_email("a@b.co\n")
    assert not validate_password("Abcdefg1\n")
