"""Mock authentication service: one demo account, local registration, profile merge."""
from __future__ import annotations

import itertools
import time
import uuid
from typing import Any

from jobscout.constants import DEMO_EMAIL, DEMO_PASSWORD, PLACEHOLDER_AVATAR
from jobscout.errors import ValidationError
from jobscout.log import get_logger
from jobscout.models import ApiResponse, AuthPayload, User

log = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8

DEMO_USER = User(
    id="1",
    username="Demo User",
    email=DEMO_EMAIL,
    profile_picture=PLACEHOLDER_AVATAR,
    bio="Full-stack developer with 5+ years of experience",
    skills=("React Native", "TypeScript", "Node.js", "PostgreSQL"),
    experience="5+ years",
    location="San Francisco, CA",
)

_token_counter = itertools.count(1)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _new_token() -> str:
    # Unique within a process; not a credential.
    return f"mock-jwt-token-{_now_ms()}-{next(_token_counter)}-{uuid.uuid4().hex[:8]}"


class MockAuthService:
    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency

    def _simulate_latency(self) -> None:
        if self.latency > 0:
            time.sleep(self.latency)

    def login(self, email: str, password: str) -> ApiResponse:
        self._simulate_latency()
        if email != DEMO_EMAIL or password != DEMO_PASSWORD:
            log.info("Rejected login for %s", email)
            raise ValidationError("Invalid credentials")
        return ApiResponse(
            data=AuthPayload(user=DEMO_USER, token=_new_token()),
            message="Logged in successfully",
        )

    def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> ApiResponse:
        self._simulate_latency()
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        user = User(
            id=str(_now_ms()),
            username=username,
            email=email,
            profile_picture=PLACEHOLDER_AVATAR,
            bio="",
            skills=(),
            experience="Entry level",
            location="",
        )
        log.info("Registered user %s (%s)", user.id, email)
        return ApiResponse(
            data=AuthPayload(user=user, token=_new_token()),
            message="Registered successfully",
        )

    def update_profile(self, **fields: Any) -> ApiResponse:
        """Full replace: unspecified (or empty) fields fall back to the baseline, not the current user."""
        self._simulate_latency()
        skills = fields.get("skills")
        user = User(
            id=fields.get("id") or DEMO_USER.id,
            username=fields.get("username") or DEMO_USER.username,
            email=fields.get("email") or DEMO_USER.email,
            profile_picture=fields.get("profile_picture") or PLACEHOLDER_AVATAR,
            bio=fields.get("bio") or "",
            skills=tuple(skills) if skills else (),
            experience=fields.get("experience") or "Entry level",
            location=fields.get("location") or "",
            resume=fields.get("resume"),
        )
        return ApiResponse(data=user, message="Profile updated successfully")

    def forgot_password(self, email: str) -> ApiResponse:
        self._simulate_latency()
        return ApiResponse(data=None, message=f"Password reset email sent to {email}")

    def change_password(self, current_password: str, new_password: str) -> ApiResponse:
        self._simulate_latency()
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        return ApiResponse(data=None, message="Password changed successfully")
