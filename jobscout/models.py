"""Data models for jobs, users, filters and the service envelope."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Salary:
    min: int
    max: int
    currency: str = "USD"

    def to_dict(self) -> dict[str, Any]:
        return {"min": self.min, "max": self.max, "currency": self.currency}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Salary | None:
        if not data:
            return None
        return cls(
            min=int(data["min"]),
            max=int(data["max"]),
            currency=str(data.get("currency", "USD")),
        )


@dataclass(frozen=True)
class Job:
    id: str
    title: str
    company: str
    location: str
    description: str
    requirements: tuple[str, ...]
    type: str
    posted_at: str
    application_url: str
    category: str
    salary: Salary | None = None
    logo: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON form, using the wire (camelCase) keys."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "description": self.description,
            "requirements": list(self.requirements),
            "type": self.type,
            "postedAt": self.posted_at,
            "applicationUrl": self.application_url,
            "category": self.category,
        }
        if self.salary is not None:
            data["salary"] = self.salary.to_dict()
        if self.logo is not None:
            data["logo"] = self.logo
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Job:
        """Build a Job from its wire form. Raises KeyError/TypeError/ValueError on bad input."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            company=data["company"],
            location=data["location"],
            description=data.get("description", ""),
            requirements=tuple(data.get("requirements") or ()),
            type=data["type"],
            posted_at=data["postedAt"],
            application_url=data.get("applicationUrl", ""),
            category=data.get("category", ""),
            salary=Salary.from_dict(data.get("salary")),
            logo=data.get("logo"),
        )


@dataclass(frozen=True)
class User:
    id: str
    username: str
    email: str
    skills: tuple[str, ...] = ()
    experience: str = ""
    profile_picture: str | None = None
    bio: str | None = None
    location: str | None = None
    resume: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "skills": list(self.skills),
            "experience": self.experience,
        }
        optional = {
            "profilePicture": self.profile_picture,
            "bio": self.bio,
            "location": self.location,
            "resume": self.resume,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=str(data["id"]),
            username=data["username"],
            email=data["email"],
            skills=tuple(data.get("skills") or ()),
            experience=data.get("experience", ""),
            profile_picture=data.get("profilePicture"),
            bio=data.get("bio"),
            location=data.get("location"),
            resume=data.get("resume"),
        )


@dataclass(frozen=True)
class SalaryRange:
    min: int
    max: int


@dataclass(frozen=True)
class JobFilters:
    """Structured filters; every field optional, all present fields AND-combined."""

    location: str | None = None
    type: str | None = None
    category: str | None = None
    salary_range: SalaryRange | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.location or self.type or self.category or self.salary_range)

    def to_params(self) -> dict[str, Any]:
        """Query-string form used by the HTTP backend."""
        params: dict[str, Any] = {}
        if self.location:
            params["location"] = self.location
        if self.type:
            params["type"] = self.type
        if self.category:
            params["category"] = self.category
        if self.salary_range:
            params["salaryMin"] = self.salary_range.min
            params["salaryMax"] = self.salary_range.max
        return params

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> JobFilters:
        if not data:
            return cls()
        rng = data.get("salaryRange") or data.get("salary_range")
        return cls(
            location=data.get("location") or None,
            type=data.get("type") or None,
            category=data.get("category") or None,
            salary_range=SalaryRange(int(rng["min"]), int(rng["max"])) if rng else None,
        )


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    has_more: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "hasMore": self.has_more,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Pagination | None:
        if not data:
            return None
        return cls(
            page=int(data["page"]),
            limit=int(data["limit"]),
            total=int(data["total"]),
            has_more=bool(data["hasMore"]),
        )


@dataclass
class ApiResponse:
    """Uniform response envelope returned by every service call."""

    data: Any
    message: str = ""
    success: bool = True
    pagination: Pagination | None = None


@dataclass(frozen=True)
class AuthPayload:
    user: User
    token: str


@dataclass
class ScoredJob:
    job: Job
    score: int
    matched_skills: list[str] = field(default_factory=list)