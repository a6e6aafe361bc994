"""Deterministic synthetic job catalog used by the mock backend."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jobscout.constants import CATALOG_SIZE, JOB_CATEGORIES, JOB_TYPES
from jobscout.errors import NotFoundError, ValidationError
from jobscout.models import Job, Salary

COMPANIES: tuple[str, ...] = (
    "TechCorp",
    "InnovateLabs",
    "DataDriven Co.",
    "CloudFirst",
    "MobileTech",
    "StartupHub",
)

LOCATIONS: tuple[str, ...] = (
    "San Francisco, CA",
    "New York, NY",
    "Austin, TX",
    "Seattle, WA",
    "Boston, MA",
    "Remote",
)

TITLES: tuple[str, ...] = (
    "Senior React Native Developer",
    "Frontend Engineer",
    "Full Stack Developer",
    "UX/UI Designer",
    "Product Manager",
    "Data Scientist",
    "DevOps Engineer",
    "Backend Developer",
    "Mobile App Developer",
    "Software Architect",
)

SKILL_POOL: tuple[str, ...] = (
    "React Native",
    "TypeScript",
    "JavaScript",
    "Redux",
    "RESTful APIs",
)

# Hand-written postings shown ahead of the generated ones.
CURATED_JOBS: tuple[Job, ...] = (
    Job(
        id="featured-1",
        title="Senior React Native Developer",
        company="TechCorp Inc.",
        location="San Francisco, CA",
        description="We are looking for an experienced React Native developer to join our mobile team.",
        requirements=("React Native", "TypeScript", "Redux", "Jest"),
        salary=Salary(min=120000, max=150000, currency="USD"),
        type="full-time",
        posted_at="2024-01-15T10:00:00Z",
        application_url="https://example.com/apply/featured-1",
        category="Technology",
        logo="https://via.placeholder.com/100x100/007AFF/FFFFFF?text=T",
    ),
    Job(
        id="featured-2",
        title="UX/UI Designer",
        company="Design Studio",
        location="New York, NY",
        description="Join our creative team as a UX/UI Designer working on mobile and web applications.",
        requirements=("Figma", "Sketch", "User Research", "Prototyping"),
        salary=Salary(min=80000, max=100000, currency="USD"),
        type="full-time",
        posted_at="2024-01-14T14:30:00Z",
        application_url="https://example.com/apply/featured-2",
        category="Design",
        logo="https://via.placeholder.com/100x100/5856D6/FFFFFF?text=D",
    ),
)


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def generate_job(job_id: int, now: datetime | None = None) -> Job:
    """Synthesize the posting for *job_id*.

    Every field is a function of the id, except the posting date, which is
    ``now`` minus ``job_id % 30`` days. Pass a fixed ``now`` for fully
    reproducible output.
    """
    if job_id <= 0:
        raise ValidationError(f"Job id must be a positive integer, got {job_id}")
    now = now or datetime.now(timezone.utc)

    title = TITLES[job_id % len(TITLES)]
    company = COMPANIES[job_id % len(COMPANIES)]
    shade = str(job_id % 9) * 6
    band = job_id % 5

    return Job(
        id=str(job_id),
        title=title,
        company=company,
        location=LOCATIONS[job_id % len(LOCATIONS)],
        description=(
            f"We are looking for an experienced {title.lower()} to join our team. "
            "This is a great opportunity to work with cutting-edge technologies "
            "and make a real impact."
        ),
        requirements=SKILL_POOL[: 3 + (job_id % 3)],
        salary=Salary(min=80000 + band * 20000, max=120000 + band * 30000, currency="USD"),
        type=JOB_TYPES[job_id % len(JOB_TYPES)],
        posted_at=_iso(now - timedelta(days=job_id % 30)),
        application_url=f"https://example.com/apply/{job_id}",
        logo=f"https://via.placeholder.com/100x100/{shade}/FFFFFF?text={company[0]}",
        category=JOB_CATEGORIES[job_id % len(JOB_CATEGORIES)],
    )


def build_catalog(now: datetime | None = None, size: int = CATALOG_SIZE) -> list[Job]:
    """Curated jobs followed by generated jobs 1..size, all sharing one ``now``."""
    now = now or datetime.now(timezone.utc)
    return list(CURATED_JOBS) + [generate_job(i, now) for i in range(1, size + 1)]


def find_job(job_id: str, now: datetime | None = None) -> Job:
    for job in CURATED_JOBS:
        if job.id == job_id:
            return job
    try:
        numeric = int(job_id)
    except (TypeError, ValueError):
        raise NotFoundError(f"Job {job_id!r} not found") from None
    if not 1 <= numeric <= CATALOG_SIZE or str(numeric) != job_id:
        raise NotFoundError(f"Job {job_id!r} not found")
    return generate_job(numeric, now)
