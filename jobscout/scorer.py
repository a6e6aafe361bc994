"""Score jobs against a user's skills."""
from __future__ import annotations

from typing import Iterable

from jobscout.log import get_logger
from jobscout.models import Job, ScoredJob, User

log = get_logger(__name__)


def _normalize(s: str) -> str:
    return (s or "").lower().strip()


def _skill_matches(skill: str, requirement: str) -> bool:
    """Substring match in either direction, so "React" matches "React Native"."""
    s, r = _normalize(skill), _normalize(requirement)
    if not s or not r:
        return False
    return s in r or r in s


def matched_requirements(skills: Iterable[str], requirements: Iterable[str]) -> list[str]:
    skills = list(skills)
    return [req for req in requirements if any(_skill_matches(s, req) for s in skills)]


def calculate_job_match(skills: Iterable[str], requirements: Iterable[str]) -> int:
    """Percentage (0-100, rounded) of *requirements* covered by *skills*."""
    requirements = list(requirements)
    if not requirements:
        return 0
    matches = matched_requirements(skills, requirements)
    return int(len(matches) * 100 / len(requirements) + 0.5)


def rank_jobs(user: User, jobs: Iterable[Job], min_score: int = 0) -> list[ScoredJob]:
    """Jobs scoring at least *min_score*, best first; ties keep catalog order."""
    scored: list[ScoredJob] = []
    for job in jobs:
        score = calculate_job_match(user.skills, job.requirements)
        if score < min_score:
            continue
        scored.append(
            ScoredJob(
                job=job,
                score=score,
                matched_skills=matched_requirements(user.skills, job.requirements),
            )
        )
    scored.sort(key=lambda s: s.score, reverse=True)
    log.debug("Ranked %d jobs for %s (min_score=%d)", len(scored), user.username, min_score)
    return scored
