from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Criterion:
    """Scoring criterion of a phase. ``weight`` is the maximum attainable points."""
    id: int | None
    phase_id: int
    name: str
    weight: float


@dataclass
class Submission:
    id: int | None
    team_id: int
    phase_id: int
    title: str = ""


@dataclass
class Score:
    """One judge's score for one criterion of one submission."""
    id: int | None
    judge_id: int
    submission_id: int
    criterion_id: int
    value: float
    comment: str | None = None
    scored_at: datetime = field(default_factory=utc_now)


@dataclass
class PenaltyBonus:
    """Signed point adjustment for a team in a phase. Soft-deleted rows never count."""
    id: int | None
    team_id: int
    phase_id: int
    points: float
    reason: str | None = None
    is_deleted: bool = False
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class FinalQualification:
    id: int | None
    team_id: int
    group_id: int
    phase_id: int   # the phase the team advances into
    track_id: int
    qualified_at: datetime = field(default_factory=utc_now)


@dataclass
class Ranking:
    """Hackathon-wide standing of a team, driven by final-phase scores."""
    id: int | None
    team_id: int
    hackathon_id: int
    total_score: float
    rank: int | None = None
    updated_at: datetime = field(default_factory=utc_now)
