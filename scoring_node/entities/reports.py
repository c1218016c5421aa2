"""Read models returned by the engine's public operations."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ScoreItem:
    criterion_id: int
    score: float
    comment: str | None = None


@dataclass
class SubmissionScores:
    submission_id: int
    scores: list[ScoreItem] = field(default_factory=list)


@dataclass
class ScoreDetail:
    score_id: int
    judge_id: int
    submission_id: int
    criterion_id: int
    score: float
    comment: str | None
    scored_at: datetime


@dataclass
class TeamScore:
    team_id: int
    team_name: str
    average_score: float | None
    rank: int | None


@dataclass
class JudgeSubmissionScores:
    submission_id: int
    submission_title: str
    total_score: float
    scores: list[ScoreDetail] = field(default_factory=list)


@dataclass
class CriterionAverage:
    criterion_id: int
    score: float
    comment: str | None = None


@dataclass
class TeamOverview:
    team_id: int
    team_name: str
    phase_id: int
    average_score: float | None
    rank: int | None
    criteria_scores: list[CriterionAverage] = field(default_factory=list)


@dataclass
class QualifiedTeam:
    team_id: int
    team_name: str
    group_id: int
    average_score: float  # display value: stored average + adjustments of the scoring phase


@dataclass
class Finalist:
    team_id: int
    team_name: str | None
    group_id: int
    group_name: str | None
    track_name: str | None
