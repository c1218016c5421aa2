from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Phase:
    """A time-boxed stage of a hackathon with its own criteria and submissions."""
    id: int | None
    hackathon_id: int
    name: str
    start_date: datetime
    end_date: datetime


@dataclass
class Track:
    id: int | None
    phase_id: int
    name: str


@dataclass
class Group:
    """A scoring group. Its phase is the phase of its track."""
    id: int | None
    track_id: int
    name: str


@dataclass
class Team:
    id: int | None
    hackathon_id: int
    name: str
    leader_id: int | None = None  # notification target


@dataclass
class GroupTeam:
    """A team's membership in one scoring group, with derived average and rank.

    ``average_score`` and ``rank`` stay ``None`` until the first aggregation.
    """
    id: int | None
    group_id: int
    team_id: int
    average_score: float | None = None
    rank: int | None = None


@dataclass
class JudgeAssignment:
    id: int | None
    judge_id: int
    hackathon_id: int
    phase_id: int | None = None  # None = whole hackathon
