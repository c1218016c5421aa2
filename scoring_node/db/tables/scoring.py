"""Score ledger, adjustment, qualification and ranking tables."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CriterionRow(SQLModel, table=True):
    __tablename__ = "criteria"

    id: Optional[int] = Field(default=None, primary_key=True)
    phase_id: int = Field(foreign_key="phases.id", index=True)
    name: str
    weight: float


class SubmissionRow(SQLModel, table=True):
    __tablename__ = "submissions"

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    phase_id: int = Field(foreign_key="phases.id", index=True)
    title: str = Field(default="")


class ScoreRow(SQLModel, table=True):
    __tablename__ = "scores"
    # backstop for concurrent inserts by the same judge
    __table_args__ = (
        UniqueConstraint("judge_id", "submission_id", "criterion_id", name="uq_scores_judge_submission_criterion"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    judge_id: int = Field(index=True)
    submission_id: int = Field(foreign_key="submissions.id", index=True)
    criterion_id: int = Field(foreign_key="criteria.id", index=True)
    value: float
    comment: Optional[str] = Field(default=None)
    scored_at: datetime = Field(default_factory=utc_now, index=True)


class PenaltyBonusRow(SQLModel, table=True):
    __tablename__ = "penalties_bonuses"

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    phase_id: int = Field(foreign_key="phases.id", index=True)
    points: float
    reason: Optional[str] = Field(default=None)
    is_deleted: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now)


class FinalQualificationRow(SQLModel, table=True):
    __tablename__ = "final_qualifications"
    __table_args__ = (UniqueConstraint("team_id", "phase_id", name="uq_final_qualifications_team_phase"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    group_id: int = Field(foreign_key="scoring_groups.id")
    phase_id: int = Field(foreign_key="phases.id", index=True)
    track_id: int = Field(foreign_key="tracks.id")
    qualified_at: datetime = Field(default_factory=utc_now)


class RankingRow(SQLModel, table=True):
    __tablename__ = "rankings"
    __table_args__ = (UniqueConstraint("team_id", "hackathon_id", name="uq_rankings_team_hackathon"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    hackathon_id: int = Field(foreign_key="hackathons.id", index=True)
    total_score: float
    rank: Optional[int] = Field(default=None)
    updated_at: datetime = Field(default_factory=utc_now, index=True)
