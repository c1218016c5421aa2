"""Hackathon structure tables: phases, tracks, groups, teams, memberships."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class HackathonRow(SQLModel, table=True):
    __tablename__ = "hackathons"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str


class PhaseRow(SQLModel, table=True):
    __tablename__ = "phases"

    id: Optional[int] = Field(default=None, primary_key=True)
    hackathon_id: int = Field(foreign_key="hackathons.id", index=True)
    name: str
    start_date: datetime
    end_date: datetime = Field(index=True)


class TrackRow(SQLModel, table=True):
    __tablename__ = "tracks"

    id: Optional[int] = Field(default=None, primary_key=True)
    phase_id: int = Field(foreign_key="phases.id", index=True)
    name: str


class GroupRow(SQLModel, table=True):
    __tablename__ = "scoring_groups"

    id: Optional[int] = Field(default=None, primary_key=True)
    track_id: int = Field(foreign_key="tracks.id", index=True)
    name: str


class TeamRow(SQLModel, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    hackathon_id: int = Field(foreign_key="hackathons.id", index=True)
    name: str
    leader_id: Optional[int] = Field(default=None)


class GroupTeamRow(SQLModel, table=True):
    __tablename__ = "group_teams"
    __table_args__ = (UniqueConstraint("group_id", "team_id", name="uq_group_teams_group_team"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    group_id: int = Field(foreign_key="scoring_groups.id", index=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    average_score: Optional[float] = Field(default=None)
    rank: Optional[int] = Field(default=None)


class JudgeAssignmentRow(SQLModel, table=True):
    __tablename__ = "judge_assignments"

    id: Optional[int] = Field(default=None, primary_key=True)
    judge_id: int = Field(index=True)
    hackathon_id: int = Field(foreign_key="hackathons.id", index=True)
    phase_id: Optional[int] = Field(default=None, foreign_key="phases.id")
