from __future__ import annotations

from abc import ABC, abstractmethod

from scoring_node.services.interfaces.hackathon_repositories import (
    GroupRepository, GroupTeamRepository, JudgeAssignmentRepository,
    PhaseRepository, TeamRepository, TrackRepository,
)
from scoring_node.services.interfaces.scoring_repositories import (
    CriterionRepository, PenaltyBonusRepository, ScoreRepository, SubmissionRepository,
)
from scoring_node.services.interfaces.standings_repositories import (
    FinalQualificationRepository, RankingRepository,
)


class UnitOfWork(ABC):
    """All repositories of one request plus a single atomic commit.

    Repositories stage changes; nothing is durable until ``commit()``.
    """

    phases: PhaseRepository
    tracks: TrackRepository
    groups: GroupRepository
    teams: TeamRepository
    group_teams: GroupTeamRepository
    judge_assignments: JudgeAssignmentRepository
    criteria: CriterionRepository
    submissions: SubmissionRepository
    scores: ScoreRepository
    adjustments: PenaltyBonusRepository
    rankings: RankingRepository
    qualifications: FinalQualificationRepository

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError
