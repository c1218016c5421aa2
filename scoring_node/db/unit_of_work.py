from __future__ import annotations

from sqlmodel import Session

from scoring_node.db.repositories import (
    DBCriterionRepository,
    DBFinalQualificationRepository,
    DBGroupRepository,
    DBGroupTeamRepository,
    DBJudgeAssignmentRepository,
    DBPenaltyBonusRepository,
    DBPhaseRepository,
    DBRankingRepository,
    DBScoreRepository,
    DBSubmissionRepository,
    DBTeamRepository,
    DBTrackRepository,
)
from scoring_node.services.interfaces.unit_of_work import UnitOfWork


class DBUnitOfWork(UnitOfWork):
    """Session-backed unit of work. One instance per request."""

    def __init__(self, session: Session):
        self._session = session
        self.phases = DBPhaseRepository(session)
        self.tracks = DBTrackRepository(session)
        self.groups = DBGroupRepository(session)
        self.teams = DBTeamRepository(session)
        self.group_teams = DBGroupTeamRepository(session)
        self.judge_assignments = DBJudgeAssignmentRepository(session)
        self.criteria = DBCriterionRepository(session)
        self.submissions = DBSubmissionRepository(session)
        self.scores = DBScoreRepository(session)
        self.adjustments = DBPenaltyBonusRepository(session)
        self.rankings = DBRankingRepository(session)
        self.qualifications = DBFinalQualificationRepository(session)

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()
