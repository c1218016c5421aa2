from .repositories import (
    DBCriterionRepository, DBFinalQualificationRepository, DBGroupRepository,
    DBGroupTeamRepository, DBJudgeAssignmentRepository, DBPenaltyBonusRepository,
    DBPhaseRepository, DBRankingRepository, DBScoreRepository, DBSubmissionRepository,
    DBTeamRepository, DBTrackRepository,
)
from .session import engine, create_session, database_url
from .unit_of_work import DBUnitOfWork
