from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Session, select

from scoring_node.entities.hackathon import Group, GroupTeam, JudgeAssignment, Phase, Team, Track
from scoring_node.entities.scoring import (
    Criterion, FinalQualification, PenaltyBonus, Ranking, Score, Submission,
)
from scoring_node.db.tables import (
    CriterionRow,
    FinalQualificationRow,
    GroupRow,
    GroupTeamRow,
    JudgeAssignmentRow,
    PenaltyBonusRow,
    PhaseRow,
    RankingRow,
    ScoreRow,
    SubmissionRow,
    TeamRow,
    TrackRow,
)
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

# Repositories stage changes and flush so generated ids are available;
# committing is the unit of work's job.


class DBPhaseRepository(PhaseRepository):
    def __init__(self, session: Session):
        self._session = session

    def get(self, phase_id: int) -> Phase | None:
        row = self._session.get(PhaseRow, phase_id)
        return self._row_to_domain(row) if row else None

    def find(self, *, hackathon_id: int) -> list[Phase]:
        stmt = select(PhaseRow).where(PhaseRow.hackathon_id == hackathon_id).order_by(PhaseRow.id)
        return [self._row_to_domain(r) for r in self._session.exec(stmt).all()]

    @staticmethod
    def _row_to_domain(row: PhaseRow) -> Phase:
        return Phase(
            id=row.id,
            hackathon_id=row.hackathon_id,
            name=row.name,
            start_date=_ensure_utc(row.start_date),
            end_date=_ensure_utc(row.end_date),
        )


class DBTrackRepository(TrackRepository):
    def __init__(self, session: Session):
        self._session = session

    def get(self, track_id: int) -> Track | None:
        row = self._session.get(TrackRow, track_id)
        return Track(id=row.id, phase_id=row.phase_id, name=row.name) if row else None


class DBGroupRepository(GroupRepository):
    def __init__(self, session: Session):
        self._session = session

    def get(self, group_id: int) -> Group | None:
        row = self._session.get(GroupRow, group_id)
        return Group(id=row.id, track_id=row.track_id, name=row.name) if row else None

    def find(self, *, phase_id: int) -> list[Group]:
        stmt = (
            select(GroupRow)
            .join(TrackRow, TrackRow.id == GroupRow.track_id)
            .where(TrackRow.phase_id == phase_id)
            .order_by(GroupRow.id)
        )
        return [Group(id=r.id, track_id=r.track_id, name=r.name) for r in self._session.exec(stmt).all()]


class DBTeamRepository(TeamRepository):
    def __init__(self, session: Session):
        self._session = session

    def get(self, team_id: int) -> Team | None:
        row = self._session.get(TeamRow, team_id)
        return self._row_to_domain(row) if row else None

    def fetch_by_ids(self, ids: list[int]) -> dict[int, Team]:
        if not ids:
            return {}
        rows = self._session.exec(select(TeamRow).where(TeamRow.id.in_(ids))).all()
        return {row.id: self._row_to_domain(row) for row in rows}

    @staticmethod
    def _row_to_domain(row: TeamRow) -> Team:
        return Team(id=row.id, hackathon_id=row.hackathon_id, name=row.name, leader_id=row.leader_id)


class DBGroupTeamRepository(GroupTeamRepository):
    def __init__(self, session: Session):
        self._session = session

    def find(
        self,
        *,
        group_id: int | None = None,
        team_id: int | None = None,
        phase_id: int | None = None,
        scored_only: bool = False,
    ) -> list[GroupTeam]:
        stmt = select(GroupTeamRow).order_by(GroupTeamRow.id)
        if group_id is not None:
            stmt = stmt.where(GroupTeamRow.group_id == group_id)
        if team_id is not None:
            stmt = stmt.where(GroupTeamRow.team_id == team_id)
        if phase_id is not None:
            stmt = (
                stmt.join(GroupRow, GroupRow.id == GroupTeamRow.group_id)
                .join(TrackRow, TrackRow.id == GroupRow.track_id)
                .where(TrackRow.phase_id == phase_id)
            )
        if scored_only:
            stmt = stmt.where(GroupTeamRow.average_score.is_not(None))
        return [self._row_to_domain(r) for r in self._session.exec(stmt).all()]

    def update(self, group_team: GroupTeam) -> None:
        existing = self._session.get(GroupTeamRow, group_team.id)
        if existing is None:
            raise LookupError(f"group_team {group_team.id} does not exist")
        existing.average_score = group_team.average_score
        existing.rank = group_team.rank
        self._session.add(existing)
        self._session.flush()

    @staticmethod
    def _row_to_domain(row: GroupTeamRow) -> GroupTeam:
        return GroupTeam(
            id=row.id,
            group_id=row.group_id,
            team_id=row.team_id,
            average_score=row.average_score,
            rank=row.rank,
        )


class DBJudgeAssignmentRepository(JudgeAssignmentRepository):
    def __init__(self, session: Session):
        self._session = session

    def find(self, *, judge_id: int, hackathon_id: int) -> list[JudgeAssignment]:
        stmt = select(JudgeAssignmentRow).where(
            JudgeAssignmentRow.judge_id == judge_id,
            JudgeAssignmentRow.hackathon_id == hackathon_id,
        )
        return [
            JudgeAssignment(id=r.id, judge_id=r.judge_id, hackathon_id=r.hackathon_id, phase_id=r.phase_id)
            for r in self._session.exec(stmt).all()
        ]


class DBCriterionRepository(CriterionRepository):
    def __init__(self, session: Session):
        self._session = session

    def get(self, criterion_id: int) -> Criterion | None:
        row = self._session.get(CriterionRow, criterion_id)
        return self._row_to_domain(row) if row else None

    def find(self, *, phase_id: int | None = None) -> list[Criterion]:
        stmt = select(CriterionRow).order_by(CriterionRow.id)
        if phase_id is not None:
            stmt = stmt.where(CriterionRow.phase_id == phase_id)
        return [self._row_to_domain(r) for r in self._session.exec(stmt).all()]

    def add(self, criterion: Criterion) -> Criterion:
        row = CriterionRow(phase_id=criterion.phase_id, name=criterion.name, weight=criterion.weight)
        self._session.add(row)
        self._session.flush()
        criterion.id = row.id
        return criterion

    def update(self, criterion: Criterion) -> None:
        existing = self._session.get(CriterionRow, criterion.id)
        if existing is None:
            raise LookupError(f"criterion {criterion.id} does not exist")
        existing.name = criterion.name
        existing.weight = criterion.weight
        self._session.add(existing)
        self._session.flush()

    def remove(self, criterion_id: int) -> None:
        existing = self._session.get(CriterionRow, criterion_id)
        if existing is not None:
            self._session.delete(existing)
            self._session.flush()

    @staticmethod
    def _row_to_domain(row: CriterionRow) -> Criterion:
        return Criterion(id=row.id, phase_id=row.phase_id, name=row.name, weight=row.weight)


class DBSubmissionRepository(SubmissionRepository):
    def __init__(self, session: Session):
        self._session = session

    def get(self, submission_id: int) -> Submission | None:
        row = self._session.get(SubmissionRow, submission_id)
        return self._row_to_domain(row) if row else None

    def find(self, *, team_id: int | None = None, phase_id: int | None = None) -> list[Submission]:
        stmt = select(SubmissionRow).order_by(SubmissionRow.id)
        if team_id is not None:
            stmt = stmt.where(SubmissionRow.team_id == team_id)
        if phase_id is not None:
            stmt = stmt.where(SubmissionRow.phase_id == phase_id)
        return [self._row_to_domain(r) for r in self._session.exec(stmt).all()]

    def fetch_by_ids(self, ids: list[int]) -> dict[int, Submission]:
        if not ids:
            return {}
        rows = self._session.exec(select(SubmissionRow).where(SubmissionRow.id.in_(ids))).all()
        return {row.id: self._row_to_domain(row) for row in rows}

    @staticmethod
    def _row_to_domain(row: SubmissionRow) -> Submission:
        return Submission(id=row.id, team_id=row.team_id, phase_id=row.phase_id, title=row.title)


class DBScoreRepository(ScoreRepository):
    def __init__(self, session: Session):
        self._session = session

    def get(self, score_id: int) -> Score | None:
        row = self._session.get(ScoreRow, score_id)
        return self._row_to_domain(row) if row else None

    def find(
        self,
        *,
        submission_id: int | None = None,
        submission_ids: list[int] | None = None,
        judge_id: int | None = None,
        phase_id: int | None = None,
        team_id: int | None = None,
    ) -> list[Score]:
        stmt = select(ScoreRow).order_by(ScoreRow.id)
        if submission_id is not None:
            stmt = stmt.where(ScoreRow.submission_id == submission_id)
        if submission_ids is not None:
            if not submission_ids:
                return []
            stmt = stmt.where(ScoreRow.submission_id.in_(submission_ids))
        if judge_id is not None:
            stmt = stmt.where(ScoreRow.judge_id == judge_id)
        if phase_id is not None or team_id is not None:
            stmt = stmt.join(SubmissionRow, SubmissionRow.id == ScoreRow.submission_id)
            if phase_id is not None:
                stmt = stmt.where(SubmissionRow.phase_id == phase_id)
            if team_id is not None:
                stmt = stmt.where(SubmissionRow.team_id == team_id)
        return [self._row_to_domain(r) for r in self._session.exec(stmt).all()]

    def exists(self, *, judge_id: int, submission_id: int) -> bool:
        stmt = (
            select(ScoreRow.id)
            .where(ScoreRow.judge_id == judge_id, ScoreRow.submission_id == submission_id)
            .limit(1)
        )
        return self._session.exec(stmt).first() is not None

    def add(self, score: Score) -> Score:
        row = ScoreRow(
            judge_id=score.judge_id,
            submission_id=score.submission_id,
            criterion_id=score.criterion_id,
            value=score.value,
            comment=score.comment,
            scored_at=score.scored_at,
        )
        self._session.add(row)
        self._session.flush()
        score.id = row.id
        return score

    def update(self, score: Score) -> None:
        existing = self._session.get(ScoreRow, score.id)
        if existing is None:
            raise LookupError(f"score {score.id} does not exist")
        existing.value = score.value
        existing.comment = score.comment
        existing.scored_at = score.scored_at
        self._session.add(existing)
        self._session.flush()

    @staticmethod
    def _row_to_domain(row: ScoreRow) -> Score:
        return Score(
            id=row.id,
            judge_id=row.judge_id,
            submission_id=row.submission_id,
            criterion_id=row.criterion_id,
            value=row.value,
            comment=row.comment,
            scored_at=_ensure_utc(row.scored_at),
        )


class DBPenaltyBonusRepository(PenaltyBonusRepository):
    def __init__(self, session: Session):
        self._session = session

    def get(self, adjustment_id: int) -> PenaltyBonus | None:
        row = self._session.get(PenaltyBonusRow, adjustment_id)
        return self._row_to_domain(row) if row else None

    def find(
        self,
        *,
        phase_id: int,
        team_id: int | None = None,
        include_deleted: bool = False,
    ) -> list[PenaltyBonus]:
        stmt = select(PenaltyBonusRow).where(PenaltyBonusRow.phase_id == phase_id).order_by(PenaltyBonusRow.id)
        if team_id is not None:
            stmt = stmt.where(PenaltyBonusRow.team_id == team_id)
        if not include_deleted:
            stmt = stmt.where(PenaltyBonusRow.is_deleted == False)  # noqa: E712
        return [self._row_to_domain(r) for r in self._session.exec(stmt).all()]

    def add(self, adjustment: PenaltyBonus) -> PenaltyBonus:
        row = PenaltyBonusRow(
            team_id=adjustment.team_id,
            phase_id=adjustment.phase_id,
            points=adjustment.points,
            reason=adjustment.reason,
            is_deleted=adjustment.is_deleted,
            created_at=adjustment.created_at,
        )
        self._session.add(row)
        self._session.flush()
        adjustment.id = row.id
        return adjustment

    def update(self, adjustment: PenaltyBonus) -> None:
        existing = self._session.get(PenaltyBonusRow, adjustment.id)
        if existing is None:
            raise LookupError(f"penalty/bonus {adjustment.id} does not exist")
        existing.points = adjustment.points
        existing.reason = adjustment.reason
        existing.is_deleted = adjustment.is_deleted
        self._session.add(existing)
        self._session.flush()

    @staticmethod
    def _row_to_domain(row: PenaltyBonusRow) -> PenaltyBonus:
        return PenaltyBonus(
            id=row.id,
            team_id=row.team_id,
            phase_id=row.phase_id,
            points=row.points,
            reason=row.reason,
            is_deleted=row.is_deleted,
            created_at=_ensure_utc(row.created_at),
        )


class DBRankingRepository(RankingRepository):
    def __init__(self, session: Session):
        self._session = session

    def find(self, *, hackathon_id: int, team_id: int | None = None) -> list[Ranking]:
        stmt = select(RankingRow).where(RankingRow.hackathon_id == hackathon_id).order_by(RankingRow.id)
        if team_id is not None:
            stmt = stmt.where(RankingRow.team_id == team_id)
        return [self._row_to_domain(r) for r in self._session.exec(stmt).all()]

    def add(self, ranking: Ranking) -> Ranking:
        row = RankingRow(
            team_id=ranking.team_id,
            hackathon_id=ranking.hackathon_id,
            total_score=ranking.total_score,
            rank=ranking.rank,
            updated_at=ranking.updated_at,
        )
        self._session.add(row)
        self._session.flush()
        ranking.id = row.id
        return ranking

    def update(self, ranking: Ranking) -> None:
        existing = self._session.get(RankingRow, ranking.id)
        if existing is None:
            raise LookupError(f"ranking {ranking.id} does not exist")
        existing.total_score = ranking.total_score
        existing.rank = ranking.rank
        existing.updated_at = ranking.updated_at
        self._session.add(existing)
        self._session.flush()

    @staticmethod
    def _row_to_domain(row: RankingRow) -> Ranking:
        return Ranking(
            id=row.id,
            team_id=row.team_id,
            hackathon_id=row.hackathon_id,
            total_score=row.total_score,
            rank=row.rank,
            updated_at=_ensure_utc(row.updated_at),
        )


class DBFinalQualificationRepository(FinalQualificationRepository):
    def __init__(self, session: Session):
        self._session = session

    def exists(self, *, team_id: int, phase_id: int) -> bool:
        stmt = (
            select(FinalQualificationRow.id)
            .where(FinalQualificationRow.team_id == team_id, FinalQualificationRow.phase_id == phase_id)
            .limit(1)
        )
        return self._session.exec(stmt).first() is not None

    def find(self, *, hackathon_id: int | None = None, phase_id: int | None = None) -> list[FinalQualification]:
        stmt = select(FinalQualificationRow).order_by(FinalQualificationRow.id)
        if hackathon_id is not None:
            stmt = stmt.join(TeamRow, TeamRow.id == FinalQualificationRow.team_id).where(
                TeamRow.hackathon_id == hackathon_id
            )
        if phase_id is not None:
            stmt = stmt.where(FinalQualificationRow.phase_id == phase_id)
        return [self._row_to_domain(r) for r in self._session.exec(stmt).all()]

    def add(self, qualification: FinalQualification) -> FinalQualification:
        row = FinalQualificationRow(
            team_id=qualification.team_id,
            group_id=qualification.group_id,
            phase_id=qualification.phase_id,
            track_id=qualification.track_id,
            qualified_at=qualification.qualified_at,
        )
        self._session.add(row)
        self._session.flush()
        qualification.id = row.id
        return qualification

    @staticmethod
    def _row_to_domain(row: FinalQualificationRow) -> FinalQualification:
        return FinalQualification(
            id=row.id,
            team_id=row.team_id,
            group_id=row.group_id,
            phase_id=row.phase_id,
            track_id=row.track_id,
            qualified_at=_ensure_utc(row.qualified_at),
        )


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
