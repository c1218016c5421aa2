"""Scoring workflow: judge score submission, score updates and score read models.

A submission request walks Validating → Checking-Duplicate → Writing →
Aggregating → Done. Ledger rows and the recomputed aggregates are committed
together; any failure rolls the unit of work back.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError

from scoring_node.config.runtime import RuntimeSettings
from scoring_node.entities.hackathon import Phase
from scoring_node.entities.reports import (
    CriterionAverage, JudgeSubmissionScores, ScoreDetail, ScoreItem, SubmissionScores,
    TeamOverview, TeamScore,
)
from scoring_node.entities.scoring import Ranking, Score, Submission, utc_now
from scoring_node.errors import (
    AlreadyScored, CriterionNotFound, GroupNotFound, JudgeNotAssigned, NotOwner,
    PhaseNotFound, ScoreNotFound, SubmissionNotFound, TeamNotFound, ValidationFailedError,
)
from scoring_node.services.criterion_validator import CriterionValidator, check_range
from scoring_node.services.final_aggregator import FinalAggregator
from scoring_node.services.group_aggregator import GroupAggregator
from scoring_node.services.interfaces.unit_of_work import UnitOfWork
from scoring_node.services.locks import DEFAULT_LOCKS, KeyedLocks, group_key, hackathon_key, score_key
from scoring_node.services.phase_classifier import PhaseClassifier
from scoring_node.services.ranking import resolve_tie_break

DUPLICATE_SCORE_CONSTRAINT = "uq_scores_judge_submission_criterion"


def _is_duplicate_score(exc: IntegrityError) -> bool:
    """True when ``exc`` comes from the one-score-per-(judge, submission, criterion) constraint."""
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == DUPLICATE_SCORE_CONSTRAINT
    # SQLite reports the columns rather than the constraint name
    return "UNIQUE constraint failed: scores." in str(exc.orig)


class ScoringWorkflow:
    def __init__(
        self,
        uow: UnitOfWork,
        settings: RuntimeSettings | None = None,
        locks: KeyedLocks | None = None,
    ):
        self.uow = uow
        self.settings = settings or RuntimeSettings.from_env()
        self.locks = locks or DEFAULT_LOCKS

        tie_break = resolve_tie_break(self.settings.rank_tie_break)
        self.validator = CriterionValidator(uow.criteria)
        self.classifier = PhaseClassifier(uow.phases)
        self.group_aggregator = GroupAggregator(uow, tie_break=tie_break)
        self.final_aggregator = FinalAggregator(uow, tie_break=tie_break)

        self.logger = logging.getLogger(__name__)

    # ── submit ──

    def submit_scores(self, judge_id: int, submission_id: int, items: Sequence[ScoreItem]) -> SubmissionScores:
        if not items:
            raise ValidationFailedError("No scores provided.", code="NO_SCORES")

        criterion_ids = [item.criterion_id for item in items]
        duplicated = sorted({c for c in criterion_ids if criterion_ids.count(c) > 1})
        if duplicated:
            raise ValidationFailedError(
                f"Criteria scored more than once in one request: {duplicated}", code="DUPLICATE_CRITERION",
            )

        submission = self.uow.submissions.get(submission_id)
        if submission is None:
            raise SubmissionNotFound("Submission not found")

        phase = self.uow.phases.get(submission.phase_id)
        if phase is None:
            raise PhaseNotFound("Phase not found")

        self._require_assignment(judge_id, phase)
        self.validator.validate_all(items, phase.id)

        with self.locks.hold(score_key(judge_id, submission.id)):
            try:
                if self.uow.scores.exists(judge_id=judge_id, submission_id=submission.id):
                    raise AlreadyScored("You have already scored this submission. Please use the update path.")

                now = utc_now()
                for item in items:
                    self.uow.scores.add(Score(
                        id=None,
                        judge_id=judge_id,
                        submission_id=submission.id,
                        criterion_id=item.criterion_id,
                        value=item.score,
                        comment=item.comment,
                        scored_at=now,
                    ))

                self._aggregate_and_commit(submission, phase)
            except IntegrityError as exc:
                self.uow.rollback()
                if _is_duplicate_score(exc):
                    raise AlreadyScored("You have already scored this submission. Please use the update path.") from exc
                raise
            except Exception:
                self.uow.rollback()
                raise

        self.logger.info(
            "judge=%d scored submission=%d (%d criteria)", judge_id, submission.id, len(items),
        )
        return SubmissionScores(
            submission_id=submission.id,
            scores=[ScoreItem(criterion_id=i.criterion_id, score=i.score, comment=i.comment) for i in items],
        )

    def _require_assignment(self, judge_id: int, phase: Phase) -> None:
        assignments = self.uow.judge_assignments.find(judge_id=judge_id, hackathon_id=phase.hackathon_id)
        if not any(a.phase_id is None or a.phase_id == phase.id for a in assignments):
            raise JudgeNotAssigned("Judge is not assigned to this phase")

    def _aggregate_and_commit(self, submission: Submission, phase: Phase) -> None:
        if self.classifier.is_final_phase(phase):
            self._recompute_final_and_commit(submission, phase.hackathon_id)
        else:
            self._recompute_team_and_commit(submission.team_id, phase.id)

    def _recompute_final_and_commit(self, submission: Submission, hackathon_id: int) -> None:
        with self.locks.hold(hackathon_key(hackathon_id)):
            self.final_aggregator.recompute_final(submission, hackathon_id)
            self.uow.commit()

    def _recompute_team_and_commit(self, team_id: int, phase_id: int) -> None:
        membership = self.group_aggregator.locate(team_id, phase_id)
        if membership is None:
            self.group_aggregator.recompute_team(team_id, phase_id)
            self.uow.commit()
            return
        with self.locks.hold(group_key(membership.group_id)):
            self.group_aggregator.recompute_team(team_id, phase_id)
            self.uow.commit()

    # ── update by id ──

    def update_score(self, judge_id: int, score_id: int, value: float, comment: str | None) -> ScoreDetail:
        score = self.uow.scores.get(score_id)
        if score is None:
            raise ScoreNotFound("Score not found")
        if score.judge_id != judge_id:
            raise NotOwner("You are not allowed to update this score")

        criterion = self.uow.criteria.get(score.criterion_id)
        if criterion is None:
            raise CriterionNotFound("Criterion not found")
        check_range(criterion, value)

        with self.locks.hold(score_key(judge_id, score.submission_id)):
            try:
                score.value = value
                score.comment = comment
                score.scored_at = utc_now()
                self.uow.scores.update(score)

                submission = self.uow.submissions.get(score.submission_id)
                phase = self.uow.phases.get(submission.phase_id) if submission else None
                if submission is None or phase is None:
                    self.uow.commit()
                elif self.settings.final_phase_updates_rerank and self.classifier.is_final_phase(phase):
                    self._recompute_final_and_commit(submission, phase.hackathon_id)
                else:
                    # Final-phase updates only refresh the group average unless opted in.
                    self._recompute_team_and_commit(submission.team_id, phase.id)
            except Exception:
                self.uow.rollback()
                raise

        self.logger.info("judge=%d updated score=%d", judge_id, score_id)
        return _detail(score)

    # ── recompute tasks ──

    def recompute_group(self, group_id: int) -> list[TeamScore]:
        with self.locks.hold(group_key(group_id)):
            try:
                self.group_aggregator.recompute_group(group_id)
                self.uow.commit()
            except Exception:
                self.uow.rollback()
                raise
        return self.get_team_scores_by_group(group_id)

    def rerank_hackathon(self, hackathon_id: int) -> list[Ranking]:
        with self.locks.hold(hackathon_key(hackathon_id)):
            try:
                ordered = self.final_aggregator.rerank_hackathon(hackathon_id)
                self.uow.commit()
            except Exception:
                self.uow.rollback()
                raise
        return ordered

    # ── read models ──

    def get_team_scores_by_group(self, group_id: int) -> list[TeamScore]:
        members = self.uow.group_teams.find(group_id=group_id)
        if not members:
            raise GroupNotFound("No teams found for this group.")

        teams = self.uow.teams.fetch_by_ids([m.team_id for m in members])
        ordered = sorted(members, key=lambda m: (m.rank is None, m.rank or 0, m.team_id))
        return [
            TeamScore(
                team_id=m.team_id,
                team_name=teams[m.team_id].name if m.team_id in teams else "Unknown",
                average_score=m.average_score,
                rank=m.rank,
            )
            for m in ordered
        ]

    def get_judge_scores(self, judge_id: int, phase_id: int) -> list[JudgeSubmissionScores]:
        scores = self.uow.scores.find(judge_id=judge_id, phase_id=phase_id)
        if not scores:
            return []

        by_submission: dict[int, list[Score]] = {}
        for score in scores:
            by_submission.setdefault(score.submission_id, []).append(score)
        submissions = self.uow.submissions.fetch_by_ids(list(by_submission))

        return [
            JudgeSubmissionScores(
                submission_id=submission_id,
                submission_title=submissions[submission_id].title if submission_id in submissions else "",
                total_score=sum(float(s.value) for s in group),
                scores=[_detail(s) for s in group],
            )
            for submission_id, group in by_submission.items()
        ]

    def get_team_overview(self, team_id: int, phase_id: int) -> TeamOverview:
        team = self.uow.teams.get(team_id)
        if team is None:
            raise TeamNotFound("Team not found")

        membership = self.group_aggregator.locate(team_id, phase_id)

        by_criterion: dict[int, list[Score]] = {}
        for score in self.uow.scores.find(team_id=team_id, phase_id=phase_id):
            by_criterion.setdefault(score.criterion_id, []).append(score)

        criteria_scores = [
            CriterionAverage(
                criterion_id=criterion_id,
                score=round(sum(float(s.value) for s in group) / len(group), 2),
                comment=next((s.comment for s in group if s.comment), None),
            )
            for criterion_id, group in by_criterion.items()
        ]

        return TeamOverview(
            team_id=team.id,
            team_name=team.name,
            phase_id=phase_id,
            average_score=membership.average_score if membership else None,
            rank=membership.rank if membership else None,
            criteria_scores=criteria_scores,
        )


def _detail(score: Score) -> ScoreDetail:
    return ScoreDetail(
        score_id=score.id,
        judge_id=score.judge_id,
        submission_id=score.submission_id,
        criterion_id=score.criterion_id,
        score=score.value,
        comment=score.comment,
        scored_at=score.scored_at,
    )
