"""Penalty and bonus management.

Adding or soft-deleting an adjustment re-runs the group average for the team
in that phase. Final rankings pick adjustments up on the next final-phase
score write.
"""
from __future__ import annotations

import logging
import math
from contextlib import nullcontext

from scoring_node.config.runtime import RuntimeSettings
from scoring_node.entities.scoring import PenaltyBonus, utc_now
from scoring_node.errors import AdjustmentNotFound, PhaseNotFound, TeamNotFound, ValidationFailedError
from scoring_node.services.group_aggregator import GroupAggregator
from scoring_node.services.interfaces.unit_of_work import UnitOfWork
from scoring_node.services.locks import DEFAULT_LOCKS, KeyedLocks, group_key
from scoring_node.services.ranking import resolve_tie_break

logger = logging.getLogger(__name__)


class AdjustmentService:
    def __init__(
        self,
        uow: UnitOfWork,
        settings: RuntimeSettings | None = None,
        locks: KeyedLocks | None = None,
    ):
        self.uow = uow
        settings = settings or RuntimeSettings.from_env()
        self.locks = locks or DEFAULT_LOCKS
        self.group_aggregator = GroupAggregator(uow, tie_break=resolve_tie_break(settings.rank_tie_break))

    def add_adjustment(self, team_id: int, phase_id: int, points: float, reason: str | None = None) -> PenaltyBonus:
        if not math.isfinite(points):
            raise ValidationFailedError("Adjustment points must be a finite number.", code="NON_FINITE_POINTS")
        if self.uow.teams.get(team_id) is None:
            raise TeamNotFound("Team not found")
        if self.uow.phases.get(phase_id) is None:
            raise PhaseNotFound("Phase not found")

        adjustment = PenaltyBonus(
            id=None, team_id=team_id, phase_id=phase_id, points=points, reason=reason, created_at=utc_now(),
        )
        self._apply(adjustment, self.uow.adjustments.add)
        logger.info("team=%d phase=%d adjustment=%+.2f (%s)", team_id, phase_id, points, reason or "-")
        return adjustment

    def remove_adjustment(self, adjustment_id: int) -> PenaltyBonus:
        adjustment = self.uow.adjustments.get(adjustment_id)
        if adjustment is None or adjustment.is_deleted:
            raise AdjustmentNotFound("Penalty/bonus not found")

        adjustment.is_deleted = True
        self._apply(adjustment, self.uow.adjustments.update)
        logger.info("adjustment=%d removed", adjustment_id)
        return adjustment

    def _apply(self, adjustment: PenaltyBonus, write) -> None:
        membership = self.group_aggregator.locate(adjustment.team_id, adjustment.phase_id)
        section = self.locks.hold(group_key(membership.group_id)) if membership else nullcontext()
        with section:
            try:
                write(adjustment)
                self.group_aggregator.recompute_team(adjustment.team_id, adjustment.phase_id)
                self.uow.commit()
            except Exception:
                self.uow.rollback()
                raise
