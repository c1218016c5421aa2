"""Group aggregator: team average per phase and dense ranks within a group.

Nothing here commits. Callers run a recompute and the commit inside the
group's exclusive section so that concurrent re-ranks never interleave.
"""
from __future__ import annotations

import logging
from operator import attrgetter

from scoring_node.entities.hackathon import GroupTeam
from scoring_node.errors import GroupNotFound
from scoring_node.services.aggregation import compute_team_average
from scoring_node.services.interfaces.unit_of_work import UnitOfWork
from scoring_node.services.ranking import TIE_BREAKS, TieBreak, assign_ranks

logger = logging.getLogger(__name__)


class GroupAggregator:
    def __init__(self, uow: UnitOfWork, tie_break: TieBreak = TIE_BREAKS["team_id"]):
        self.uow = uow
        self.tie_break = tie_break

    def locate(self, team_id: int, phase_id: int) -> GroupTeam | None:
        """The team's membership in a group whose track belongs to ``phase_id``."""
        memberships = self.uow.group_teams.find(team_id=team_id, phase_id=phase_id)
        if len(memberships) > 1:
            logger.warning(
                "team=%d has %d group memberships in phase=%d, using group=%d",
                team_id, len(memberships), phase_id, memberships[0].group_id,
            )
        return memberships[0] if memberships else None

    def team_average(self, team_id: int, phase_id: int) -> float:
        submissions = self.uow.submissions.find(team_id=team_id, phase_id=phase_id)
        scores_by_submission: dict[int, list] = {s.id: [] for s in submissions}
        for score in self.uow.scores.find(submission_ids=list(scores_by_submission)):
            scores_by_submission[score.submission_id].append(score)

        adjustments = self.uow.adjustments.find(phase_id=phase_id, team_id=team_id)
        return compute_team_average(scores_by_submission, adjustments)

    def recompute_team(self, team_id: int, phase_id: int) -> GroupTeam | None:
        membership = self.locate(team_id, phase_id)
        if membership is None:
            logger.warning("team=%d has no group in phase=%d, average not updated", team_id, phase_id)
            return None

        membership.average_score = self.team_average(team_id, phase_id)
        self.uow.group_teams.update(membership)
        logger.info(
            "team=%d phase=%d average=%.4f", team_id, phase_id, membership.average_score,
        )

        for ranked in self.rerank_group(membership.group_id):
            if ranked.id == membership.id:
                membership.rank = ranked.rank
        return membership

    def rerank_group(self, group_id: int) -> list[GroupTeam]:
        members = self.uow.group_teams.find(group_id=group_id)
        ordered: list[GroupTeam] = []
        for rank, member in assign_ranks(members, attrgetter("average_score"), self.tie_break):
            member.rank = rank
            self.uow.group_teams.update(member)
            ordered.append(member)
        logger.debug("group=%d re-ranked %d teams", group_id, len(ordered))
        return ordered

    def recompute_group(self, group_id: int) -> list[GroupTeam]:
        """Recompute every member's average from the ledger, then re-rank once."""
        group = self.uow.groups.get(group_id)
        track = self.uow.tracks.get(group.track_id) if group else None
        if group is None or track is None:
            raise GroupNotFound(f"Group {group_id} not found")

        for member in self.uow.group_teams.find(group_id=group_id):
            member.average_score = self.team_average(member.team_id, track.phase_id)
            self.uow.group_teams.update(member)
        return self.rerank_group(group_id)
