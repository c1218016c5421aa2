"""Final aggregator: hackathon-wide Ranking driven by final-phase scores.

A team with several final-round submissions keeps whichever was scored last;
each call overwrites the team's Ranking row.
"""
from __future__ import annotations

import logging
from operator import attrgetter

from scoring_node.entities.scoring import Ranking, Submission, utc_now
from scoring_node.services.aggregation import compute_final_total
from scoring_node.services.interfaces.unit_of_work import UnitOfWork
from scoring_node.services.ranking import TIE_BREAKS, TieBreak, assign_ranks

logger = logging.getLogger(__name__)


class FinalAggregator:
    def __init__(self, uow: UnitOfWork, tie_break: TieBreak = TIE_BREAKS["team_id"]):
        self.uow = uow
        self.tie_break = tie_break

    def recompute_final(self, submission: Submission, hackathon_id: int) -> Ranking:
        scores = self.uow.scores.find(submission_id=submission.id)
        adjustments = self.uow.adjustments.find(phase_id=submission.phase_id, team_id=submission.team_id)
        total = compute_final_total(scores, adjustments)

        now = utc_now()
        existing = self.uow.rankings.find(hackathon_id=hackathon_id, team_id=submission.team_id)
        if existing:
            ranking = existing[0]
            ranking.total_score = total
            ranking.updated_at = now
            self.uow.rankings.update(ranking)
        else:
            ranking = self.uow.rankings.add(Ranking(
                id=None,
                team_id=submission.team_id,
                hackathon_id=hackathon_id,
                total_score=total,
                updated_at=now,
            ))
        logger.info(
            "hackathon=%d team=%d final total=%.4f (submission=%d)",
            hackathon_id, submission.team_id, total, submission.id,
        )

        for ranked in self.rerank_hackathon(hackathon_id):
            if ranked.id == ranking.id:
                ranking.rank = ranked.rank
        return ranking

    def rerank_hackathon(self, hackathon_id: int) -> list[Ranking]:
        rankings = self.uow.rankings.find(hackathon_id=hackathon_id)
        ordered: list[Ranking] = []
        for rank, ranking in assign_ranks(rankings, attrgetter("total_score"), self.tie_break):
            ranking.rank = rank
            self.uow.rankings.update(ranking)
            ordered.append(ranking)
        return ordered
