"""Pure score arithmetic, free of storage access.

The group and final aggregators feed these with rows loaded from the unit of
work; tests call them directly.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from scoring_node.entities.scoring import PenaltyBonus, Score


def judge_totals(scores: Iterable[Score]) -> dict[int, float]:
    """Sum of each judge's criterion scores."""
    totals: dict[int, float] = {}
    for score in scores:
        totals[score.judge_id] = totals.get(score.judge_id, 0.0) + float(score.value)
    return totals


def submission_score(scores: Iterable[Score]) -> float | None:
    """Mean of the judges' totals, or ``None`` when the submission is unscored."""
    totals = judge_totals(scores)
    if not totals:
        return None
    return sum(totals.values()) / len(totals)


def team_average(submission_scores: Iterable[float | None]) -> float:
    """Mean over scored submissions only; 0 when none is scored."""
    scored = [s for s in submission_scores if s is not None]
    if not scored:
        return 0.0
    return sum(scored) / len(scored)


def adjustment_total(adjustments: Iterable[PenaltyBonus]) -> float:
    return sum((float(a.points) for a in adjustments if not a.is_deleted), 0.0)


def compute_team_average(
    scores_by_submission: Mapping[int, Iterable[Score]],
    adjustments: Iterable[PenaltyBonus],
) -> float:
    """Team average for a phase: averaged raw score plus signed adjustments.

    Adjustments are added once to the averaged value, not per submission.
    """
    raw = team_average(submission_score(scores) for scores in scores_by_submission.values())
    return raw + adjustment_total(adjustments)


def compute_final_total(scores: Iterable[Score], adjustments: Iterable[PenaltyBonus]) -> float:
    """Final-round total of one submission: mean judge total plus adjustments."""
    return (submission_score(scores) or 0.0) + adjustment_total(adjustments)
