import unittest

from scoring_node.entities.scoring import PenaltyBonus, Score
from scoring_node.services.aggregation import (
    adjustment_total,
    compute_final_total,
    compute_team_average,
    judge_totals,
    submission_score,
    team_average,
)


def _score(judge_id, submission_id, value, criterion_id=1):
    return Score(id=None, judge_id=judge_id, submission_id=submission_id, criterion_id=criterion_id, value=value)


def _adjustment(points, is_deleted=False):
    return PenaltyBonus(id=None, team_id=1, phase_id=1, points=points, is_deleted=is_deleted)


class TestAggregation(unittest.TestCase):
    def test_judge_totals_sum_each_judges_criteria(self):
        scores = [_score(1, 1, 4, 1), _score(1, 1, 6, 2), _score(2, 1, 12, 1)]
        self.assertEqual(judge_totals(scores), {1: 10.0, 2: 12.0})

    def test_submission_score_is_mean_of_judge_totals(self):
        scores = [_score(1, 1, 4, 1), _score(1, 1, 6, 2), _score(2, 1, 12, 1)]
        self.assertEqual(submission_score(scores), 11.0)

    def test_unscored_submission_has_no_score(self):
        self.assertIsNone(submission_score([]))

    def test_team_average_ignores_unscored_submissions(self):
        self.assertEqual(team_average([11.0, None, 8.0]), 9.5)

    def test_team_average_is_zero_without_scored_submissions(self):
        self.assertEqual(team_average([None, None]), 0.0)
        self.assertEqual(team_average([]), 0.0)

    def test_deleted_adjustments_never_count(self):
        self.assertEqual(adjustment_total([_adjustment(2), _adjustment(-5, is_deleted=True), _adjustment(-1)]), 1.0)

    def test_two_scored_submissions_with_bonus(self):
        scores_by_submission = {
            1: [_score(1, 1, 10), _score(2, 1, 12)],
            2: [_score(1, 2, 8)],
            3: [],
        }
        self.assertAlmostEqual(compute_team_average(scores_by_submission, [_adjustment(2)]), 11.5)

    def test_adjustment_is_added_once_not_per_submission(self):
        scores_by_submission = {1: [_score(1, 1, 10)], 2: [_score(1, 2, 20)]}
        self.assertEqual(compute_team_average(scores_by_submission, [_adjustment(-3)]), 12.0)

    def test_team_without_scores_gets_adjustments_only(self):
        self.assertEqual(compute_team_average({1: []}, [_adjustment(-4), _adjustment(1)]), -3.0)

    def test_final_total(self):
        scores = [_score(1, 1, 30), _score(2, 1, 40)]
        self.assertEqual(compute_final_total(scores, [_adjustment(5)]), 40.0)
        self.assertEqual(compute_final_total([], [_adjustment(5)]), 5.0)


if __name__ == "__main__":
    unittest.main()
