import unittest

from scoring_fixtures import HACKATHON_JUDGE, Seeder, StorageTestMixin, build_scenario
from scoring_node.entities.scoring import Score
from scoring_node.errors import GroupNotFound
from scoring_node.services.group_aggregator import GroupAggregator


class TestGroupAggregator(StorageTestMixin, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.s = build_scenario(self.session)
        self.seed = Seeder(self.session)
        self.aggregator = GroupAggregator(self.uow)

    def _score(self, judge_id, submission_id, criterion_id, value):
        self.uow.scores.add(Score(
            id=None, judge_id=judge_id, submission_id=submission_id, criterion_id=criterion_id, value=value,
        ))

    def _membership(self, team_id):
        return self.uow.group_teams.find(team_id=team_id, phase_id=self.s.qualifiers_id)[0]

    def test_average_over_scored_submissions_plus_bonus(self):
        second = self.seed.submission(self.s.red_id, self.s.qualifiers_id, "Red second")
        self.seed.submission(self.s.red_id, self.s.qualifiers_id, "Red unscored")
        self._score(1, self.s.red_submission_id, self.s.innovation_id, 4)
        self._score(1, self.s.red_submission_id, self.s.execution_id, 6)
        self._score(2, self.s.red_submission_id, self.s.execution_id, 12)
        self._score(1, second.id, self.s.execution_id, 8)
        self.seed.adjustment(self.s.red_id, self.s.qualifiers_id, 2)
        self.seed.adjustment(self.s.red_id, self.s.qualifiers_id, -50, is_deleted=True)

        membership = self.aggregator.recompute_team(self.s.red_id, self.s.qualifiers_id)

        self.assertAlmostEqual(membership.average_score, 11.5)
        self.assertAlmostEqual(self._membership(self.s.red_id).average_score, 11.5)

    def test_team_with_no_scores_gets_adjustment_sum(self):
        self.seed.adjustment(self.s.blue_id, self.s.qualifiers_id, -3)
        self.seed.adjustment(self.s.blue_id, self.s.qualifiers_id, 1)

        membership = self.aggregator.recompute_team(self.s.blue_id, self.s.qualifiers_id)

        self.assertEqual(membership.average_score, -2.0)

    def test_equal_averages_rank_as_strict_order(self):
        extra = self.seed.team(self.s.hackathon_id, "Yellow")
        self.seed.member(self.s.alpha_id, extra.id)
        for team_id, points in ((self.s.red_id, 50), (self.s.blue_id, 50), (extra.id, 40)):
            self.seed.adjustment(team_id, self.s.qualifiers_id, points)

        ranked = self.aggregator.recompute_group(self.s.alpha_id)

        self.assertEqual(
            [(m.team_id, m.average_score, m.rank) for m in ranked],
            [(self.s.red_id, 50.0, 1), (self.s.blue_id, 50.0, 2), (extra.id, 40.0, 3)],
        )

    def test_recompute_team_reranks_whole_group(self):
        self.seed.adjustment(self.s.blue_id, self.s.qualifiers_id, 5)
        self.aggregator.recompute_team(self.s.blue_id, self.s.qualifiers_id)

        self.assertEqual(self._membership(self.s.blue_id).rank, 1)
        self.assertEqual(self._membership(self.s.red_id).rank, 2)

    def test_missing_membership_only_warns(self):
        loner = self.seed.team(self.s.hackathon_id, "Loner")
        with self.assertLogs("scoring_node.services.group_aggregator", level="WARNING") as logs:
            self.assertIsNone(self.aggregator.recompute_team(loner.id, self.s.qualifiers_id))
        self.assertIn("no group", logs.output[0])

    def test_memberships_in_other_phases_are_ignored(self):
        finals_group = self.seed.group(self.s.finals_track_id, "Final group")
        self.seed.member(finals_group.id, self.s.red_id)

        membership = self.aggregator.locate(self.s.red_id, self.s.qualifiers_id)

        self.assertEqual(membership.group_id, self.s.alpha_id)

    def test_unknown_group(self):
        with self.assertRaises(GroupNotFound):
            self.aggregator.recompute_group(9999)

    def test_nothing_is_committed(self):
        self.seed.adjustment(self.s.blue_id, self.s.qualifiers_id, 5)
        self.aggregator.recompute_team(self.s.blue_id, self.s.qualifiers_id)
        self.session.rollback()

        self.assertIsNone(self._membership(self.s.blue_id).average_score)


if __name__ == "__main__":
    unittest.main()
