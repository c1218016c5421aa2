import unittest

from scoring_fixtures import HACKATHON_JUDGE, StorageTestMixin, build_scenario
from scoring_node.entities.reports import ScoreItem
from scoring_node.errors import AdjustmentNotFound, PhaseNotFound, TeamNotFound, ValidationFailedError
from scoring_node.services.adjustment_service import AdjustmentService
from scoring_node.services.scoring_workflow import ScoringWorkflow


class TestAdjustmentService(StorageTestMixin, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.s = build_scenario(self.session)
        self.service = AdjustmentService(self.uow, settings=self.settings, locks=self.locks)
        self.workflow = ScoringWorkflow(self.uow, settings=self.settings, locks=self.locks)
        self.workflow.submit_scores(HACKATHON_JUDGE, self.s.red_submission_id, [
            ScoreItem(criterion_id=self.s.innovation_id, score=8),
        ])
        self.workflow.submit_scores(HACKATHON_JUDGE, self.s.blue_submission_id, [
            ScoreItem(criterion_id=self.s.innovation_id, score=6),
        ])

    def _standings(self):
        return [(t.team_id, t.average_score, t.rank) for t in self.workflow.get_team_scores_by_group(self.s.alpha_id)]

    def test_bonus_reranks_group(self):
        adjustment = self.service.add_adjustment(self.s.blue_id, self.s.qualifiers_id, 5, "best documentation")

        self.assertIsNotNone(adjustment.id)
        self.assertEqual(self._standings(), [(self.s.blue_id, 11.0, 1), (self.s.red_id, 8.0, 2)])

    def test_soft_delete_restores_previous_average(self):
        adjustment = self.service.add_adjustment(self.s.red_id, self.s.qualifiers_id, -3, "late submission")
        self.assertEqual(self._standings(), [(self.s.blue_id, 6.0, 1), (self.s.red_id, 5.0, 2)])

        removed = self.service.remove_adjustment(adjustment.id)

        self.assertTrue(removed.is_deleted)
        self.assertEqual(self._standings(), [(self.s.red_id, 8.0, 1), (self.s.blue_id, 6.0, 2)])
        stored = self.uow.adjustments.find(phase_id=self.s.qualifiers_id, include_deleted=True)
        self.assertEqual([a.is_deleted for a in stored], [True])

    def test_removing_twice(self):
        adjustment = self.service.add_adjustment(self.s.red_id, self.s.qualifiers_id, 1)
        self.service.remove_adjustment(adjustment.id)
        with self.assertRaises(AdjustmentNotFound):
            self.service.remove_adjustment(adjustment.id)

    def test_unknown_references(self):
        with self.assertRaises(TeamNotFound):
            self.service.add_adjustment(9999, self.s.qualifiers_id, 1)
        with self.assertRaises(PhaseNotFound):
            self.service.add_adjustment(self.s.red_id, 9999, 1)
        with self.assertRaises(AdjustmentNotFound):
            self.service.remove_adjustment(9999)

    def test_non_finite_points_are_rejected(self):
        for points in (float("nan"), float("inf")):
            with self.subTest(points=points):
                with self.assertRaises(ValidationFailedError) as ctx:
                    self.service.add_adjustment(self.s.red_id, self.s.qualifiers_id, points)
                self.assertEqual(ctx.exception.code, "NON_FINITE_POINTS")
        self.assertEqual(self.uow.adjustments.find(phase_id=self.s.qualifiers_id, include_deleted=True), [])

    def test_final_phase_adjustment_does_not_touch_rankings(self):
        self.workflow.submit_scores(HACKATHON_JUDGE, self.s.red_final_id, [
            ScoreItem(criterion_id=self.s.pitch_id, score=30),
        ])
        self.service.add_adjustment(self.s.red_id, self.s.finals_id, 10)

        ranking = self.uow.rankings.find(hackathon_id=self.s.hackathon_id, team_id=self.s.red_id)[0]
        self.assertEqual(ranking.total_score, 30.0)
        self.assertEqual(len(self.locks), 0)


if __name__ == "__main__":
    unittest.main()
