import unittest

from scoring_fixtures import StorageTestMixin, build_scenario
from scoring_node.errors import CriterionNotFound, PhaseNotFound, ValidationFailedError
from scoring_node.services.criterion_service import CriterionDraft, CriterionService


class TestCriterionService(StorageTestMixin, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.s = build_scenario(self.session)
        self.service = CriterionService(self.uow)

    def test_create_inserts_all_criteria(self):
        created = self.service.create_criteria(self.s.finals_id, [
            CriterionDraft(name=" Demo ", weight=25),
            CriterionDraft(name="Q&A", weight=5),
        ])

        self.assertEqual([(c.name, c.weight) for c in created], [("Demo", 25), ("Q&A", 5)])
        self.assertEqual(
            [c.name for c in self.service.list_criteria(self.s.finals_id)], ["Pitch", "Demo", "Q&A"],
        )

    def test_create_validation(self):
        cases = {
            "empty": [],
            "blank name": [CriterionDraft(name="  ", weight=5)],
            "zero weight": [CriterionDraft(name="Demo", weight=0)],
            "negative weight": [CriterionDraft(name="Demo", weight=-1)],
            "nan weight": [CriterionDraft(name="Demo", weight=float("nan"))],
            "infinite weight": [CriterionDraft(name="Demo", weight=float("inf"))],
        }
        for label, drafts in cases.items():
            with self.subTest(label):
                with self.assertRaises(ValidationFailedError):
                    self.service.create_criteria(self.s.finals_id, drafts)
        self.assertEqual(len(self.service.list_criteria(self.s.finals_id)), 1)

    def test_one_bad_draft_rejects_the_whole_batch(self):
        with self.assertRaises(ValidationFailedError):
            self.service.create_criteria(self.s.finals_id, [
                CriterionDraft(name="Demo", weight=10),
                CriterionDraft(name="", weight=10),
            ])
        self.assertEqual(len(self.service.list_criteria(self.s.finals_id)), 1)

    def test_create_for_unknown_phase(self):
        with self.assertRaises(PhaseNotFound):
            self.service.create_criteria(9999, [CriterionDraft(name="Demo", weight=1)])

    def test_list_all(self):
        self.assertEqual(len(self.service.list_criteria()), 3)

    def test_update(self):
        updated = self.service.update_criterion(self.s.pitch_id, "Pitch & demo", 60)

        self.assertEqual(updated.name, "Pitch & demo")
        self.assertEqual(self.service.get_criterion(self.s.pitch_id).weight, 60)

        with self.assertRaises(ValidationFailedError):
            self.service.update_criterion(self.s.pitch_id, "Pitch", 0)
        with self.assertRaises(ValidationFailedError):
            self.service.update_criterion(self.s.pitch_id, "Pitch", float("nan"))
        with self.assertRaises(CriterionNotFound):
            self.service.update_criterion(9999, "Pitch", 10)

    def test_delete(self):
        self.service.delete_criterion(self.s.pitch_id)

        with self.assertRaises(CriterionNotFound):
            self.service.get_criterion(self.s.pitch_id)
        with self.assertRaises(CriterionNotFound):
            self.service.delete_criterion(self.s.pitch_id)


if __name__ == "__main__":
    unittest.main()
