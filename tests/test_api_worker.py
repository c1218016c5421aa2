"""HTTP surface of the scoring node, backed by an in-memory database."""
from __future__ import annotations

import unittest

from fastapi.testclient import TestClient
from sqlmodel import Session

from scoring_fixtures import HACKATHON_JUDGE, QUALIFIERS_JUDGE, UNASSIGNED_JUDGE, build_scenario, make_engine
from scoring_node.workers.api_worker import app, get_db_session


class TestApiWorker(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        with Session(self.engine) as session:
            self.s = build_scenario(session)

        def override_session():
            with Session(self.engine) as session:
                yield session

        app.dependency_overrides[get_db_session] = override_session
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def _submit(self, submission_id, scores, judge_id=HACKATHON_JUDGE):
        return self.client.post(
            "/scores",
            json={"submission_id": submission_id, "scores": scores},
            headers={"X-Judge-Id": str(judge_id)},
        )

    def _score_red(self, innovation=8, execution=12, judge_id=HACKATHON_JUDGE):
        return self._submit(self.s.red_submission_id, [
            {"criterion_id": self.s.innovation_id, "score": innovation, "comment": "clever"},
            {"criterion_id": self.s.execution_id, "score": execution},
        ], judge_id=judge_id)

    def test_healthz(self):
        resp = self.client.get("/healthz")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_submit_scores(self):
        resp = self._score_red()

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json(), {
            "submission_id": self.s.red_submission_id,
            "scores": [
                {"criterion_id": self.s.innovation_id, "score": 8.0, "comment": "clever"},
                {"criterion_id": self.s.execution_id, "score": 12.0, "comment": None},
            ],
        })

    def test_error_families_map_to_status_codes(self):
        self.assertEqual(self._score_red().status_code, 201)

        cases = [
            (self._score_red(), 409, "Conflict", "ALREADY_SCORED"),
            (self._score_red(judge_id=UNASSIGNED_JUDGE), 403, "Unauthorized", "JUDGE_NOT_ASSIGNED"),
            (self._score_red(innovation=11, judge_id=QUALIFIERS_JUDGE), 422, "ValidationFailed", "SCORE_OUT_OF_RANGE"),
            (self._submit(9999, [{"criterion_id": self.s.innovation_id, "score": 1}]), 404, "NotFound", "SUBMISSION_NOT_FOUND"),
            (self._submit(self.s.blue_submission_id, []), 422, "ValidationFailed", "NO_SCORES"),
        ]
        for resp, status_code, family, code in cases:
            with self.subTest(code=code):
                self.assertEqual(resp.status_code, status_code)
                body = resp.json()
                self.assertEqual(body["error"], family)
                self.assertEqual(body["code"], code)
                self.assertTrue(body["message"])

    def test_judge_header_is_required(self):
        resp = self.client.post("/scores", json={"submission_id": self.s.red_submission_id, "scores": []})
        self.assertEqual(resp.status_code, 422)

    def _post_raw(self, path, body, judge_id=HACKATHON_JUDGE):
        return self.client.post(
            path,
            content=body,
            headers={"Content-Type": "application/json", "X-Judge-Id": str(judge_id)},
        )

    def test_nan_numbers_are_rejected_at_the_boundary(self):
        score = self._post_raw(
            "/scores",
            f'{{"submission_id": {self.s.red_submission_id}, '
            f'"scores": [{{"criterion_id": {self.s.innovation_id}, "score": NaN}}]}}',
        )
        criterion = self._post_raw(
            f"/phases/{self.s.finals_id}/criteria", '{"criteria": [{"name": "Demo", "weight": NaN}]}',
        )
        adjustment = self._post_raw(
            "/adjustments", f'{{"team_id": {self.s.red_id}, "phase_id": {self.s.qualifiers_id}, "points": Infinity}}',
        )

        for resp in (score, criterion, adjustment):
            self.assertEqual(resp.status_code, 422)
        self.assertEqual(self.client.get(f"/groups/{self.s.alpha_id}/scores").json()[0]["average_score"], None)

    def test_update_score(self):
        self._score_red()
        listing = self.client.get(f"/judges/{HACKATHON_JUDGE}/scores", params={"phase_id": self.s.qualifiers_id})
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(listing.json()[0]["total_score"], 20.0)
        score_id = listing.json()[0]["scores"][0]["score_id"]

        resp = self.client.put(
            f"/scores/{score_id}", json={"score": 10, "comment": "revised"}, headers={"X-Judge-Id": str(HACKATHON_JUDGE)},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["score"], 10.0)
        self.assertEqual(resp.json()["comment"], "revised")

        forbidden = self.client.put(
            f"/scores/{score_id}", json={"score": 1}, headers={"X-Judge-Id": str(QUALIFIERS_JUDGE)},
        )
        self.assertEqual(forbidden.status_code, 403)
        self.assertEqual(forbidden.json()["code"], "NOT_OWNER")

    def test_group_scores_and_overview(self):
        self._score_red()

        resp = self.client.get(f"/groups/{self.s.alpha_id}/scores")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [
            {"team_id": self.s.red_id, "team_name": "Red", "average_score": 20.0, "rank": 1},
            {"team_id": self.s.blue_id, "team_name": "Blue", "average_score": None, "rank": 2},
        ])

        overview = self.client.get(f"/teams/{self.s.red_id}/overview", params={"phase_id": self.s.qualifiers_id})
        self.assertEqual(overview.status_code, 200)
        self.assertEqual(overview.json()["criteria_scores"][0], {
            "criterion_id": self.s.innovation_id, "score": 8.0, "comment": "clever",
        })

        self.assertEqual(self.client.get("/groups/9999/scores").status_code, 404)
        self.assertEqual(self.client.post(f"/groups/{self.s.alpha_id}/recompute").status_code, 200)

    def test_qualifiers_and_finalists(self):
        self._score_red()
        self._submit(self.s.blue_submission_id, [{"criterion_id": self.s.innovation_id, "score": 5}])

        resp = self.client.post(f"/phases/{self.s.finals_id}/qualifiers", params={"quantity": 2})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([q["team_id"] for q in resp.json()], [self.s.red_id, self.s.blue_id])

        finalists = self.client.get(f"/phases/{self.s.finals_id}/finalists")
        self.assertEqual(finalists.status_code, 200)
        self.assertEqual({f["group_name"] for f in finalists.json()}, {"Alpha"})

        wrong_phase = self.client.get(f"/phases/{self.s.qualifiers_id}/finalists")
        self.assertEqual(wrong_phase.status_code, 409)
        self.assertEqual(wrong_phase.json()["code"], "NOT_FINAL_PHASE")

    def test_criteria_crud(self):
        created = self.client.post(
            f"/phases/{self.s.finals_id}/criteria", json={"criteria": [{"name": "Demo", "weight": 25}]},
        )
        self.assertEqual(created.status_code, 201)
        criterion_id = created.json()[0]["id"]

        listing = self.client.get("/criteria", params={"phase_id": self.s.finals_id})
        self.assertEqual([c["name"] for c in listing.json()], ["Pitch", "Demo"])

        updated = self.client.put(f"/criteria/{criterion_id}", json={"name": "Live demo", "weight": 30})
        self.assertEqual(updated.json()["weight"], 30.0)
        self.assertEqual(self.client.get(f"/criteria/{criterion_id}").json()["name"], "Live demo")

        self.assertEqual(self.client.delete(f"/criteria/{criterion_id}").status_code, 204)
        self.assertEqual(self.client.get(f"/criteria/{criterion_id}").status_code, 404)

        invalid = self.client.post(f"/phases/{self.s.finals_id}/criteria", json={"criteria": [{"name": "X", "weight": 0}]})
        self.assertEqual(invalid.status_code, 422)

    def test_adjustments(self):
        self._score_red()
        created = self.client.post("/adjustments", json={
            "team_id": self.s.blue_id, "phase_id": self.s.qualifiers_id, "points": 25, "reason": "community award",
        })
        self.assertEqual(created.status_code, 201)
        scores = self.client.get(f"/groups/{self.s.alpha_id}/scores").json()
        self.assertEqual(scores[0]["team_id"], self.s.blue_id)

        removed = self.client.delete(f"/adjustments/{created.json()['id']}")
        self.assertEqual(removed.status_code, 200)
        self.assertTrue(removed.json()["is_deleted"])
        self.assertEqual(self.client.delete(f"/adjustments/{created.json()['id']}").status_code, 404)


if __name__ == "__main__":
    unittest.main()
