from __future__ import annotations

from collections.abc import Iterable

from scoring_node.entities.reports import ScoreItem
from scoring_node.entities.scoring import Criterion
from scoring_node.errors import InvalidCriterion, ScoreOutOfRange
from scoring_node.services.interfaces.scoring_repositories import CriterionRepository


def check_range(criterion: Criterion, value: float) -> None:
    if not 0 <= value <= criterion.weight:
        raise ScoreOutOfRange(
            f"Score for criterion {criterion.id} must be between 0 and {criterion.weight}."
        )


class CriterionValidator:
    def __init__(self, criterion_repository: CriterionRepository):
        self.criterion_repository = criterion_repository

    def validate(self, item: ScoreItem, phase_id: int) -> Criterion:
        criterion = self.criterion_repository.get(item.criterion_id)
        if criterion is None or criterion.phase_id != phase_id:
            raise InvalidCriterion(f"Invalid criterion {item.criterion_id}")
        check_range(criterion, item.score)
        return criterion

    def validate_all(self, items: Iterable[ScoreItem], phase_id: int) -> list[Criterion]:
        """Validate every item before anything is written; the first failure wins."""
        return [self.validate(item, phase_id) for item in items]
