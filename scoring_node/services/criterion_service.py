from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from scoring_node.entities.scoring import Criterion
from scoring_node.errors import ConflictError, CriterionNotFound, PhaseNotFound, ValidationFailedError
from scoring_node.services.interfaces.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class CriterionDraft:
    name: str
    weight: float


def _check_draft(name: str, weight: float) -> None:
    if not name or not name.strip():
        raise ValidationFailedError("Criterion name is required.", code="BLANK_NAME")
    if not (math.isfinite(weight) and weight > 0):
        raise ValidationFailedError("Criterion weight must be greater than 0.", code="NON_POSITIVE_WEIGHT")


class CriterionService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def create_criteria(self, phase_id: int, drafts: Sequence[CriterionDraft]) -> list[Criterion]:
        if self.uow.phases.get(phase_id) is None:
            raise PhaseNotFound("Phase not found")
        if not drafts:
            raise ValidationFailedError("No criteria provided.", code="NO_CRITERIA")
        for draft in drafts:
            _check_draft(draft.name, draft.weight)

        try:
            created = [
                self.uow.criteria.add(Criterion(id=None, phase_id=phase_id, name=d.name.strip(), weight=d.weight))
                for d in drafts
            ]
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise
        logger.info("phase=%d created %d criteria", phase_id, len(created))
        return created

    def list_criteria(self, phase_id: int | None = None) -> list[Criterion]:
        return self.uow.criteria.find(phase_id=phase_id)

    def get_criterion(self, criterion_id: int) -> Criterion:
        criterion = self.uow.criteria.get(criterion_id)
        if criterion is None:
            raise CriterionNotFound("Criterion not found")
        return criterion

    def update_criterion(self, criterion_id: int, name: str, weight: float) -> Criterion:
        criterion = self.get_criterion(criterion_id)
        _check_draft(name, weight)

        criterion.name = name.strip()
        criterion.weight = weight
        try:
            self.uow.criteria.update(criterion)
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise
        return criterion

    def delete_criterion(self, criterion_id: int) -> None:
        self.get_criterion(criterion_id)
        try:
            self.uow.criteria.remove(criterion_id)
            self.uow.commit()
        except IntegrityError as exc:
            self.uow.rollback()
            raise ConflictError("Criterion is referenced by existing scores.", code="CRITERION_IN_USE") from exc
        except Exception:
            self.uow.rollback()
            raise
        logger.info("criterion=%d deleted", criterion_id)
