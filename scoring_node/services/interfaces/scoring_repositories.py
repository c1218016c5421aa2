from __future__ import annotations

from abc import ABC, abstractmethod

from scoring_node.entities.scoring import Criterion, PenaltyBonus, Score, Submission


class CriterionRepository(ABC):
    @abstractmethod
    def get(self, criterion_id: int) -> Criterion | None:
        raise NotImplementedError

    @abstractmethod
    def find(self, *, phase_id: int | None = None) -> list[Criterion]:
        raise NotImplementedError

    @abstractmethod
    def add(self, criterion: Criterion) -> Criterion:
        raise NotImplementedError

    @abstractmethod
    def update(self, criterion: Criterion) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove(self, criterion_id: int) -> None:
        raise NotImplementedError


class SubmissionRepository(ABC):
    @abstractmethod
    def get(self, submission_id: int) -> Submission | None:
        raise NotImplementedError

    @abstractmethod
    def find(self, *, team_id: int | None = None, phase_id: int | None = None) -> list[Submission]:
        raise NotImplementedError

    @abstractmethod
    def fetch_by_ids(self, ids: list[int]) -> dict[int, Submission]:
        raise NotImplementedError


class ScoreRepository(ABC):
    """The score ledger: one row per (judge, submission, criterion)."""

    @abstractmethod
    def get(self, score_id: int) -> Score | None:
        raise NotImplementedError

    @abstractmethod
    def find(
        self,
        *,
        submission_id: int | None = None,
        submission_ids: list[int] | None = None,
        judge_id: int | None = None,
        phase_id: int | None = None,
        team_id: int | None = None,
    ) -> list[Score]:
        raise NotImplementedError

    @abstractmethod
    def exists(self, *, judge_id: int, submission_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add(self, score: Score) -> Score:
        raise NotImplementedError

    @abstractmethod
    def update(self, score: Score) -> None:
        raise NotImplementedError


class PenaltyBonusRepository(ABC):
    @abstractmethod
    def get(self, adjustment_id: int) -> PenaltyBonus | None:
        raise NotImplementedError

    @abstractmethod
    def find(
        self,
        *,
        phase_id: int,
        team_id: int | None = None,
        include_deleted: bool = False,
    ) -> list[PenaltyBonus]:
        raise NotImplementedError

    @abstractmethod
    def add(self, adjustment: PenaltyBonus) -> PenaltyBonus:
        raise NotImplementedError

    @abstractmethod
    def update(self, adjustment: PenaltyBonus) -> None:
        raise NotImplementedError
