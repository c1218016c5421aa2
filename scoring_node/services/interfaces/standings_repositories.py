from __future__ import annotations

from abc import ABC, abstractmethod

from scoring_node.entities.scoring import FinalQualification, Ranking


class RankingRepository(ABC):
    @abstractmethod
    def find(self, *, hackathon_id: int, team_id: int | None = None) -> list[Ranking]:
        raise NotImplementedError

    @abstractmethod
    def add(self, ranking: Ranking) -> Ranking:
        raise NotImplementedError

    @abstractmethod
    def update(self, ranking: Ranking) -> None:
        raise NotImplementedError


class FinalQualificationRepository(ABC):
    @abstractmethod
    def exists(self, *, team_id: int, phase_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def find(self, *, hackathon_id: int | None = None, phase_id: int | None = None) -> list[FinalQualification]:
        """``hackathon_id`` filters on the qualified team's hackathon."""
        raise NotImplementedError

    @abstractmethod
    def add(self, qualification: FinalQualification) -> FinalQualification:
        raise NotImplementedError
