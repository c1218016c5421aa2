from __future__ import annotations

from abc import ABC, abstractmethod

from scoring_node.entities.hackathon import Group, GroupTeam, JudgeAssignment, Phase, Team, Track


class PhaseRepository(ABC):
    @abstractmethod
    def get(self, phase_id: int) -> Phase | None:
        raise NotImplementedError

    @abstractmethod
    def find(self, *, hackathon_id: int) -> list[Phase]:
        raise NotImplementedError


class TrackRepository(ABC):
    @abstractmethod
    def get(self, track_id: int) -> Track | None:
        raise NotImplementedError


class GroupRepository(ABC):
    @abstractmethod
    def get(self, group_id: int) -> Group | None:
        raise NotImplementedError

    @abstractmethod
    def find(self, *, phase_id: int) -> list[Group]:
        raise NotImplementedError


class TeamRepository(ABC):
    @abstractmethod
    def get(self, team_id: int) -> Team | None:
        raise NotImplementedError

    @abstractmethod
    def fetch_by_ids(self, ids: list[int]) -> dict[int, Team]:
        raise NotImplementedError


class GroupTeamRepository(ABC):
    @abstractmethod
    def find(
        self,
        *,
        group_id: int | None = None,
        team_id: int | None = None,
        phase_id: int | None = None,
        scored_only: bool = False,
    ) -> list[GroupTeam]:
        """Memberships in storage order. ``phase_id`` filters through group → track."""
        raise NotImplementedError

    @abstractmethod
    def update(self, group_team: GroupTeam) -> None:
        raise NotImplementedError


class JudgeAssignmentRepository(ABC):
    @abstractmethod
    def find(self, *, judge_id: int, hackathon_id: int) -> list[JudgeAssignment]:
        raise NotImplementedError
