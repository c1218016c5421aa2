from __future__ import annotations

from scoring_node.entities.hackathon import Phase
from scoring_node.services.interfaces.hackathon_repositories import PhaseRepository


def final_phase_of(phases: list[Phase]) -> Phase | None:
    """Latest-ending phase; the lower id wins an end-date tie."""
    if not phases:
        return None
    return max(phases, key=lambda p: (p.end_date, -(p.id or 0)))


def scoring_phase_of(target: Phase, phases: list[Phase]) -> Phase | None:
    """Latest-ending phase that ended strictly before ``target`` started."""
    earlier = [
        p for p in phases
        if p.hackathon_id == target.hackathon_id and p.id != target.id and p.end_date < target.start_date
    ]
    if not earlier:
        return None
    return max(earlier, key=lambda p: (p.end_date, -(p.id or 0)))


class PhaseClassifier:
    def __init__(self, phase_repository: PhaseRepository):
        self.phase_repository = phase_repository

    def final_phase(self, hackathon_id: int) -> Phase | None:
        return final_phase_of(self.phase_repository.find(hackathon_id=hackathon_id))

    def is_final_phase(self, phase: Phase) -> bool:
        final = self.final_phase(phase.hackathon_id)
        return final is not None and final.id == phase.id

    def scoring_phase(self, target: Phase) -> Phase | None:
        return scoring_phase_of(target, self.phase_repository.find(hackathon_id=target.hackathon_id))
