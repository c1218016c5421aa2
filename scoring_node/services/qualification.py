"""Qualification selector: advances group winners plus backfill into a later phase."""
from __future__ import annotations

import logging
from operator import attrgetter

from scoring_node.config.runtime import RuntimeSettings
from scoring_node.entities.hackathon import GroupTeam, Phase
from scoring_node.entities.reports import Finalist, QualifiedTeam
from scoring_node.entities.scoring import FinalQualification, utc_now
from scoring_node.errors import NotFinalPhase, PhaseNotFound, StateError
from scoring_node.services.aggregation import adjustment_total
from scoring_node.services.interfaces.notification_sink import LoggingNotificationSink, NotificationSink
from scoring_node.services.interfaces.unit_of_work import UnitOfWork
from scoring_node.services.phase_classifier import PhaseClassifier
from scoring_node.services.ranking import order_by_score, resolve_tie_break
from scoring_node.services.retry import conflict_retry

logger = logging.getLogger(__name__)

_by_average = attrgetter("average_score")


class QualificationSelector:
    def __init__(
        self,
        uow: UnitOfWork,
        settings: RuntimeSettings | None = None,
        notification_sink: NotificationSink | None = None,
    ):
        self.uow = uow
        self.settings = settings or RuntimeSettings.from_env()
        self.notification_sink = notification_sink or LoggingNotificationSink()
        self.tie_break = resolve_tie_break(self.settings.rank_tie_break)
        self.classifier = PhaseClassifier(uow.phases)

    def select_qualifiers(self, target_phase_id: int, quantity: int | None = None) -> list[QualifiedTeam]:
        """Qualify teams for ``target_phase_id`` from its scoring phase.

        Safe to re-run: teams that already hold a qualification for the target
        phase are returned again but not inserted twice. A unique-constraint
        conflict with a concurrent run retries the whole selection.
        """
        if quantity is None:
            quantity = self.settings.qualifier_quantity
        if quantity <= 0:
            return []

        attempt = conflict_retry(self.settings.qualification_retry_attempts)(self._select_once)
        target, qualified, created = attempt(target_phase_id, quantity)

        if created:
            logger.info(
                "phase=%d qualified %d teams (%d new)", target_phase_id, len(qualified), len(created),
            )
            self._notify_leaders(target, created)
        return qualified

    def _select_once(
        self, target_phase_id: int, quantity: int,
    ) -> tuple[Phase | None, list[QualifiedTeam], list[FinalQualification]]:
        target = self.uow.phases.get(target_phase_id)
        if target is None:
            logger.info("phase=%d not found, nothing to qualify", target_phase_id)
            return None, [], []

        scoring = self.classifier.scoring_phase(target)
        if scoring is None:
            logger.info("phase=%d has no earlier phase to qualify from", target_phase_id)
            return target, [], []

        groups = self.uow.groups.find(phase_id=scoring.id)
        if not groups:
            logger.info("scoring phase=%d has no groups", scoring.id)
            return target, [], []

        chosen = self._choose(groups, scoring.id, quantity)
        track_by_group = {g.id: g.track_id for g in groups}

        created: list[FinalQualification] = []
        try:
            now = utc_now()
            for member in chosen:
                if self.uow.qualifications.exists(team_id=member.team_id, phase_id=target.id):
                    continue
                created.append(self.uow.qualifications.add(FinalQualification(
                    id=None,
                    team_id=member.team_id,
                    group_id=member.group_id,
                    phase_id=target.id,
                    track_id=track_by_group[member.group_id],
                    qualified_at=now,
                )))
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise

        teams = self.uow.teams.fetch_by_ids([m.team_id for m in chosen])
        adjustments: dict[int, list] = {}
        for adjustment in self.uow.adjustments.find(phase_id=scoring.id):
            adjustments.setdefault(adjustment.team_id, []).append(adjustment)

        qualified = [
            QualifiedTeam(
                team_id=m.team_id,
                team_name=teams[m.team_id].name if m.team_id in teams else "Unknown",
                group_id=m.group_id,
                average_score=float(m.average_score) + adjustment_total(adjustments.get(m.team_id, [])),
            )
            for m in chosen
        ]
        return target, qualified, created

    def _choose(self, groups, scoring_phase_id: int, quantity: int) -> list[GroupTeam]:
        candidates: list[GroupTeam] = []
        selected: set[int] = set()

        for group in groups:
            scored = [m for m in self.uow.group_teams.find(group_id=group.id) if m.average_score is not None]
            if not scored:
                continue
            winner = order_by_score(scored, _by_average, self.tie_break)[0]
            if winner.team_id not in selected:
                candidates.append(winner)
                selected.add(winner.team_id)

        if len(candidates) < quantity:
            pool = self.uow.group_teams.find(phase_id=scoring_phase_id, scored_only=True)
            for member in order_by_score(pool, _by_average, self.tie_break):
                if len(candidates) >= quantity:
                    break
                if member.team_id in selected:
                    continue
                candidates.append(member)
                selected.add(member.team_id)

        return order_by_score(candidates, _by_average, self.tie_break)[:quantity]

    def _notify_leaders(self, target: Phase, created: list[FinalQualification]) -> None:
        teams = self.uow.teams.fetch_by_ids([q.team_id for q in created])
        for qualification in created:
            team = teams.get(qualification.team_id)
            if team is None or team.leader_id is None:
                continue
            message = f"Congratulations! Team {team.name} has qualified for {target.name}."
            try:
                self.notification_sink.notify(team.leader_id, message)
            except Exception:
                # delivery is best effort; the qualification is already committed
                logger.exception("notification to user=%d failed", team.leader_id)

    def get_finalists(self, phase_id: int) -> list[Finalist]:
        phase = self.uow.phases.get(phase_id)
        if phase is None:
            raise PhaseNotFound("Phase not found")

        final = self.classifier.final_phase(phase.hackathon_id)
        if final is None:
            raise StateError("No phases found for this hackathon.", code="NO_PHASES")
        if final.id != phase.id:
            raise NotFinalPhase("Finalists can only be listed for the final phase.")

        qualifications = self.uow.qualifications.find(hackathon_id=phase.hackathon_id)
        teams = self.uow.teams.fetch_by_ids([q.team_id for q in qualifications])

        finalists: list[Finalist] = []
        for q in qualifications:
            group = self.uow.groups.get(q.group_id)
            track = self.uow.tracks.get(q.track_id)
            team = teams.get(q.team_id)
            finalists.append(Finalist(
                team_id=q.team_id,
                team_name=team.name if team else None,
                group_id=q.group_id,
                group_name=group.name if group else None,
                track_name=track.name if track else None,
            ))
        return finalists
