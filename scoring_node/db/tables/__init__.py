from scoring_node.db.tables.hackathon import (
    GroupRow, GroupTeamRow, HackathonRow, JudgeAssignmentRow, PhaseRow, TeamRow, TrackRow,
)
from scoring_node.db.tables.scoring import (
    CriterionRow, FinalQualificationRow, PenaltyBonusRow, RankingRow, ScoreRow, SubmissionRow,
)

__all__ = [
    "HackathonRow", "PhaseRow", "TrackRow", "GroupRow", "TeamRow", "GroupTeamRow",
    "JudgeAssignmentRow",
    "CriterionRow", "SubmissionRow", "ScoreRow", "PenaltyBonusRow",
    "FinalQualificationRow", "RankingRow",
]
