"""initial schema: hackathon structure, score ledger, standings

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Hackathon structure: hackathons → phases → tracks → groups ──
    op.create_table(
        "hackathons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
    )

    op.create_table(
        "phases",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("hackathon_id", sa.Integer(), sa.ForeignKey("hackathons.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_phases_hackathon_id", "phases", ["hackathon_id"])
    op.create_index("ix_phases_end_date", "phases", ["end_date"])

    op.create_table(
        "tracks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("phase_id", sa.Integer(), sa.ForeignKey("phases.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_index("ix_tracks_phase_id", "tracks", ["phase_id"])

    op.create_table(
        "scoring_groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("track_id", sa.Integer(), sa.ForeignKey("tracks.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_index("ix_scoring_groups_track_id", "scoring_groups", ["track_id"])

    # ── Teams & memberships ──
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("hackathon_id", sa.Integer(), sa.ForeignKey("hackathons.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("leader_id", sa.Integer(), nullable=True),
    )
    op.create_index("ix_teams_hackathon_id", "teams", ["hackathon_id"])

    op.create_table(
        "group_teams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("scoring_groups.id"), nullable=False),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("average_score", sa.Float(), nullable=True),
        sa.Column("rank", sa.Integer(), nullable=True),
        sa.UniqueConstraint("group_id", "team_id", name="uq_group_teams_group_team"),
    )
    op.create_index("ix_group_teams_group_id", "group_teams", ["group_id"])
    op.create_index("ix_group_teams_team_id", "group_teams", ["team_id"])

    op.create_table(
        "judge_assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("judge_id", sa.Integer(), nullable=False),
        sa.Column("hackathon_id", sa.Integer(), sa.ForeignKey("hackathons.id"), nullable=False),
        sa.Column("phase_id", sa.Integer(), sa.ForeignKey("phases.id"), nullable=True),
    )
    op.create_index("ix_judge_assignments_judge_id", "judge_assignments", ["judge_id"])
    op.create_index("ix_judge_assignments_hackathon_id", "judge_assignments", ["hackathon_id"])

    # ── Score ledger: criteria → submissions → scores ──
    op.create_table(
        "criteria",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("phase_id", sa.Integer(), sa.ForeignKey("phases.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
    )
    op.create_index("ix_criteria_phase_id", "criteria", ["phase_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("phase_id", sa.Integer(), sa.ForeignKey("phases.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False, server_default=""),
    )
    op.create_index("ix_submissions_team_id", "submissions", ["team_id"])
    op.create_index("ix_submissions_phase_id", "submissions", ["phase_id"])

    op.create_table(
        "scores",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("judge_id", sa.Integer(), nullable=False),
        sa.Column("submission_id", sa.Integer(), sa.ForeignKey("submissions.id"), nullable=False),
        sa.Column("criterion_id", sa.Integer(), sa.ForeignKey("criteria.id"), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("comment", sa.String(), nullable=True),
        sa.Column("scored_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "judge_id", "submission_id", "criterion_id", name="uq_scores_judge_submission_criterion",
        ),
    )
    op.create_index("ix_scores_judge_id", "scores", ["judge_id"])
    op.create_index("ix_scores_submission_id", "scores", ["submission_id"])
    op.create_index("ix_scores_criterion_id", "scores", ["criterion_id"])
    op.create_index("ix_scores_scored_at", "scores", ["scored_at"])

    op.create_table(
        "penalties_bonuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("phase_id", sa.Integer(), sa.ForeignKey("phases.id"), nullable=False),
        sa.Column("points", sa.Float(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_penalties_bonuses_team_id", "penalties_bonuses", ["team_id"])
    op.create_index("ix_penalties_bonuses_phase_id", "penalties_bonuses", ["phase_id"])
    op.create_index("ix_penalties_bonuses_is_deleted", "penalties_bonuses", ["is_deleted"])

    # ── Standings: qualifications & final rankings ──
    op.create_table(
        "final_qualifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("scoring_groups.id"), nullable=False),
        sa.Column("phase_id", sa.Integer(), sa.ForeignKey("phases.id"), nullable=False),
        sa.Column("track_id", sa.Integer(), sa.ForeignKey("tracks.id"), nullable=False),
        sa.Column("qualified_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("team_id", "phase_id", name="uq_final_qualifications_team_phase"),
    )
    op.create_index("ix_final_qualifications_team_id", "final_qualifications", ["team_id"])
    op.create_index("ix_final_qualifications_phase_id", "final_qualifications", ["phase_id"])

    op.create_table(
        "rankings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("hackathon_id", sa.Integer(), sa.ForeignKey("hackathons.id"), nullable=False),
        sa.Column("total_score", sa.Float(), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("team_id", "hackathon_id", name="uq_rankings_team_hackathon"),
    )
    op.create_index("ix_rankings_team_id", "rankings", ["team_id"])
    op.create_index("ix_rankings_hackathon_id", "rankings", ["hackathon_id"])
    op.create_index("ix_rankings_updated_at", "rankings", ["updated_at"])


def downgrade() -> None:
    for table in (
        "rankings",
        "final_qualifications",
        "penalties_bonuses",
        "scores",
        "submissions",
        "criteria",
        "judge_assignments",
        "group_teams",
        "teams",
        "scoring_groups",
        "tracks",
        "phases",
        "hackathons",
    ):
        op.drop_table(table)
