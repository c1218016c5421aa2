from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request envelopes. Range checks against criterion weights happen in the
# services; these enforce shape and reject NaN or infinite numbers.
# ---------------------------------------------------------------------------


class ScoreItemPayload(BaseModel):
    criterion_id: int
    score: float
    comment: str | None = None

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)


class ScoreSubmissionRequest(BaseModel):
    """A judge's scores for every criterion of one submission."""

    submission_id: int
    scores: list[ScoreItemPayload] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ScoreUpdateRequest(BaseModel):
    score: float
    comment: str | None = None

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)


class CriterionPayload(BaseModel):
    name: str
    weight: float

    model_config = ConfigDict(allow_inf_nan=False)


class CriterionCreateRequest(BaseModel):
    criteria: list[CriterionPayload] = Field(default_factory=list)


class CriterionUpdateRequest(CriterionPayload):
    pass


class AdjustmentCreateRequest(BaseModel):
    """Signed points: negative for a penalty, positive for a bonus."""

    team_id: int
    phase_id: int
    points: float
    reason: str | None = None

    model_config = ConfigDict(allow_inf_nan=False)
