from scoring_node.schemas.payload_contracts import (
    AdjustmentCreateRequest,
    CriterionCreateRequest,
    CriterionPayload,
    CriterionUpdateRequest,
    ScoreItemPayload,
    ScoreSubmissionRequest,
    ScoreUpdateRequest,
)

__all__ = [
    "ScoreItemPayload",
    "ScoreSubmissionRequest",
    "ScoreUpdateRequest",
    "CriterionPayload",
    "CriterionCreateRequest",
    "CriterionUpdateRequest",
    "AdjustmentCreateRequest",
]
