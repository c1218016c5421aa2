"""Error taxonomy for the scoring engine.

Every rejection carries a human-readable ``message`` and a machine-readable
``code``. The families map onto HTTP statuses in the API worker:

- ``NotFoundError``         → 404
- ``ValidationFailedError`` → 422
- ``UnauthorizedError``     → 403
- ``ConflictError``         → 409
- ``StateError``            → 409
"""
from __future__ import annotations


class ScoringError(Exception):
    family: str = "ScoringError"
    status_code: int = 400
    code: str = "SCORING_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.family, "code": self.code, "message": self.message}


class NotFoundError(ScoringError):
    family = "NotFound"
    status_code = 404
    code = "NOT_FOUND"


class ValidationFailedError(ScoringError):
    family = "ValidationFailed"
    status_code = 422
    code = "VALIDATION_FAILED"


class UnauthorizedError(ScoringError):
    family = "Unauthorized"
    status_code = 403
    code = "UNAUTHORIZED"


class ConflictError(ScoringError):
    family = "Conflict"
    status_code = 409
    code = "CONFLICT"


class StateError(ScoringError):
    family = "StateError"
    status_code = 409
    code = "STATE_ERROR"


# ── not found ──

class SubmissionNotFound(NotFoundError):
    code = "SUBMISSION_NOT_FOUND"


class PhaseNotFound(NotFoundError):
    code = "PHASE_NOT_FOUND"


class CriterionNotFound(NotFoundError):
    code = "CRITERION_NOT_FOUND"


class ScoreNotFound(NotFoundError):
    code = "SCORE_NOT_FOUND"


class TeamNotFound(NotFoundError):
    code = "TEAM_NOT_FOUND"


class GroupNotFound(NotFoundError):
    code = "GROUP_NOT_FOUND"


class AdjustmentNotFound(NotFoundError):
    code = "ADJUSTMENT_NOT_FOUND"


# ── validation ──

class InvalidCriterion(ValidationFailedError):
    code = "INVALID_CRITERION"


class ScoreOutOfRange(ValidationFailedError):
    code = "SCORE_OUT_OF_RANGE"


# ── authorization ──

class JudgeNotAssigned(UnauthorizedError):
    code = "JUDGE_NOT_ASSIGNED"


class NotOwner(UnauthorizedError):
    code = "NOT_OWNER"


# ── conflicts ──

class AlreadyScored(ConflictError):
    code = "ALREADY_SCORED"


class NotFinalPhase(ConflictError):
    code = "NOT_FINAL_PHASE"
