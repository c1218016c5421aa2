from __future__ import annotations

import logging
from typing import Annotated, Any, Generator

import uvicorn
from fastapi import Depends, FastAPI, Header, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

from scoring_node.config.runtime import RuntimeSettings
from scoring_node.db import DBUnitOfWork, create_session
from scoring_node.entities.reports import (
    Finalist, JudgeSubmissionScores, QualifiedTeam, ScoreDetail, ScoreItem, SubmissionScores,
    TeamOverview, TeamScore,
)
from scoring_node.entities.scoring import Criterion, PenaltyBonus
from scoring_node.errors import ScoringError
from scoring_node.schemas import (
    AdjustmentCreateRequest,
    CriterionCreateRequest,
    CriterionUpdateRequest,
    ScoreSubmissionRequest,
    ScoreUpdateRequest,
)
from scoring_node.services.adjustment_service import AdjustmentService
from scoring_node.services.criterion_service import CriterionDraft, CriterionService
from scoring_node.services.interfaces.unit_of_work import UnitOfWork
from scoring_node.services.qualification import QualificationSelector
from scoring_node.services.scoring_workflow import ScoringWorkflow
from scoring_node.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="Hackathon Scoring Node")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

SETTINGS = RuntimeSettings.from_env()

# Identity is established upstream; the gateway forwards the acting judge.
JudgeId = Annotated[int, Header(alias="X-Judge-Id")]


@app.exception_handler(ScoringError)
async def handle_scoring_error(request: Request, exc: ScoringError) -> JSONResponse:
    logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def get_db_session() -> Generator[Session, Any, None]:
    with create_session() as session:
        yield session


def get_unit_of_work(
    session_db: Annotated[Session, Depends(get_db_session)]
) -> UnitOfWork:
    return DBUnitOfWork(session_db)


def get_scoring_workflow(
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)]
) -> ScoringWorkflow:
    return ScoringWorkflow(uow, settings=SETTINGS)


def get_qualification_selector(
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)]
) -> QualificationSelector:
    return QualificationSelector(uow, settings=SETTINGS)


def get_criterion_service(
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)]
) -> CriterionService:
    return CriterionService(uow)


def get_adjustment_service(
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)]
) -> AdjustmentService:
    return AdjustmentService(uow, settings=SETTINGS)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


# ── scores ──


@app.post("/scores", status_code=status.HTTP_201_CREATED)
def submit_scores(
    request: ScoreSubmissionRequest,
    judge_id: JudgeId,
    workflow: Annotated[ScoringWorkflow, Depends(get_scoring_workflow)],
) -> SubmissionScores:
    items = [ScoreItem(criterion_id=s.criterion_id, score=s.score, comment=s.comment) for s in request.scores]
    return workflow.submit_scores(judge_id, request.submission_id, items)


@app.put("/scores/{score_id}")
def update_score(
    score_id: int,
    request: ScoreUpdateRequest,
    judge_id: JudgeId,
    workflow: Annotated[ScoringWorkflow, Depends(get_scoring_workflow)],
) -> ScoreDetail:
    return workflow.update_score(judge_id, score_id, request.score, request.comment)


@app.get("/groups/{group_id}/scores")
def get_team_scores_by_group(
    group_id: int,
    workflow: Annotated[ScoringWorkflow, Depends(get_scoring_workflow)],
) -> list[TeamScore]:
    return workflow.get_team_scores_by_group(group_id)


@app.post("/groups/{group_id}/recompute")
def recompute_group(
    group_id: int,
    workflow: Annotated[ScoringWorkflow, Depends(get_scoring_workflow)],
) -> list[TeamScore]:
    """Rebuild every average of the group from the score ledger and re-rank it."""
    return workflow.recompute_group(group_id)


@app.get("/judges/{judge_id}/scores")
def get_judge_scores(
    judge_id: int,
    phase_id: Annotated[int, Query()],
    workflow: Annotated[ScoringWorkflow, Depends(get_scoring_workflow)],
) -> list[JudgeSubmissionScores]:
    return workflow.get_judge_scores(judge_id, phase_id)


@app.get("/teams/{team_id}/overview")
def get_team_overview(
    team_id: int,
    phase_id: Annotated[int, Query()],
    workflow: Annotated[ScoringWorkflow, Depends(get_scoring_workflow)],
) -> TeamOverview:
    return workflow.get_team_overview(team_id, phase_id)


# ── qualification ──


@app.post("/phases/{phase_id}/qualifiers")
def select_qualifiers(
    phase_id: int,
    selector: Annotated[QualificationSelector, Depends(get_qualification_selector)],
    quantity: Annotated[int | None, Query(ge=1)] = None,
) -> list[QualifiedTeam]:
    return selector.select_qualifiers(phase_id, quantity)


@app.get("/phases/{phase_id}/finalists")
def get_finalists(
    phase_id: int,
    selector: Annotated[QualificationSelector, Depends(get_qualification_selector)],
) -> list[Finalist]:
    return selector.get_finalists(phase_id)


# ── criteria ──


@app.post("/phases/{phase_id}/criteria", status_code=status.HTTP_201_CREATED)
def create_criteria(
    phase_id: int,
    request: CriterionCreateRequest,
    service: Annotated[CriterionService, Depends(get_criterion_service)],
) -> list[Criterion]:
    drafts = [CriterionDraft(name=c.name, weight=c.weight) for c in request.criteria]
    return service.create_criteria(phase_id, drafts)


@app.get("/criteria")
def list_criteria(
    service: Annotated[CriterionService, Depends(get_criterion_service)],
    phase_id: Annotated[int | None, Query()] = None,
) -> list[Criterion]:
    return service.list_criteria(phase_id)


@app.get("/criteria/{criterion_id}")
def get_criterion(
    criterion_id: int,
    service: Annotated[CriterionService, Depends(get_criterion_service)],
) -> Criterion:
    return service.get_criterion(criterion_id)


@app.put("/criteria/{criterion_id}")
def update_criterion(
    criterion_id: int,
    request: CriterionUpdateRequest,
    service: Annotated[CriterionService, Depends(get_criterion_service)],
) -> Criterion:
    return service.update_criterion(criterion_id, request.name, request.weight)


@app.delete("/criteria/{criterion_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_criterion(
    criterion_id: int,
    service: Annotated[CriterionService, Depends(get_criterion_service)],
) -> None:
    service.delete_criterion(criterion_id)


# ── penalties / bonuses ──


@app.post("/adjustments", status_code=status.HTTP_201_CREATED)
def add_adjustment(
    request: AdjustmentCreateRequest,
    service: Annotated[AdjustmentService, Depends(get_adjustment_service)],
) -> PenaltyBonus:
    return service.add_adjustment(request.team_id, request.phase_id, request.points, request.reason)


@app.delete("/adjustments/{adjustment_id}")
def remove_adjustment(
    adjustment_id: int,
    service: Annotated[AdjustmentService, Depends(get_adjustment_service)],
) -> PenaltyBonus:
    return service.remove_adjustment(adjustment_id)


def serve(settings: RuntimeSettings = SETTINGS) -> None:
    setup_logging(settings.log_level)
    logger.info("scoring node api listening on %s:%d", settings.api_host, settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    serve()
