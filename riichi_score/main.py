from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, HTTPException

from riichi_score.config import settings
from riichi_score.hand_scoring import score_request
from riichi_score.repository import InMemoryScoreRepository
from riichi_score.schemas import ResultGetResponse, ResultStatus, ScoreRequest, ScoreResponse
from riichi_score.validators import validate_score_request

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    yield


app = FastAPI(title=settings.app_title, version="0.1.0", lifespan=lifespan)
repo = InMemoryScoreRepository(ttl_hours=settings.result_ttl_hours)


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": settings.app_title,
        "docs": "/docs",
        "health": "/health",
        "score": "/api/v1/score",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/v1/score", response_model=ScoreResponse)
def score(req: ScoreRequest) -> ScoreResponse:
    validate_score_request(req)
    record = repo.find(req)
    if record is None:
        record = repo.save(req, score_request(req))
    else:
        logger.debug(f"reusing stored score {record.id}")

    warnings = []
    if record.result.status != ResultStatus.ok:
        warnings.append(record.result.message or record.result.status.value)
    return ScoreResponse(score_id=record.id, status="ok", result=record.result, warnings=warnings)


@app.get("/api/v1/results/{item_id}", response_model=ResultGetResponse)
def get_result(item_id: UUID) -> ResultGetResponse:
    record = repo.get(item_id)
    if not record:
        raise HTTPException(status_code=404, detail="record not found or expired")
    return ResultGetResponse(
        id=record.id,
        type="score",
        created_at=record.created_at,
        expires_at=record.expires_at,
        data=record.to_data(),
    )
