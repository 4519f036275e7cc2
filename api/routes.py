from __future__ import annotations

from typing import Annotated, Any, Callable, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from publisher_feeds.tasks.ingest import IngestionSetupError, ingest_core
from publisher_feeds.utils.logging import get_logger

from .models import ErrorResponse, IngestSummary

IngestRunner = Callable[[], Dict[str, Any]]

router = APIRouter(prefix="/functions")
logger = get_logger(__name__)


def ingest_runner() -> IngestRunner:
    return ingest_core


RunnerDep = Annotated[IngestRunner, Depends(ingest_runner)]


@router.api_route(
    "/fetch-publisher-feeds",
    methods=["GET", "POST"],
    response_model=IngestSummary,
    responses={500: {"model": ErrorResponse}},
    tags=["feeds"],
)
def fetch_publisher_feeds_route(runner: RunnerDep):
    try:
        return runner()
    except IngestionSetupError as exc:
        logger.error("feeds.run.setup_failed", extra={"reason": str(exc)})
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(exc)).model_dump())
