"""
Liveness and readiness checks.

Readiness reads the puzzle table itself, so a missing migration shows up
as "not ready" just like a dead connection.
"""

import datetime as dt
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from commanderdle.db.database import get_session
from commanderdle.db.operations import list_games_by_date

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    database: str | None = None
    puzzles_today: list[str] | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Process is up. No dependencies are touched."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Puzzle store is reachable.

    Also lists which modes already have a puzzle for today, so a missed
    generation run is visible before players hit /play.
    """
    try:
        games = await list_games_by_date(session, dt.date.today())
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed: %s", e)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")

    return HealthResponse(
        status="ready",
        database="connected",
        puzzles_today=[game.mode for game in games],
    )
