"""
Daily puzzle endpoints.

Serves today's puzzle payload for the frontend. If today's puzzle was
not generated ahead of time it is built on demand and stored.
"""

import datetime as dt
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from commanderdle.db import daily_game_to_model, get_game
from commanderdle.db.database import get_session
from commanderdle.jobs.generate_daily_game import CREATED, EXISTS, generate_mode, open_assembler
from commanderdle.models.decklist import decklist_to_json, sort_sections
from commanderdle.models.failure import GenerationFailure
from commanderdle.models.game import GameMode, PuzzleGame
from commanderdle.services.game_assembler import GameAssembler

router = APIRouter(prefix="/play", tags=["games"])


class CardResponse(BaseModel):
    """One decklist line."""

    quantity: int
    name: str


class GameResponse(BaseModel):
    """Everything the puzzle page needs to render."""

    date: dt.date
    hard_mode: bool
    tournament_name: str
    tournament_id: str | None = None
    player_name: str
    player_standing: int | None = None
    total_participants: int | None = None
    decklist: dict[str, list[CardResponse]] = Field(default_factory=dict)
    decklist_url: str | None = None


# Opens a GameAssembler and closes its upstream clients on exit
AssemblerFactory = Callable[[], AbstractContextManager[GameAssembler]]


def get_assembler_factory() -> AssemblerFactory:
    """Dependency that provides the live assembler factory."""
    return open_assembler


def game_to_response(game: PuzzleGame) -> GameResponse:
    decklist: dict[str, Any] = decklist_to_json(sort_sections(game.decklist))
    return GameResponse(
        date=game.date,
        hard_mode=game.is_hard,
        tournament_name=game.tournament_name,
        tournament_id=game.tournament_id,
        player_name=game.player_name,
        player_standing=game.player_standing,
        total_participants=game.total_participants,
        decklist=decklist,
        decklist_url=game.decklist_url,
    )


async def resolve_game(
    session: AsyncSession,
    assembler_factory: AssemblerFactory,
    mode: GameMode,
    game_date: dt.date | None = None,
) -> PuzzleGame:
    """
    Load the puzzle for a date, generating it first if missing.

    Upstream clients are only opened when generation is needed.

    Raises:
        HTTPException: 503 with a failure envelope if generation fails
    """
    game_date = game_date or dt.date.today()

    db_game = await get_game(session, game_date, mode)
    if db_game is None:
        with assembler_factory() as assembler:
            outcome = await generate_mode(session, assembler, game_date, mode, max_attempts=1)
        if outcome in (CREATED, EXISTS):
            db_game = await get_game(session, game_date, mode)

    if db_game is None:
        failure = GenerationFailure(mode.value, "No usable decklist could be generated")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=failure.to_response().model_dump(mode="json"),
        )

    return daily_game_to_model(db_game)


@router.get("", response_model=GameResponse)
async def daily(
    session: Annotated[AsyncSession, Depends(get_session)],
    assembler_factory: Annotated[AssemblerFactory, Depends(get_assembler_factory)],
) -> GameResponse:
    """Today's normal-mode puzzle."""
    return game_to_response(await resolve_game(session, assembler_factory, GameMode.NORMAL))


@router.get("/hard", response_model=GameResponse)
async def hard_daily(
    session: Annotated[AsyncSession, Depends(get_session)],
    assembler_factory: Annotated[AssemblerFactory, Depends(get_assembler_factory)],
) -> GameResponse:
    """Today's hard-mode puzzle."""
    return game_to_response(await resolve_game(session, assembler_factory, GameMode.HARD))

