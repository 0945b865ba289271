"""
Puzzle store operations.

Puzzles are keyed by (date, mode). The unique constraint on the table is
what enforces one puzzle per key when two generations race.
"""

from collections.abc import Iterable
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commanderdle.models.db import DailyGameDB
from commanderdle.models.decklist import decklist_from_json, decklist_to_json
from commanderdle.models.game import GameMode, PuzzleGame


async def get_game(session: AsyncSession, game_date: date, mode: GameMode) -> DailyGameDB | None:
    """
    Get the puzzle for a date and mode.

    Returns None if it has not been generated.
    """
    result = await session.execute(
        select(DailyGameDB).where(
            DailyGameDB.date == game_date,
            DailyGameDB.mode == mode.value,
        )
    )
    return result.scalar_one_or_none()


async def game_exists(session: AsyncSession, game_date: date, mode: GameMode) -> bool:
    """True if a puzzle exists for the date and mode."""
    return await get_game(session, game_date, mode) is not None


async def list_games_by_date(session: AsyncSession, game_date: date) -> list[DailyGameDB]:
    """All puzzles for a date, any mode."""
    result = await session.execute(
        select(DailyGameDB).where(DailyGameDB.date == game_date).order_by(DailyGameDB.mode)
    )
    return list(result.scalars().all())


async def create_game(session: AsyncSession, game: PuzzleGame) -> DailyGameDB:
    """
    Insert a puzzle.

    Raises IntegrityError if one already exists for its date and mode.
    """
    db_game = DailyGameDB(
        date=game.date,
        mode=game.mode.value,
        tournament_name=game.tournament_name,
        tournament_id=game.tournament_id,
        player_name=game.player_name,
        player_standing=game.player_standing,
        total_participants=game.total_participants,
        decklist=decklist_to_json(game.decklist),
        decklist_url=game.decklist_url,
    )
    session.add(db_game)
    await session.flush()
    return db_game


def daily_game_to_model(db_game: DailyGameDB) -> PuzzleGame:
    """Convert a database puzzle to a domain model."""
    return PuzzleGame(
        date=db_game.date,
        mode=GameMode(db_game.mode),
        tournament_name=db_game.tournament_name or "",
        tournament_id=db_game.tournament_id,
        player_name=db_game.player_name or "",
        player_standing=db_game.player_standing,
        total_participants=db_game.total_participants,
        decklist=decklist_from_json(db_game.decklist or {}),
        decklist_url=db_game.decklist_url,
    )


async def load_games_by_dates(
    session: AsyncSession, dates: Iterable[date]
) -> dict[date, list[PuzzleGame]]:
    """Snapshot of stored puzzles for several dates, as domain models."""
    snapshot: dict[date, list[PuzzleGame]] = {}
    for game_date in dates:
        snapshot[game_date] = [
            daily_game_to_model(g) for g in await list_games_by_date(session, game_date)
        ]
    return snapshot
