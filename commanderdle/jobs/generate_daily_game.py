"""
Scheduled job to generate daily puzzles.

For each mode (normal, then hard) the job skips dates that already have
a puzzle, otherwise builds one from live tournament data and stores it.
Upstream failures are retried with a longer backoff than the HTTP layer
uses; a mode that still fails is reported without stopping the other.

Usage:
    python -m commanderdle.jobs.generate_daily_game [YYYY-MM-DD]
"""

import argparse
import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from datetime import date, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commanderdle.config import settings
from commanderdle.db.database import async_session_factory
from commanderdle.db.operations import create_game, game_exists, load_games_by_dates
from commanderdle.models.failure import KnownError
from commanderdle.models.game import GameMode, PuzzleGame
from commanderdle.services.game_assembler import GameAssembler
from commanderdle.services.http_client import HttpRetryClient
from commanderdle.services.scryfall import CardTypeResolver
from commanderdle.services.topdeck import TournamentGateway
from commanderdle.services.tournament_selector import TournamentSelector

logger = logging.getLogger(__name__)

CREATED = "created"
EXISTS = "exists"
FAILED = "failed"

MODES: tuple[GameMode, ...] = (GameMode.NORMAL, GameMode.HARD)


@contextmanager
def open_assembler(rng: random.Random | None = None) -> Iterator[GameAssembler]:
    """GameAssembler wired to live Topdeck and Scryfall clients."""
    with (
        HttpRetryClient(
            settings.topdeck_base_url,
            api_key=settings.topdeck_api_key,
            timeout_s=settings.http_timeout_s,
            max_attempts=settings.http_max_attempts,
        ) as topdeck_http,
        HttpRetryClient(
            settings.scryfall_base_url,
            timeout_s=settings.http_timeout_s,
            max_attempts=settings.http_max_attempts,
        ) as scryfall_http,
    ):
        selector = TournamentSelector(TournamentGateway(topdeck_http), rng=rng)
        yield GameAssembler(selector, CardTypeResolver(scryfall_http))


def generation_backoff(attempt: int) -> float:
    """Delay before the next outer attempt: 10s, 20s, 40s, ..."""
    return settings.generation_backoff_s * 2 ** (attempt - 1)


async def build_game_with_retry(
    session: AsyncSession,
    assembler: GameAssembler,
    target_date: date,
    mode: GameMode,
    max_attempts: int | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> PuzzleGame | None:
    """
    Build a puzzle, retrying known upstream and generation failures.

    Each attempt reads a fresh snapshot of stored puzzles for the
    exclusion set.

    Returns:
        The built puzzle, or None when every attempt failed
    """
    if max_attempts is None:
        max_attempts = settings.generation_max_attempts

    for attempt in range(1, max_attempts + 1):
        snapshot = await load_games_by_dates(session, [target_date - timedelta(days=1), target_date])
        try:
            # Upstream calls block, so keep them off the event loop
            return await asyncio.to_thread(
                assembler.build_daily_game, target_date, mode, lambda d: snapshot.get(d, [])
            )
        except KnownError as e:
            logger.warning(
                "Generating %s puzzle for %s failed (attempt %d/%d): %s",
                mode.value,
                target_date,
                attempt,
                max_attempts,
                e.detail or e.message,
            )
            if attempt < max_attempts:
                await sleep(generation_backoff(attempt))

    return None


async def generate_mode(
    session: AsyncSession,
    assembler: GameAssembler,
    target_date: date,
    mode: GameMode,
    max_attempts: int | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> str:
    """
    Ensure one puzzle exists for (target_date, mode).

    Returns:
        "exists", "created" or "failed"
    """
    if await game_exists(session, target_date, mode):
        logger.info("Daily game (%s) for %s already exists. Skipping.", mode.value, target_date)
        return EXISTS

    logger.info("Generating %s daily game for %s...", mode.value, target_date)
    game = await build_game_with_retry(session, assembler, target_date, mode, max_attempts, sleep)
    if game is None:
        logger.error("Failed to generate a %s daily game for %s", mode.value, target_date)
        return FAILED

    try:
        await create_game(session, game)
        await session.commit()
    except IntegrityError:
        # Another run stored this (date, mode) first
        await session.rollback()
        logger.info("Daily game (%s) for %s was created concurrently", mode.value, target_date)
        return EXISTS

    logger.info("Daily game (%s) for %s created successfully.", mode.value, target_date)
    return CREATED


async def run_daily_generation(
    target_date: date | None = None,
    assembler: GameAssembler | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> dict[str, str]:
    """
    Generate every mode's puzzle for a date.

    Args:
        target_date: Puzzle date. Defaults to tomorrow.
        assembler: Prebuilt assembler; live clients are opened if None
        session_factory: Session source; defaults to the app database
        sleep: Async sleep used between outer attempts

    Returns:
        Dict mapping mode name to "created", "exists" or "failed"
    """
    target_date = target_date or date.today() + timedelta(days=1)
    session_factory = session_factory or async_session_factory

    if assembler is None:
        with open_assembler() as live_assembler:
            return await run_daily_generation(target_date, live_assembler, session_factory, sleep)

    results: dict[str, str] = {}
    for mode in MODES:
        async with session_factory() as session:
            try:
                results[mode.value] = await generate_mode(
                    session, assembler, target_date, mode, sleep=sleep
                )
            except Exception:
                logger.exception(
                    "Unexpected error generating %s daily game for %s", mode.value, target_date
                )
                results[mode.value] = FAILED

    if all(outcome == EXISTS for outcome in results.values()):
        logger.info("All daily games for %s already exist.", target_date)
    return results


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for generating daily puzzles."""
    parser = argparse.ArgumentParser(description="Generate daily puzzles for a date")
    parser.add_argument(
        "date",
        nargs="?",
        type=date.fromisoformat,
        help="Date to generate for (YYYY-MM-DD, defaults to tomorrow)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    results = asyncio.run(run_daily_generation(args.date))
    return 1 if FAILED in results.values() else 0


if __name__ == "__main__":
    raise SystemExit(main())
