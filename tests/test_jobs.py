"""Tests for the daily puzzle generation job."""

from datetime import date
from unittest.mock import AsyncMock, patch

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commanderdle.db.operations import create_game, get_game
from commanderdle.jobs.generate_daily_game import (
    CREATED,
    EXISTS,
    FAILED,
    build_game_with_retry,
    generate_mode,
    generation_backoff,
    main,
    run_daily_generation,
)
from commanderdle.models.decklist import CardEntry
from commanderdle.models.failure import GenerationFailure, NetworkExhausted
from commanderdle.models.game import GameMode, PuzzleGame

TARGET = date(2025, 4, 2)


def make_game(game_date: date, mode: GameMode, commander: str) -> PuzzleGame:
    return PuzzleGame(
        date=game_date,
        mode=mode,
        tournament_name="cEDH Spring Cup",
        tournament_id="spring",
        player_name="Alice",
        player_standing=1,
        total_participants=40,
        decklist={
            "Commanders": [CardEntry(1, commander)],
            "Artifacts": [CardEntry(1, "Sol Ring")],
        },
    )


class FakeAssembler:
    """
    Stands in for GameAssembler.

    Each mode gets a distinct commander. failures lists exceptions to raise
    before succeeding; seen records the existing commander keys per call.
    """

    def __init__(self, failures: dict[GameMode, list[Exception]] | None = None) -> None:
        self.failures = failures or {}
        self.calls: list[GameMode] = []
        self.seen: list[list[str]] = []

    def build_daily_game(self, target_date, mode, existing_games) -> PuzzleGame:
        self.calls.append(mode)
        self.seen.append(sorted(g.commander_key for g in existing_games(target_date)))
        pending = self.failures.get(mode, [])
        if pending:
            raise pending.pop(0)
        commander = "Kinnan, Bonder Prodigy" if mode == GameMode.NORMAL else "Rograkh, Son of Rohgahh"
        return make_game(target_date, mode, commander)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class TestGenerationBackoff:
    def test_doubles_from_ten_seconds(self) -> None:
        assert [generation_backoff(n) for n in (1, 2, 3)] == [10.0, 20.0, 40.0]


class TestRunDailyGeneration:
    async def test_creates_both_modes(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """Both puzzles are generated and stored."""
        assembler = FakeAssembler()

        results = await run_daily_generation(TARGET, assembler, session_factory, RecordingSleep())

        assert results == {"normal": CREATED, "hard": CREATED}
        assert assembler.calls == [GameMode.NORMAL, GameMode.HARD]
        async with session_factory() as session:
            assert (await get_game(session, TARGET, GameMode.NORMAL)).player_name == "Alice"
            assert await get_game(session, TARGET, GameMode.HARD) is not None

    async def test_hard_mode_sees_normal_puzzle(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """The second mode's exclusion snapshot includes the first mode's puzzle."""
        assembler = FakeAssembler()

        await run_daily_generation(TARGET, assembler, session_factory, RecordingSleep())

        assert assembler.seen == [[], ["Kinnan, Bonder Prodigy"]]

    async def test_existing_puzzles_skipped(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """Already generated modes are left alone."""
        async with session_factory() as session:
            await create_game(session, make_game(TARGET, GameMode.NORMAL, "Najeela, the Blade-Blossom"))
            await session.commit()
        assembler = FakeAssembler()

        results = await run_daily_generation(TARGET, assembler, session_factory, RecordingSleep())

        assert results == {"normal": EXISTS, "hard": CREATED}
        assert assembler.calls == [GameMode.HARD]

    async def test_failed_mode_does_not_stop_the_other(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        failures = {GameMode.NORMAL: [GenerationFailure("normal", "nothing usable")] * 3}
        assembler = FakeAssembler(failures)
        sleep = RecordingSleep()

        results = await run_daily_generation(TARGET, assembler, session_factory, sleep)

        assert results == {"normal": FAILED, "hard": CREATED}
        # Three normal attempts, then one hard attempt
        assert assembler.calls == [GameMode.NORMAL] * 3 + [GameMode.HARD]
        assert sleep.delays == [10.0, 20.0]
        async with session_factory() as session:
            assert await get_game(session, TARGET, GameMode.NORMAL) is None

    async def test_unexpected_error_does_not_stop_the_other(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """A bug or unclassified upstream error fails one mode only."""
        assembler = FakeAssembler({GameMode.NORMAL: [TypeError("'int' object is not iterable")]})

        results = await run_daily_generation(TARGET, assembler, session_factory, RecordingSleep())

        assert results == {"normal": FAILED, "hard": CREATED}
        assert assembler.calls == [GameMode.NORMAL, GameMode.HARD]

    async def test_defaults_to_tomorrow(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        assembler = FakeAssembler()

        with patch("commanderdle.jobs.generate_daily_game.date") as mock_date:
            mock_date.today.return_value = date(2025, 12, 31)
            await run_daily_generation(None, assembler, session_factory, RecordingSleep())

        async with session_factory() as session:
            assert await get_game(session, date(2026, 1, 1), GameMode.NORMAL) is not None


class TestBuildGameWithRetry:
    async def test_retries_upstream_failure(self, session: AsyncSession) -> None:
        """A transient upstream failure is retried after the outer backoff."""
        outage = NetworkExhausted("https://topdeck.test/api/v2/tournaments", 3, "HTTP 503")
        assembler = FakeAssembler({GameMode.NORMAL: [outage]})
        sleep = RecordingSleep()

        game = await build_game_with_retry(session, assembler, TARGET, GameMode.NORMAL, sleep=sleep)

        assert game is not None
        assert game.commander_key == "Kinnan, Bonder Prodigy"
        assert sleep.delays == [10.0]

    async def test_gives_up_after_max_attempts(self, session: AsyncSession) -> None:
        failures = {GameMode.HARD: [GenerationFailure("hard", "none")] * 2}
        sleep = RecordingSleep()

        game = await build_game_with_retry(
            session, FakeAssembler(failures), TARGET, GameMode.HARD, max_attempts=2, sleep=sleep
        )

        assert game is None
        # No sleep after the final attempt
        assert sleep.delays == [10.0]

    async def test_zero_attempts_is_not_the_default(self, session: AsyncSession) -> None:
        assembler = FakeAssembler()

        game = await build_game_with_retry(
            session, assembler, TARGET, GameMode.NORMAL, max_attempts=0, sleep=RecordingSleep()
        )

        assert game is None
        assert assembler.calls == []


class TestGenerateMode:
    async def test_concurrent_insert_reports_exists(self, session: AsyncSession) -> None:
        """Losing a race on the unique key is not a failure."""
        await create_game(session, make_game(TARGET, GameMode.NORMAL, "Najeela, the Blade-Blossom"))
        await session.commit()

        with patch(
            "commanderdle.jobs.generate_daily_game.game_exists",
            new_callable=AsyncMock,
            return_value=False,
        ):
            outcome = await generate_mode(session, FakeAssembler(), TARGET, GameMode.NORMAL)

        assert outcome == EXISTS


class TestMain:
    def test_parses_date_and_reports_failure(self) -> None:
        with patch(
            "commanderdle.jobs.generate_daily_game.run_daily_generation",
            new_callable=AsyncMock,
            return_value={"normal": CREATED, "hard": FAILED},
        ) as mock_run:
            exit_code = main(["2025-04-02"])

        assert exit_code == 1
        mock_run.assert_awaited_once_with(TARGET)

    def test_success_exit_code(self) -> None:
        with patch(
            "commanderdle.jobs.generate_daily_game.run_daily_generation",
            new_callable=AsyncMock,
            return_value={"normal": CREATED, "hard": EXISTS},
        ) as mock_run:
            exit_code = main([])

        assert exit_code == 0
        mock_run.assert_awaited_once_with(None)
