"""
Daily puzzle assembly.

Ties the pipeline together for one (date, mode):

    prior puzzles -> excluded commander keys
    TournamentSelector -> raw decklist text
    parse_decklist -> CardTypeResolver -> canonical sections
    -> PuzzleGame

Storage is the caller's concern. This module only builds the value.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, timedelta

from commanderdle.models.decklist import (
    COMMANDERS,
    MAINBOARD,
    OTHER,
    CardEntry,
    Decklist,
    sort_sections,
)
from commanderdle.models.failure import GenerationFailure
from commanderdle.models.game import GameMode, PuzzleGame
from commanderdle.models.selection import SelectionSuccess
from commanderdle.parsers.decklist import parse_decklist
from commanderdle.services.scryfall import CardTypeResolver
from commanderdle.services.tournament_selector import TournamentSelector

logger = logging.getLogger(__name__)

# Returns every stored puzzle for a date, any mode
ExistingGamesLookup = Callable[[date], Iterable[PuzzleGame]]


def compute_excluded_keys(
    target_date: date,
    mode: GameMode,
    existing_games: ExistingGamesLookup,
) -> set[str]:
    """
    Commander keys the new puzzle must avoid.

    Yesterday's puzzles (any mode) and today's puzzles in other modes, so
    consecutive days never repeat and normal/hard never share a commander.
    """
    excluded = {game.commander_key for game in existing_games(target_date - timedelta(days=1))}
    excluded |= {
        game.commander_key for game in existing_games(target_date) if game.mode != mode
    }
    return excluded


def group_by_type(cards: Sequence[CardEntry], resolver: CardTypeResolver) -> Decklist:
    """Bucket cards by display category; unknown names land in Other."""
    categories = resolver.resolve_categories(card.name for card in cards)

    grouped: Decklist = {}
    for card in cards:
        grouped.setdefault(categories.get(card.name, OTHER), []).append(card)
    return sort_sections(grouped)


def build_decklist(raw: str, resolver: CardTypeResolver) -> Decklist:
    """
    Turn raw decklist text into a categorized decklist.

    Commanders are kept as listed. Mainboard cards are grouped by type.
    Sideboard and custom sections are not part of the puzzle.
    """
    parsed = parse_decklist(raw)

    decklist: Decklist = {}
    if parsed.get(COMMANDERS):
        decklist[COMMANDERS] = parsed[COMMANDERS]
    if parsed.get(MAINBOARD):
        decklist.update(group_by_type(parsed[MAINBOARD], resolver))

    return sort_sections(decklist)


class GameAssembler:
    """Builds PuzzleGame values from live tournament data."""

    def __init__(self, selector: TournamentSelector, resolver: CardTypeResolver) -> None:
        self.selector = selector
        self.resolver = resolver

    def build_daily_game(
        self,
        target_date: date,
        mode: GameMode,
        existing_games: ExistingGamesLookup,
    ) -> PuzzleGame:
        """
        Build the puzzle for target_date in the given mode.

        Args:
            target_date: Day the puzzle is for
            mode: Difficulty being generated
            existing_games: Lookup of stored puzzles by date

        Returns:
            A new PuzzleGame (not persisted)

        Raises:
            GenerationFailure: If no usable decklist could be produced
            NetworkExhausted: If an upstream stayed unreachable outside
                the per-tournament retry boundary
        """
        excluded = compute_excluded_keys(target_date, mode, existing_games)
        logger.info("Building %s puzzle for %s, excluding %s", mode.value, target_date, sorted(excluded))

        selection = self.selector.select_random_commander_tournament(excluded)
        if not isinstance(selection, SelectionSuccess):
            raise GenerationFailure(mode.value, selection.reason)

        if not selection.decklist_text:
            raise GenerationFailure(
                mode.value,
                f"{selection.player_name} in {selection.tournament_name} only has a decklist link",
            )

        decklist = build_decklist(selection.decklist_text, self.resolver)
        if not decklist:
            raise GenerationFailure(mode.value, "Selected decklist contained no cards")

        return PuzzleGame(
            date=target_date,
            mode=mode,
            tournament_name=selection.tournament_name,
            tournament_id=selection.tournament_id,
            player_name=selection.player_name,
            player_standing=selection.player_standing,
            total_participants=selection.total_participants,
            decklist=decklist,
            decklist_url=selection.decklist_url,
        )
