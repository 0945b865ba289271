"""
Commanderdle services.

Upstream clients and the puzzle generation pipeline.
"""

from commanderdle.services.game_assembler import (
    GameAssembler,
    build_decklist,
    compute_excluded_keys,
)
from commanderdle.services.guessing import GuessSession, is_correct_guess, normalize_guess
from commanderdle.services.http_client import HttpRetryClient, exponential_backoff
from commanderdle.services.scryfall import CardTypeResolver, categorize_type
from commanderdle.services.topdeck import TournamentGateway
from commanderdle.services.tournament_selector import TournamentSelector

__all__ = [
    "CardTypeResolver",
    "GameAssembler",
    "GuessSession",
    "HttpRetryClient",
    "TournamentGateway",
    "TournamentSelector",
    "build_decklist",
    "categorize_type",
    "compute_excluded_keys",
    "exponential_backoff",
    "is_correct_guess",
    "normalize_guess",
]
