from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from commanderdle.models.decklist import Decklist, commander_key_from_decklist


class GameMode(str, Enum):
    """Daily puzzle difficulty."""

    NORMAL = "normal"
    HARD = "hard"


@dataclass(frozen=True)
class PuzzleGame:
    """
    One daily puzzle.

    Built once per (date, mode) and never modified afterwards.

    Attributes:
        date: Day the puzzle is played
        mode: Difficulty
        tournament_name: Event the deck was played in
        tournament_id: Topdeck tournament ID
        player_name: Pilot of the deck
        player_standing: Final rank of the pilot (1-based)
        total_participants: Size of the event
        decklist: Categorized sections in canonical order
        decklist_url: Link to the list on a deckbuilding site
    """

    date: date
    mode: GameMode
    tournament_name: str
    tournament_id: str | None
    player_name: str
    player_standing: int | None
    total_participants: int | None
    decklist: Decklist = field(default_factory=dict)
    decklist_url: str | None = None

    @property
    def commander_key(self) -> str:
        return commander_key_from_decklist(self.decklist)

    @property
    def is_hard(self) -> bool:
        return self.mode == GameMode.HARD
