from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class TournamentCandidate:
    """Lightweight listing entry from the tournament search."""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class PlayerStanding:
    """
    One player's row in a tournament's final standings.

    Attributes:
        name: Player display name
        standing: 1-based final rank, None when upstream omits it
        decklist_text: Raw decklist as submitted (may itself be a URL)
        imported_from_url: Deckbuilding site the list was imported from
    """

    name: str
    standing: int | None = None
    decklist_text: str | None = None
    imported_from_url: str | None = None

    @property
    def is_eligible(self) -> bool:
        """True if the player has both a name and decklist content."""
        return bool((self.name or "").strip()) and bool((self.decklist_text or "").strip())


@dataclass(frozen=True, slots=True)
class TournamentResult:
    """
    Full results of a single tournament.

    Attributes:
        standings: Parsed player rows
        participant_count: Rows upstream reported, including ones that could
            not be parsed. None means the standings are complete.
    """

    id: str
    name: str
    standings: list[PlayerStanding] = field(default_factory=list)
    participant_count: int | None = None

    @property
    def total_participants(self) -> int:
        """Tournament size, counting players without a usable decklist."""
        if self.participant_count is not None:
            return self.participant_count
        return len(self.standings)
