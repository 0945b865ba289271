"""
Outcomes of picking a tournament player for a puzzle.

Selection has three expected results and each one is its own type, so
callers match on the type instead of probing for keys:

- SelectionSuccess: a player was chosen.
- NoCandidates: the tournament search returned nothing usable.
- NoValidTournaments: candidates existed but none yielded an eligible,
  non-excluded player within the attempt budget.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SelectionSuccess:
    """A chosen player and where their list came from."""

    tournament_id: str
    tournament_name: str
    player_name: str
    player_standing: int | None
    total_participants: int
    decklist_text: str | None
    decklist_url: str | None
    commander_key: str
    attempt: int  # 1-based index of the tournament that produced this result


@dataclass(frozen=True, slots=True)
class NoCandidates:
    """The tournament search returned no candidates."""

    reason: str = "No competitive tournaments found"


@dataclass(frozen=True, slots=True)
class NoValidTournaments:
    """Every tried tournament was skipped."""

    tournaments_checked: int
    checked_ids: list[str] = field(default_factory=list)

    @property
    def reason(self) -> str:
        return (
            f"No tournaments with valid decklists found after trying "
            f"{self.tournaments_checked} tournaments"
        )


SelectionResult = SelectionSuccess | NoCandidates | NoValidTournaments
