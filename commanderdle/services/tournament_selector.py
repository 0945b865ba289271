"""
Random tournament player selection.

Picks one player's decklist from a recent competitive tournament:

1. List candidate tournaments and shuffle them
2. Try the first few of them (five by default) in order; a failure on one
   tournament (network, bad payload, nobody eligible) moves on to the next
3. Inside a tournament, group eligible players by commander key, drop
   excluded keys, pick a group uniformly, then a player in that group

Picking the group first gives each commander the same odds no matter how
many people played it. Picking a player directly would favour whatever
was most popular at that event.
"""

import logging
import random
import re
from collections.abc import Iterable

from commanderdle.config import settings
from commanderdle.models.decklist import commander_key
from commanderdle.models.selection import (
    NoCandidates,
    NoValidTournaments,
    SelectionResult,
    SelectionSuccess,
)
from commanderdle.models.tournament import PlayerStanding, TournamentCandidate
from commanderdle.parsers.decklist import extract_commander_names
from commanderdle.services.topdeck import TournamentGateway, has_competitive_marker

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://[^\s/?#]+[^\s]*$", re.IGNORECASE)


def looks_like_url(text: str) -> bool:
    """True for decklist fields that hold a link instead of a list."""
    stripped = text.strip()
    return bool(URL_PATTERN.match(stripped)) or stripped.startswith("http")


def is_valid_candidate(candidate: TournamentCandidate) -> bool:
    """Cheap pre-check before spending a request on a tournament."""
    return (
        bool(candidate.id.strip())
        and bool(candidate.name.strip())
        and has_competitive_marker(candidate.name)
    )


def group_by_commander(players: Iterable[PlayerStanding]) -> dict[str, list[PlayerStanding]]:
    """Group players by the commander key of their raw decklist."""
    groups: dict[str, list[PlayerStanding]] = {}
    for player in players:
        key = commander_key(extract_commander_names(player.decklist_text or ""))
        groups.setdefault(key, []).append(player)
    return groups


def resolve_decklist_source(player: PlayerStanding) -> tuple[str | None, str | None]:
    """
    Split a player's list into (text, url).

    An explicit imported-from link keeps the text and adds the link. A
    decklist field that is itself a URL becomes the link and no text.
    """
    text = player.decklist_text
    if player.imported_from_url:
        return text, player.imported_from_url
    if text and looks_like_url(text):
        return None, text.strip()
    return text, None


class TournamentSelector:
    """
    Chooses a random eligible player from recent competitive tournaments.

    Args:
        gateway: Tournament data source
        rng: Random source for shuffling and picking; seed it in tests
        max_attempts: Tournaments to try before giving up
    """

    def __init__(
        self,
        gateway: TournamentGateway,
        rng: random.Random | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self.gateway = gateway
        self.rng = rng or random.Random()
        self.max_attempts = (
            settings.max_tournament_attempts if max_attempts is None else max_attempts
        )

    def select_random_commander_tournament(
        self, excluded_commander_keys: Iterable[str] = ()
    ) -> SelectionResult:
        """
        Pick a tournament player whose commander is not excluded.

        Args:
            excluded_commander_keys: Commander keys that must not be chosen

        Returns:
            SelectionSuccess, NoCandidates, or NoValidTournaments.
            Candidate listing errors propagate; per-tournament errors do not.
        """
        excluded = set(excluded_commander_keys)

        candidates = self.gateway.list_candidate_tournaments()
        if not candidates:
            return NoCandidates()

        candidates = list(candidates)
        self.rng.shuffle(candidates)
        attempts = min(self.max_attempts, len(candidates))

        for index, candidate in enumerate(candidates[:attempts]):
            result = self._try_candidate(candidate, excluded, attempt=index + 1)
            if result is not None:
                return result

        logger.warning("No usable tournament after %d attempts", attempts)
        return NoValidTournaments(
            tournaments_checked=attempts,
            checked_ids=[c.id for c in candidates[:attempts]],
        )

    def _try_candidate(
        self,
        candidate: TournamentCandidate,
        excluded: set[str],
        attempt: int,
    ) -> SelectionSuccess | None:
        if not is_valid_candidate(candidate):
            logger.info("Skipping invalid tournament entry %r", candidate)
            return None

        try:
            tournament = self.gateway.fetch_tournament(candidate.id, candidate.name)
        except Exception as e:
            logger.warning("Failed to fetch tournament %s: %s", candidate.id, e)
            return None

        if not tournament.standings:
            logger.info("Tournament %s has no standings", candidate.id)
            return None

        eligible = [p for p in tournament.standings if p.is_eligible]
        if not eligible:
            logger.info("Tournament %s has no players with decklists", candidate.id)
            return None

        groups = {
            key: players
            for key, players in group_by_commander(eligible).items()
            if key not in excluded
        }
        if not groups:
            logger.info("Tournament %s only has excluded commanders", candidate.id)
            return None

        # Sorted so a seeded rng gives the same pick regardless of dict order
        key = self.rng.choice(sorted(groups))
        player = self.rng.choice(groups[key])
        text, url = resolve_decklist_source(player)

        logger.info(
            "Selected %s (%s) from %s, %d commander groups",
            player.name,
            key,
            candidate.name,
            len(groups),
        )
        return SelectionSuccess(
            tournament_id=candidate.id,
            tournament_name=candidate.name,
            player_name=player.name,
            player_standing=player.standing,
            total_participants=tournament.total_participants,
            decklist_text=text,
            decklist_url=url,
            commander_key=key,
            attempt=attempt,
        )
