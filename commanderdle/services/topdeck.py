"""
Topdeck.gg tournament gateway.

Discovery is two-stage to keep bandwidth down:
1. One filtered search returns lightweight {TID, tournamentName} rows
2. Full results (standings + decklists) are fetched only for the
   tournaments the selector actually tries

API docs: https://topdeck.gg/docs/tournaments-v2
"""

import logging
from typing import Any

from commanderdle.config import settings
from commanderdle.models.failure import MalformedResponse
from commanderdle.models.tournament import PlayerStanding, TournamentCandidate, TournamentResult
from commanderdle.services.http_client import HttpRetryClient

logger = logging.getLogger(__name__)

TOURNAMENTS_ENDPOINT = "/v2/tournaments"


def has_competitive_marker(name: str | None, marker: str | None = None) -> bool:
    """True if a tournament name contains the marker, ignoring case."""
    marker = (marker or settings.competitive_marker).lower()
    return marker in (name or "").lower()


def build_search_payload() -> dict[str, Any]:
    """Filtered tournament search body (lookback in days, not a count)."""
    return {
        "last": settings.tournament_lookback_days,
        "columns": [],
        "game": settings.tournament_game,
        "format": settings.tournament_format,
        "participantMin": settings.tournament_min_participants,
    }


def parse_candidate(row: Any) -> TournamentCandidate | None:
    """Convert a search row to a candidate. Rows without an object shape are dropped."""
    if not isinstance(row, dict):
        return None
    return TournamentCandidate(
        id=str(row.get("TID") or "").strip(),
        name=str(row.get("tournamentName") or "").strip(),
    )


def _imported_from(player: dict[str, Any]) -> str | None:
    deck_obj = player.get("deckObj")
    if not isinstance(deck_obj, dict):
        return None
    metadata = deck_obj.get("metadata")
    if not isinstance(metadata, dict):
        return None
    url = metadata.get("importedFrom")
    return url.strip() if isinstance(url, str) and url.strip() else None


def parse_standing(player: Any) -> PlayerStanding | None:
    """Convert one standings row. Rows without an object shape are dropped."""
    if not isinstance(player, dict):
        return None

    standing = player.get("standing")
    decklist = player.get("decklist")

    return PlayerStanding(
        name=str(player.get("name") or ""),
        standing=standing if isinstance(standing, int) else None,
        decklist_text=decklist if isinstance(decklist, str) else None,
        imported_from_url=_imported_from(player),
    )


class TournamentGateway:
    """Reads tournament listings and results through an HttpRetryClient."""

    def __init__(self, http: HttpRetryClient) -> None:
        self.http = http

    def list_candidate_tournaments(self) -> list[TournamentCandidate]:
        """
        Search recent Commander tournaments and keep competitive ones.

        Returns:
            Candidates whose name contains the competitive marker.
            Empty when upstream has nothing (not an error).

        Raises:
            NetworkExhausted: If the search endpoint stays unreachable
            MalformedResponse: If the search answer is not JSON
        """
        rows = self.http.post(TOURNAMENTS_ENDPOINT, build_search_payload())
        if not rows or not isinstance(rows, list):
            logger.info("Tournament search returned no rows")
            return []

        candidates = [
            candidate
            for candidate in (parse_candidate(row) for row in rows)
            if candidate is not None and has_competitive_marker(candidate.name)
        ]
        logger.info("Tournament search: %d rows, %d competitive", len(rows), len(candidates))
        return candidates

    def fetch_tournament(self, tournament_id: str, name: str = "") -> TournamentResult:
        """
        Fetch full standings for one tournament.

        Args:
            tournament_id: Topdeck TID
            name: Fallback display name when the payload carries none

        Raises:
            NetworkExhausted: If the endpoint stays unreachable
            MalformedResponse: If the body is not a JSON object
        """
        endpoint = f"{TOURNAMENTS_ENDPOINT}/{tournament_id}"
        data = self.http.get(endpoint)
        if not isinstance(data, dict):
            raise MalformedResponse(endpoint, f"Expected an object, got {type(data).__name__}")

        raw_standings = data.get("standings")
        if not isinstance(raw_standings, list):
            raw_standings = []
        standings = [s for s in (parse_standing(p) for p in raw_standings) if s is not None]
        if len(standings) < len(raw_standings):
            logger.info(
                "Tournament %s: dropped %d unreadable standings rows",
                tournament_id,
                len(raw_standings) - len(standings),
            )

        return TournamentResult(
            id=tournament_id,
            name=str(data.get("tournamentName") or data.get("name") or name),
            standings=standings,
            participant_count=len(raw_standings),
        )
