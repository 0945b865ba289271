"""
Scryfall card type lookup.

Resolves card names to display categories through the batch
/cards/collection endpoint (max 75 identifiers per request), pausing
between batches to stay inside Scryfall's rate-limit guidance.

API docs: https://scryfall.com/docs/api/cards/collection
"""

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

from commanderdle.config import SCRYFALL_MAX_IDENTIFIERS, settings
from commanderdle.models.decklist import OTHER, front_face
from commanderdle.models.failure import MalformedResponse
from commanderdle.services.http_client import HttpRetryClient

logger = logging.getLogger(__name__)

COLLECTION_ENDPOINT = "/cards/collection"

# Priority order: the first keyword found in the type line wins.
# "Artifact Creature" -> Creatures, "Artifact Land" -> Lands.
TYPE_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("land", "Lands"),
    ("creature", "Creatures"),
    ("planeswalker", "Planeswalkers"),
    ("battle", "Battles"),
    ("instant", "Instants"),
    ("sorcery", "Sorceries"),
    ("enchantment", "Enchantments"),
    ("artifact", "Artifacts"),
)


def categorize_type(type_line: str) -> str:
    """
    Map a Scryfall type line to a display category.

    Examples:
        "Legendary Creature — Human Wizard" -> "Creatures"
        "Artifact Creature — Construct"     -> "Creatures"
        "Land"                              -> "Lands"
        "Kindred Tribal"                    -> "Other"
    """
    lowered = (type_line or "").lower()
    for keyword, category in TYPE_CATEGORIES:
        if keyword in lowered:
            return category
    return OTHER


def card_type_line(card: dict[str, Any]) -> str:
    """Front face type line for multi-faced cards, top-level type line otherwise."""
    faces = card.get("card_faces")
    if isinstance(faces, list) and faces and isinstance(faces[0], dict):
        return str(faces[0].get("type_line") or "")
    return str(card.get("type_line") or "")


def chunked(names: list[str], size: int) -> list[list[str]]:
    return [names[i : i + size] for i in range(0, len(names), size)]


class CardTypeResolver:
    """
    Batch card-name -> category lookups against Scryfall.

    Args:
        http: Client pointed at the Scryfall API
        batch_size: Names per request, capped at Scryfall's limit
        batch_delay_s: Pause between consecutive requests
        sleep: Blocking sleep; tests pass a no-op
    """

    def __init__(
        self,
        http: HttpRetryClient,
        batch_size: int | None = None,
        batch_delay_s: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.http = http
        if batch_size is None:
            batch_size = settings.scryfall_batch_size
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.batch_size = min(batch_size, SCRYFALL_MAX_IDENTIFIERS)
        self.batch_delay_s = (
            settings.scryfall_batch_delay_s if batch_delay_s is None else batch_delay_s
        )
        self._sleep = sleep

    def resolve_categories(self, names: Iterable[str]) -> dict[str, str]:
        """
        Look up the category of every name.

        Names Scryfall does not know are absent from the result; callers
        default them to "Other".

        Raises:
            NetworkExhausted: If Scryfall stays unreachable
            MalformedResponse: If a batch answer is not an object with a card list
        """
        unique = sorted({n for n in names if n and n.strip()})
        categories: dict[str, str] = {}

        for i, batch in enumerate(chunked(unique, self.batch_size)):
            if i > 0:
                self._sleep(self.batch_delay_s)

            data = self.http.post(
                COLLECTION_ENDPOINT,
                {"identifiers": [{"name": name} for name in batch]},
            )
            if not isinstance(data, dict):
                raise MalformedResponse(COLLECTION_ENDPOINT, "Expected an object")

            cards = data.get("data", [])
            if not isinstance(cards, list):
                raise MalformedResponse(
                    COLLECTION_ENDPOINT, f"Expected a card list, got {type(cards).__name__}"
                )

            for card in cards:
                if not isinstance(card, dict) or not card.get("name"):
                    continue
                categories[front_face(str(card["name"]))] = categorize_type(card_type_line(card))

            not_found = data.get("not_found")
            if isinstance(not_found, list) and not_found:
                logger.info("Scryfall did not recognize %d card(s)", len(not_found))

        return categories
