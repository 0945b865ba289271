from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

COMMANDERS = "Commanders"
MAINBOARD = "Mainboard"
SIDEBOARD = "Sideboard"
OTHER = "Other"

# Canonical display order of a categorized decklist
SECTION_ORDER: tuple[str, ...] = (
    COMMANDERS,
    "Creatures",
    "Planeswalkers",
    "Battles",
    "Instants",
    "Sorceries",
    "Enchantments",
    "Artifacts",
    "Lands",
    OTHER,
)

DFC_SEPARATOR = " // "

COMMANDER_KEY_SEPARATOR = " / "

# Key for players whose list has no readable Commanders section
UNKNOWN_COMMANDER_KEY = "Unknown"


@dataclass(frozen=True, slots=True)
class CardEntry:
    """
    One line of a decklist.

    Attributes:
        quantity: Number of copies (always positive)
        name: Front-face card name, never containing " // "
    """

    quantity: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"quantity": self.quantity, "name": self.name}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CardEntry":
        return cls(quantity=int(data["quantity"]), name=str(data["name"]))


# Section name -> cards, in insertion (raw) or canonical (categorized) order
Decklist = dict[str, list[CardEntry]]


def front_face(name: str) -> str:
    """Strip the back face from a double-faced or split card name."""
    return name.split(DFC_SEPARATOR, 1)[0]


def commander_key(names: Iterable[str]) -> str:
    """
    Order-independent identifier for a commander or partner pair.

    Names are sorted alphabetically and joined with " / ". An empty
    input yields the "Unknown" sentinel.
    """
    ordered = sorted(names)
    if not ordered:
        return UNKNOWN_COMMANDER_KEY
    return COMMANDER_KEY_SEPARATOR.join(ordered)


def commander_key_from_decklist(decklist: Mapping[str, Sequence[CardEntry]]) -> str:
    """Commander key of a finished puzzle, taken from its Commanders section."""
    return commander_key(card.name for card in decklist.get(COMMANDERS, []))


def sort_sections(decklist: Mapping[str, Sequence[CardEntry]]) -> Decklist:
    """
    Return the decklist with sections in canonical order.

    Sections outside SECTION_ORDER are dropped; empty sections are omitted.
    """
    return {
        section: list(decklist[section])
        for section in SECTION_ORDER
        if decklist.get(section)
    }


def decklist_to_json(decklist: Mapping[str, Sequence[CardEntry]]) -> dict[str, list[dict[str, Any]]]:
    """Serialize a decklist for JSON storage or an API payload."""
    return {section: [card.to_dict() for card in cards] for section, cards in decklist.items()}


def decklist_from_json(data: Mapping[str, Sequence[Mapping[str, Any]]]) -> Decklist:
    """Inverse of decklist_to_json."""
    return {section: [CardEntry.from_dict(card) for card in cards] for section, cards in data.items()}
