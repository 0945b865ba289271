"""
Parser for Topdeck free-text decklists.

Format (one entry per line):
    ~~Commanders~~
    1 Tymna the Weaver
    1 Kraum, Ludevic's Opus
    ~~Mainboard~~
    1 Sol Ring
    1 Delver of Secrets // Insectile Aberration

Lines may be separated by real line breaks or by the literal two-character
sequence "\\n" (Topdeck returns both). Cards before any header belong to
Mainboard. Anything that is neither a header nor "<qty> <name>" is
ignored, since tournament software emits inconsistent free text.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from commanderdle.models.decklist import (
    COMMANDERS,
    MAINBOARD,
    SIDEBOARD,
    CardEntry,
    Decklist,
    front_face,
)

# Pattern: "~~Commanders~~" -> (Commanders)
SECTION_HEADER_PATTERN = re.compile(r"^~~(.+)~~$")

# Pattern: "4 Lightning Bolt" -> (4, Lightning Bolt)
CARD_LINE_PATTERN = re.compile(r"^(\d+)\s+(.+)$")

# Splits on real line breaks and on an escaped "\n" left in the JSON text
LINE_SPLIT_PATTERN = re.compile(r"\r\n|\r|\n|\\n")

ESCAPE_PATTERN = re.compile(r"\\(.?)", re.DOTALL)

# Headers whose casing is normalized so lookups never depend on it
KNOWN_SECTIONS = {name.lower(): name for name in (COMMANDERS, MAINBOARD, SIDEBOARD)}


@dataclass(frozen=True, slots=True)
class SectionHeader:
    """A "~~label~~" line."""

    name: str


def unescape(text: str) -> str:
    """Remove backslash escapes: "Kraum, Ludevic\\'s Opus" -> "Kraum, Ludevic's Opus"."""
    return ESCAPE_PATTERN.sub(r"\1", text)


def split_lines(raw: str) -> list[str]:
    return LINE_SPLIT_PATTERN.split(raw or "")


def parse_line(line: str) -> SectionHeader | CardEntry | None:
    """
    Classify a single decklist line.

    Returns:
        SectionHeader for "~~label~~", CardEntry for "<qty> <name>",
        None for blank or unrecognized lines.
    """
    line = line.strip()
    if not line:
        return None

    match = SECTION_HEADER_PATTERN.match(line)
    if match:
        label = match.group(1).strip()
        if not label:
            return None
        return SectionHeader(KNOWN_SECTIONS.get(label.lower(), label))

    match = CARD_LINE_PATTERN.match(line)
    if match:
        quantity, name = match.groups()
        name = front_face(unescape(name)).strip()
        if int(quantity) < 1 or not name:
            return None
        return CardEntry(quantity=int(quantity), name=name)

    return None


def iter_cards(raw: str) -> Iterator[tuple[str, CardEntry]]:
    """Yield (section, card) pairs in list order."""
    section = MAINBOARD
    for line in split_lines(raw):
        parsed = parse_line(line)
        if isinstance(parsed, SectionHeader):
            section = parsed.name
        elif parsed is not None:
            yield section, parsed


def parse_decklist(raw: str) -> Decklist:
    """
    Parse raw decklist text into its raw sections.

    Args:
        raw: Decklist text as returned by Topdeck

    Returns:
        Section name -> cards, sections in first-seen order.
        Empty dict if the text contains no card lines.
    """
    decklist: Decklist = {}
    for section, card in iter_cards(raw):
        decklist.setdefault(section, []).append(card)
    return decklist


def extract_commander_names(raw: str) -> list[str]:
    """Names listed under the Commanders header, in list order."""
    return [card.name for section, card in iter_cards(raw) if section == COMMANDERS]


def format_decklist(decklist: Decklist) -> str:
    """Render sections back to "~~Section~~" text."""
    lines: list[str] = []
    for section, cards in decklist.items():
        lines.append(f"~~{section}~~")
        lines.extend(f"{card.quantity} {card.name}" for card in cards)
    return "\n".join(lines)
