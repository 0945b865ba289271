"""
Guess matching and reveal state for a puzzle session.

A guess is accepted if, after normalization, it equals a commander's
name or is within a small edit distance of it (a quarter of the target
length, at least one edit). Each wrong guess reveals one more card.
"""

import random
import re
from dataclasses import dataclass, field

from rapidfuzz.distance import Levenshtein

from commanderdle.models.decklist import COMMANDERS, Decklist

NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9\s]")

TOLERANCE_RATIO = 0.25


def normalize_guess(text: str) -> str:
    """Lowercase, drop punctuation, collapse whitespace."""
    return " ".join(NON_ALNUM_PATTERN.sub("", (text or "").lower()).split())


def max_distance(target: str) -> int:
    """Edit budget for a normalized target name."""
    return max(1, int(TOLERANCE_RATIO * len(target)))


def is_correct_guess(guess: str, target: str) -> bool:
    """
    True if guess matches target closely enough.

    Example:
        "atraxa praetors voice" vs "Atraxa, Praetors' Voice" -> True
        "atraxa" vs "Atraxa, Praetors' Voice" -> False
    """
    normalized_guess = normalize_guess(guess)
    normalized_target = normalize_guess(target)
    if not normalized_guess:
        return False
    if normalized_guess == normalized_target:
        return True

    budget = max_distance(normalized_target)
    return Levenshtein.distance(normalized_guess, normalized_target, score_cutoff=budget) <= budget


@dataclass
class GuessSession:
    """
    Reveal state of one player working on one puzzle.

    Attributes:
        commanders: Hidden answer names
        card_pool: Non-commander card names, revealed in order from the back
        revealed_commanders: Commanders already guessed
        revealed_cards: Cards shown after misses
        misses: Wrong guesses so far
        conceded: Player gave up and everything is shown
    """

    commanders: list[str]
    card_pool: list[str]
    hard_mode: bool = False
    revealed_commanders: set[str] = field(default_factory=set)
    revealed_cards: list[str] = field(default_factory=list)
    misses: int = 0
    conceded: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def from_decklist(
        cls,
        decklist: Decklist,
        hard_mode: bool = False,
        rng: random.Random | None = None,
    ) -> "GuessSession":
        """
        Start a session for a categorized decklist.

        Hard mode shuffles all non-commander cards into one pool up front.
        Normal mode keeps the flattened pool and draws uniformly on each miss.
        """
        rng = rng or random.Random()
        commanders = [card.name for card in decklist.get(COMMANDERS, [])]
        pool = [
            card.name
            for section, cards in decklist.items()
            if section != COMMANDERS
            for card in cards
        ]
        if hard_mode:
            rng.shuffle(pool)
        return cls(commanders=commanders, card_pool=pool, hard_mode=hard_mode, rng=rng)

    @property
    def is_won(self) -> bool:
        return bool(self.commanders) and self.revealed_commanders >= set(self.commanders)

    @property
    def is_over(self) -> bool:
        return self.is_won or self.conceded

    def guess(self, text: str) -> str | None:
        """
        Submit a guess.

        Returns:
            The matched commander name, or None on a miss (which reveals a card).
        """
        if self.is_over:
            return None

        for name in self.commanders:
            if name not in self.revealed_commanders and is_correct_guess(text, name):
                self.revealed_commanders.add(name)
                return name

        self.misses += 1
        self._reveal_card()
        return None

    def concede(self) -> None:
        """Give up: reveal every commander and card."""
        self.conceded = True
        self.revealed_commanders = set(self.commanders)
        self.revealed_cards.extend(self.card_pool)
        self.card_pool = []

    def _reveal_card(self) -> str | None:
        if not self.card_pool:
            return None
        if self.hard_mode:
            card = self.card_pool.pop()
        else:
            card = self.card_pool.pop(self.rng.randrange(len(self.card_pool)))
        self.revealed_cards.append(card)
        return card
