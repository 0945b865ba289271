from commanderdle.models.decklist import (
    SECTION_ORDER,
    UNKNOWN_COMMANDER_KEY,
    CardEntry,
    Decklist,
    commander_key,
    commander_key_from_decklist,
    sort_sections,
)
from commanderdle.models.failure import (
    ApiResponse,
    FailureDetail,
    FailureKind,
    GenerationFailure,
    KnownError,
    MalformedResponse,
    NetworkExhausted,
    OutcomeType,
)
from commanderdle.models.game import GameMode, PuzzleGame
from commanderdle.models.selection import (
    NoCandidates,
    NoValidTournaments,
    SelectionResult,
    SelectionSuccess,
)
from commanderdle.models.tournament import PlayerStanding, TournamentCandidate, TournamentResult

__all__ = [
    "ApiResponse",
    "CardEntry",
    "Decklist",
    "FailureDetail",
    "FailureKind",
    "GameMode",
    "GenerationFailure",
    "KnownError",
    "MalformedResponse",
    "NetworkExhausted",
    "NoCandidates",
    "NoValidTournaments",
    "OutcomeType",
    "PlayerStanding",
    "PuzzleGame",
    "SECTION_ORDER",
    "SelectionResult",
    "SelectionSuccess",
    "TournamentCandidate",
    "TournamentResult",
    "UNKNOWN_COMMANDER_KEY",
    "commander_key",
    "commander_key_from_decklist",
    "sort_sections",
]
