from commanderdle.parsers.decklist import (
    extract_commander_names,
    format_decklist,
    parse_decklist,
    parse_line,
)

__all__ = [
    "extract_commander_names",
    "format_decklist",
    "parse_decklist",
    "parse_line",
]
