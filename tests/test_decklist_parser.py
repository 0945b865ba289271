"""Tests for the Topdeck decklist parser."""

from commanderdle.models.decklist import CardEntry, commander_key
from commanderdle.parsers.decklist import (
    SectionHeader,
    extract_commander_names,
    format_decklist,
    parse_decklist,
    parse_line,
    unescape,
)


class TestParseLine:
    def test_section_header(self) -> None:
        assert parse_line("~~Commanders~~") == SectionHeader("Commanders")

    def test_section_header_label_is_trimmed(self) -> None:
        assert parse_line("~~ Companion ~~") == SectionHeader("Companion")

    def test_known_header_casing_is_normalized(self) -> None:
        assert parse_line("~~commanders~~") == SectionHeader("Commanders")
        assert parse_line("~~MAINBOARD~~") == SectionHeader("Mainboard")

    def test_card_line(self) -> None:
        assert parse_line("4 Lightning Bolt") == CardEntry(4, "Lightning Bolt")

    def test_double_faced_card_keeps_front_face(self) -> None:
        entry = parse_line("1 Delver of Secrets // Insectile Aberration")

        assert entry == CardEntry(1, "Delver of Secrets")

    def test_backslash_escapes_removed(self) -> None:
        assert parse_line("1 Kraum, Ludevic\\'s Opus") == CardEntry(1, "Kraum, Ludevic's Opus")

    def test_blank_and_unrecognized_lines(self) -> None:
        assert parse_line("") is None
        assert parse_line("   ") is None
        assert parse_line("Deck exported from somewhere") is None
        assert parse_line("~~~~") is None

    def test_zero_quantity_ignored(self) -> None:
        assert parse_line("0 Sol Ring") is None


class TestUnescape:
    def test_removes_single_backslashes(self) -> None:
        assert unescape('Say \\"hi\\"') == 'Say "hi"'

    def test_double_backslash_becomes_single(self) -> None:
        assert unescape("a\\\\b") == "a\\b"


class TestParseDecklist:
    def test_sections(self, sample_decklist: str) -> None:
        decklist = parse_decklist(sample_decklist)

        assert list(decklist) == ["Commanders", "Mainboard", "Sideboard"]
        assert decklist["Commanders"] == [
            CardEntry(1, "Tymna the Weaver"),
            CardEntry(1, "Kraum, Ludevic's Opus"),
        ]
        assert [c.name for c in decklist["Mainboard"]] == [
            "Sol Ring",
            "Arid Mesa",
            "Delver of Secrets",
        ]

    def test_default_section_is_mainboard(self) -> None:
        decklist = parse_decklist("1 Sol Ring\n1 Mana Crypt")

        assert list(decklist) == ["Mainboard"]
        assert len(decklist["Mainboard"]) == 2

    def test_literal_escaped_newlines(self) -> None:
        raw = "~~Commanders~~\\n1 Najeela, the Blade-Blossom\\n~~Mainboard~~\\n1 Sol Ring"

        decklist = parse_decklist(raw)

        assert decklist["Commanders"] == [CardEntry(1, "Najeela, the Blade-Blossom")]
        assert decklist["Mainboard"] == [CardEntry(1, "Sol Ring")]

    def test_windows_line_endings(self) -> None:
        decklist = parse_decklist("~~Mainboard~~\r\n1 Sol Ring\r\n1 Mana Vault\r\n")

        assert [c.name for c in decklist["Mainboard"]] == ["Sol Ring", "Mana Vault"]

    def test_custom_section(self) -> None:
        decklist = parse_decklist("~~Maybeboard~~\n1 Mox Opal")

        assert decklist == {"Maybeboard": [CardEntry(1, "Mox Opal")]}

    def test_empty_input(self) -> None:
        assert parse_decklist("") == {}
        assert parse_decklist("\n\n") == {}

    def test_reparsing_formatted_output_is_stable(self, sample_decklist: str) -> None:
        """Re-serialized sections parse back to the same cards."""
        decklist = parse_decklist(sample_decklist)

        assert parse_decklist(format_decklist(decklist)) == decklist


class TestExtractCommanderNames:
    def test_partner_pair(self, sample_decklist: str) -> None:
        names = extract_commander_names(sample_decklist)

        assert names == ["Tymna the Weaver", "Kraum, Ludevic's Opus"]

    def test_commander_key_is_alphabetical(self, sample_decklist: str) -> None:
        key = commander_key(extract_commander_names(sample_decklist))

        assert key == "Kraum, Ludevic's Opus / Tymna the Weaver"

    def test_key_ignores_input_order(self) -> None:
        forward = "~~Commanders~~\n1 Tymna the Weaver\n1 Kraum, Ludevic's Opus"
        backward = "~~Commanders~~\n1 Kraum, Ludevic's Opus\n1 Tymna the Weaver"

        assert commander_key(extract_commander_names(forward)) == commander_key(
            extract_commander_names(backward)
        )

    def test_header_case_insensitive(self) -> None:
        assert extract_commander_names("~~COMMANDERS~~\n1 Rograkh, Son of Rohgahh") == [
            "Rograkh, Son of Rohgahh"
        ]

    def test_no_commanders_section(self) -> None:
        names = extract_commander_names("1 Sol Ring")

        assert names == []
        assert commander_key(names) == "Unknown"
