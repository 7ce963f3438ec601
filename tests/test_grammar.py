"""
Unit tests for the reference grammar and the reference scanner.

These tests validate:

    • the bit-exact token format for each notable kind
    • id extraction from well-formed tokens only
    • scanning order, duplicates, and empty content
"""

import pytest

from worldnotes.linking.grammar import extract_id, text_code, token_pattern
from worldnotes.linking.scanner import scan_references, scan_tokens
from worldnotes.types import NotableKind


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


def test_each_kind_has_its_own_trigger() -> None:
    assert NotableKind.CHARACTER.trigger == "@"
    assert NotableKind.ITEM.trigger == ":"
    assert NotableKind.LOCATION.trigger == "#"
    assert NotableKind.from_trigger("#") is NotableKind.LOCATION


def test_unknown_kind_is_rejected_at_construction() -> None:
    with pytest.raises(ValueError):
        NotableKind("Weapon")

    with pytest.raises(ValueError):
        NotableKind.from_trigger("!")


# ---------------------------------------------------------------------------
# Token pattern
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "token, trigger, expected_id",
    [
        ("@[Bob](@5)", "@", "5"),
        (":[Sword](:9)", ":", "9"),
        ("#[The Docks](#123)", "#", "123"),
        ("@[Bob (the elder)](@42)", "@", "42"),
    ],
)
def test_extract_id_from_well_formed_tokens(token: str, trigger: str, expected_id: str) -> None:
    assert token_pattern(trigger).fullmatch(token)
    assert extract_id(token, trigger) == expected_id


@pytest.mark.parametrize(
    "token, trigger",
    [
        ("@[Bob](:5)", "@"),  # mismatched trigger inside the parentheses
        ("@[](@5)", "@"),  # empty name
        ("@[Bob](@)", "@"),  # no digits
        ("@[Bob](@5a)", "@"),  # non-digit id
        ("@[Bob](5)", "@"),  # missing second trigger
        (":[Sword](:9)", "@"),  # wrong kind
    ],
)
def test_extract_id_rejects_malformed_tokens(token: str, trigger: str) -> None:
    with pytest.raises(ValueError):
        extract_id(token, trigger)


def test_text_code_round_trips_through_the_pattern() -> None:
    code = text_code(NotableKind.ITEM, "Sword", 9)

    assert code == ":[Sword](:9)"
    assert extract_id(code, ":") == "9"


def test_non_ascii_digits_are_not_ids() -> None:
    assert token_pattern("@").search("@[Bob](@٥)") is None


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


def test_scan_tokens_preserves_order_and_duplicates() -> None:
    content = ":[Sword](:9) then :[Shield](:12) then :[Sword](:9)"

    tokens = list(scan_tokens(content, NotableKind.ITEM))

    assert tokens == [
        (":[Sword](:9)", "9"),
        (":[Shield](:12)", "12"),
        (":[Sword](:9)", "9"),
    ]


def test_scan_tokens_is_restartable() -> None:
    content = "Say hi to @[Bob](@5)"

    first = list(scan_tokens(content, NotableKind.CHARACTER))
    second = list(scan_tokens(content, NotableKind.CHARACTER))

    assert first == second == [("@[Bob](@5)", "5")]


@pytest.mark.parametrize("content", [None, ""])
def test_empty_content_yields_no_tokens(content) -> None:
    refs = scan_references(content)

    assert set(refs) == set(NotableKind)
    assert all(tokens == [] for tokens in refs.values())


def test_scan_references_separates_kinds() -> None:
    content = "@[Bob](@5) carried :[Sword](:9) to #[The Docks](#2)."

    refs = scan_references(content)

    assert refs[NotableKind.CHARACTER] == [("@[Bob](@5)", "5")]
    assert refs[NotableKind.ITEM] == [(":[Sword](:9)", "9")]
    assert refs[NotableKind.LOCATION] == [("#[The Docks](#2)", "2")]


def test_multi_digit_ids_are_captured_whole() -> None:
    refs = scan_references("#[Harbor](#10234)")

    assert refs[NotableKind.LOCATION] == [("#[Harbor](#10234)", "10234")]
