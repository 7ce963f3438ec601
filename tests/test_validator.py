"""
Unit tests for the content validator.

Brackets are allowed only when they belong to a recognized reference token.
"""

import pytest

from worldnotes.linking.validator import has_stray_brackets, strip_tokens, validate_content

BRACKET_ERROR = "Content cannot include square bracket characters"


def test_plain_content_is_valid() -> None:
    assert validate_content("Nothing to see here.") == []


def test_content_with_valid_tokens_is_valid() -> None:
    content = "Say hi to @[Bob](@5) at #[The Docks](#2) with :[Sword](:9)"

    assert validate_content(content) == []
    assert strip_tokens(content) == "Say hi to  at  with "


def test_stray_bracket_without_tokens_is_rejected() -> None:
    errors = validate_content("A[weird] bracket")

    assert any("cannot include square bracket characters" in e for e in errors)


@pytest.mark.parametrize(
    "content",
    [
        "Say hi to @[Bob](@5) and ]",
        "Unterminated @[Bob(@5)",
        "Wrong trigger @[Bob](:5)",
        "Missing id @[Bob](@)",
        "Lonely [ bracket",
    ],
)
def test_malformed_references_leave_stray_brackets(content: str) -> None:
    assert has_stray_brackets(content)
    assert BRACKET_ERROR in validate_content(content)


def test_blank_content_is_rejected() -> None:
    errors = validate_content(None)

    assert "Content can't be blank" in errors
    assert "Content is too short (minimum is 5 characters)" in errors


def test_short_and_long_content() -> None:
    assert validate_content("1") == ["Content is too short (minimum is 5 characters)"]
    assert validate_content("1" * 1001) == ["Content is too long (maximum is 1000 characters)"]
    assert validate_content("1" * 1000) == []


def test_all_content_errors_are_collected() -> None:
    errors = validate_content("[a]")

    assert errors == [
        "Content is too short (minimum is 5 characters)",
        BRACKET_ERROR,
    ]


def test_token_nested_in_another_token_name_is_rejected() -> None:
    content = "Nested :[a@[b](@1)](:2) reference"

    assert strip_tokens(content) == "Nested :[a](:2) reference"
    assert BRACKET_ERROR in validate_content(content)


def test_adjacent_tokens_are_all_removed() -> None:
    assert strip_tokens("@[a](@1):[b](:2)#[c](#3)") == ""
