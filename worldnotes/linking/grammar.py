"""
Reference grammar for notable references inside note content.

A reference token looks like:

    @[Bob](@5)      → Character 5
    :[Sword](:9)    → Item 9
    #[Harbor](#12)  → Location 12

The trigger appears at both ends of the token. The name between the square
brackets is free text (anything except "]") and carries no meaning for
linking; only the digits after the second trigger identify the notable.

Pure functions, no state.
"""

import re
from functools import lru_cache
from typing import Pattern

from worldnotes.types import NotableKind


@lru_cache(maxsize=None)
def token_pattern(trigger: str) -> Pattern[str]:
    """
    Return the compiled token pattern for a trigger character.

    The single capture group holds the id digits. ASCII digits only.
    """
    t = re.escape(trigger)
    return re.compile(t + r"\[[^\]]+\]\(" + t + r"([0-9]+)\)")


def kind_pattern(kind: NotableKind) -> Pattern[str]:
    return token_pattern(kind.trigger)


@lru_cache(maxsize=None)
def any_token_pattern() -> Pattern[str]:
    """Return one pattern matching a token of any kind, scanned in a single pass."""
    return re.compile("|".join(kind_pattern(kind).pattern for kind in NotableKind))


def extract_id(token: str, trigger: str) -> str:
    """
    Return the id digit string of a well-formed token.

    Raises
    ------
    ValueError
        If `token` is not exactly one well-formed token for `trigger`.
    """
    match = token_pattern(trigger).fullmatch(token)
    if match is None:
        raise ValueError(f"Not a {trigger!r} reference token: {token!r}")
    return match.group(1)


def text_code(kind: NotableKind, name: str, notable_id: int) -> str:
    """Render the reference token that points at a notable."""
    return f"{kind.trigger}[{name}]({kind.trigger}{notable_id})"
