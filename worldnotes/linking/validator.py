"""
Content validator.

Checks the note content itself before any lookup happens:

    • presence and length bounds
    • no "[" or "]" outside recognized reference tokens

Brackets consumed by a well-formed token of any kind are allowed. Every other
bracket, including the remains of a malformed or unterminated reference, is
rejected.
"""

from typing import List, Optional

from worldnotes.errors import ContentFormatError
from worldnotes.linking.grammar import any_token_pattern

CONTENT_MIN_LENGTH = 5
CONTENT_MAX_LENGTH = 1000


def strip_tokens(content: str) -> str:
    """
    Return a working copy of `content` with every recognized token removed.

    All kinds are removed in one left-to-right pass, so removing a token
    never joins its neighbours into a new token. Brackets of a token nested
    in another token's name stay behind and are reported as stray.
    """
    return any_token_pattern().sub("", content)


def has_stray_brackets(content: Optional[str]) -> bool:
    if not content:
        return False
    remaining = strip_tokens(content)
    return "[" in remaining or "]" in remaining


def validate_content(content: Optional[str]) -> List[str]:
    """
    Validate note content and return every error message found.

    An empty list means the content is acceptable.
    """
    errors: List[str] = []

    if content is None or not content.strip():
        errors.append("Content can't be blank")

    length = len(content or "")
    if length < CONTENT_MIN_LENGTH:
        errors.append(f"Content is too short (minimum is {CONTENT_MIN_LENGTH} characters)")
    elif length > CONTENT_MAX_LENGTH:
        errors.append(f"Content is too long (maximum is {CONTENT_MAX_LENGTH} characters)")

    if has_stray_brackets(content):
        errors.append(str(ContentFormatError()))

    return errors
