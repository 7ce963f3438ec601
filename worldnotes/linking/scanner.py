"""
Reference scanner.

Extracts raw reference tokens from note content, per notable kind, in the
order they appear. Duplicates are preserved here; deduplication by notable
identity happens in the reconciler.

Scanning is a pure re-computation over the whole string on every call.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from worldnotes.linking.grammar import kind_pattern
from worldnotes.types import NotableKind

# (raw token, id digit string)
ScannedToken = Tuple[str, str]


def scan_tokens(content: Optional[str], kind: NotableKind) -> Iterator[ScannedToken]:
    """
    Lazily yield every token of one kind found in `content`.

    Each call starts a fresh scan, so the result can be iterated again by
    calling the function again. Empty or missing content yields nothing.
    """
    if not content:
        return

    for match in kind_pattern(kind).finditer(content):
        yield match.group(0), match.group(1)


def scan_references(content: Optional[str]) -> Dict[NotableKind, List[ScannedToken]]:
    """
    Scan content for every notable kind.

    Returns:
        A mapping with an entry for every NotableKind (possibly an empty
        list), each holding the (token, id) pairs in content order.
    """
    return {kind: list(scan_tokens(content, kind)) for kind in NotableKind}
