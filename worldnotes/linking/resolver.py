"""
Link resolver.

Turns a scanned id into a concrete notable, scoped to one notebook. The
resolver only reads; it never writes.

A reference resolves only when a notable of the right kind with that id
exists AND belongs to the given notebook. Every other outcome (no such id,
id in another notebook, id of a different kind, lookup failure) is reported
the same way, as None, so callers cannot probe other notebooks' contents.
"""

from typing import Optional

from worldnotes.logging_utils import log_verbose
from worldnotes.types import NotableKind, NotableLookup, NotableRecord


def resolve_reference(
    lookup: NotableLookup,
    notebook_id: int,
    kind: NotableKind,
    raw_id: str,
    verbose: bool = False,
) -> Optional[NotableRecord]:
    """
    Resolve one scanned reference.

    Args:
        lookup:
            Anything exposing find_notable(notebook_id, kind, notable_id),
            normally a SupabaseClient.
        notebook_id:
            The notebook that owns the note being saved.
        kind:
            The kind whose trigger produced the token.
        raw_id:
            The id digit string extracted by the scanner.

    Returns:
        The notable row, or None when the reference does not resolve.
    """
    if not raw_id.isdigit():
        return None

    notable_id = int(raw_id)

    # A failed lookup is a resolution failure, never a retry.
    try:
        notable = lookup.find_notable(notebook_id, kind, notable_id)
    except RuntimeError as e:
        log_verbose(f"Lookup of {kind.value} {notable_id} failed: {e}", verbose)
        return None

    if notable is None:
        return None

    if notable.get("notebook_id") != notebook_id or notable.get("type") != kind.value:
        return None

    return notable
