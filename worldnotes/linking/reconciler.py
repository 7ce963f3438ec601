"""
Link set reconciler: the note save pipeline.

This module is the only writer of the `notables_notes` join table. It keeps a
note's link set exactly equal to the set of notables its current content
references, and it runs as part of the note's save so that a save with any
bad reference is rejected with zero mutation.

The pipeline is explicit and linear:

    1. Content validation (presence, length, stray brackets)
    2. Scan every kind, resolve every token, collect one error per failing kind
    3. Stop here if anything failed (validate before mutate)
    4. Persist the note (order index assigned on creation only)
    5. Replace the link set with the deduplicated resolved notables

Steps 1 to 3 are read-only and are exposed on their own as check_links().
"""

from typing import Any, Dict, List, Optional

from worldnotes.errors import UnresolvedReferenceError
from worldnotes.linking.ordering import ensure_unique_order_index, next_order_index, note_scope
from worldnotes.linking.resolver import resolve_reference
from worldnotes.linking.scanner import scan_tokens
from worldnotes.linking.validator import validate_content
from worldnotes.logging_utils import log_verbose
from worldnotes.types import NotableKind, NotableLookup, NotableRecord, NoteRecord


# ============================================================================
# LINK RESULT
# ============================================================================
class LinkResult:
    """
    Outcome of one pass through the save pipeline.

    On success `notables` holds the resolved notables, deduplicated by id, in
    the order they were first referenced, and `note` holds the persisted note
    row (None when only checking). On failure `errors` holds every message
    and nothing has been written.
    """

    def __init__(self, notebook_id: int, content: Optional[str]) -> None:
        self.notebook_id = notebook_id
        self.content = content
        self.notables: List[NotableRecord] = []
        self.errors: List[str] = []
        self.note: Optional[NoteRecord] = None

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def notable_ids(self) -> List[int]:
        return [n["id"] for n in self.notables]

    @property
    def message(self) -> str:
        if not self.notables:
            return "Note linked to no notables"
        return "Note linked to: " + ", ".join(n.get("name", "") for n in self.notables)

    def to_summary_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "note": self.note,
            "notable_ids": self.notable_ids,
            "errors": self.errors,
            "message": self.message if self.ok else None,
        }


# ============================================================================
# READ-ONLY STAGES
# ============================================================================
def check_links(
    lookup: NotableLookup,
    notebook_id: int,
    content: Optional[str],
    verbose: bool = False,
) -> LinkResult:
    """
    Validate content and resolve every reference without writing anything.

    Content errors stop the pipeline before any lookup. Resolution errors are
    collected across all kinds so the caller sees every problem at once; each
    failing kind contributes a single message however many of its tokens
    failed.
    """
    result = LinkResult(notebook_id, content)

    result.errors.extend(validate_content(content))
    if result.errors:
        return result

    seen: Dict[int, NotableRecord] = {}

    for kind in NotableKind:
        kind_failed = False

        for token, raw_id in scan_tokens(content, kind):
            notable = resolve_reference(lookup, notebook_id, kind, raw_id, verbose=verbose)
            if notable is None:
                log_verbose(f"Unresolved reference {token} in notebook {notebook_id}.", verbose)
                kind_failed = True
                continue

            seen.setdefault(notable["id"], notable)

        if kind_failed:
            result.errors.append(str(UnresolvedReferenceError(kind)))

    if result.ok:
        result.notables = list(seen.values())

    return result


# ============================================================================
# LINK SET MUTATION
# ============================================================================
def apply_links(client: Any, note_id: int, result: LinkResult) -> None:
    """
    Make the persisted link set of `note_id` equal to the resolved notables.

    Only the delta is written: links no longer referenced are removed, newly
    referenced notables are linked, and links present before and after are
    left alone.

    Raises
    ------
    ValueError
        If `result` carries errors. A failed check must never reach the
        link table.
    """
    if not result.ok:
        raise ValueError("Cannot apply links from a failed check")

    current = set(client.linked_notable_ids(note_id))
    wanted = result.notable_ids

    to_remove = [nid for nid in current if nid not in wanted]
    to_add = [nid for nid in wanted if nid not in current]

    if to_remove:
        client.delete_note_links(note_id, to_remove)
    if to_add:
        client.insert_note_links(note_id, to_add)


def unlink_note(client: Any, note_id: int) -> None:
    """Remove every link of a note. Used when the note is destroyed."""
    client.delete_note_links(note_id)


# ============================================================================
# ENTRY POINT
# ============================================================================
def validate_and_link(
    client: Any,
    notebook_id: int,
    note_id: Optional[int],
    content: Optional[str],
    verbose: bool = False,
) -> LinkResult:
    """
    Run the full save pipeline for a new note (note_id=None) or an existing one.

    Returns:
        A LinkResult. When `result.ok` is False nothing was written: no note
        row, no content change, no link change.

    Raises:
        NotFoundError: `note_id` is given but the note is not in `notebook_id`.
    """
    if note_id is not None:
        client.get_row("notes", {"id": note_id, "notebook_id": notebook_id}, "Note")

    result = check_links(client, notebook_id, content, verbose=verbose)
    if not result.ok:
        log_verbose(f"Note rejected: {'; '.join(result.errors)}", verbose)
        return result

    if note_id is None:
        scope = note_scope(notebook_id)
        order_index = next_order_index(client, scope)
        ensure_unique_order_index(client, scope, order_index)
        note: NoteRecord = client.insert_row(
            "notes",
            {"notebook_id": notebook_id, "content": content, "order_index": order_index},
        )
        log_verbose(f"Created note {note['id']} in notebook {notebook_id}.", verbose)
    else:
        # Content and links are separate writes. If the link writes fail the
        # new content is stored next to the previous link set; saving the
        # same content again repairs it.
        note = client.update_row("notes", note_id, {"content": content})
        log_verbose(f"Updated note {note_id}.", verbose)

    apply_links(client, note["id"], result)
    result.note = note

    log_verbose(result.message, verbose)
    return result
