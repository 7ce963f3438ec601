"""
Order sequencer.

Assigns the creation-time order index used for default ordering:

    next index = max(order_index of siblings in scope) + 1, or 0 if none

The value is computed by an explicit query at write time; there is no cached
counter. Callers are expected to serialize writes per notebook. The index is
assigned once on creation and never recomputed on update.

Scopes:
    • notes     → same notebook
    • notables  → same notebook, one sequence shared by all three kinds
    • notebooks → global across all owners
"""

from typing import Any, Optional

from worldnotes.errors import OrderIndexConflictError
from worldnotes.types import TableQuery


def note_scope(notebook_id: int) -> TableQuery:
    return {"table": "notes", "filters": {"notebook_id": notebook_id}}


def notable_scope(notebook_id: int) -> TableQuery:
    # No "type" filter: characters, items and locations share one sequence.
    return {"table": "notables", "filters": {"notebook_id": notebook_id}}


def notebook_scope() -> TableQuery:
    # Global across users. Likely a latent multi-tenant bug; kept until the
    # intended product behavior is confirmed.
    return {"table": "notebooks", "filters": {}}


def next_order_index(client: Any, scope: TableQuery) -> int:
    indices = [i for i in client.order_indices(scope) if i is not None]
    if not indices:
        return 0
    return max(indices) + 1


def ensure_unique_order_index(
    client: Any, scope: TableQuery, order_index: int, exclude_id: Optional[int] = None
) -> None:
    """
    Raise OrderIndexConflictError if a sibling in scope already holds the index.

    Under serialized writes this never fires. If it does, the data is
    inconsistent and the caller must not retry.
    """
    filters = dict(scope["filters"], order_index=order_index)
    rows = client.list_rows({"table": scope["table"], "filters": filters})
    holders = [row for row in rows if row.get("id") != exclude_id]

    if holders:
        raise OrderIndexConflictError(
            f"order_index {order_index} already used in {scope['table']} "
            f"scope {scope['filters']!r}"
        )
