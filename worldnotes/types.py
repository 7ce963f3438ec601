"""
worldnotes/types.py

Centralized type definitions for worldnotes.

This module defines the row TypedDicts, the closed set of notable kinds, and
the Protocols used by the linking engine, the Supabase client wrapper, and
the test doubles. Keeping these types in one place gives:

    • A single source of truth for notebook, notable, note and link rows
    • Clear contracts between the CLI, the service layer and the Supabase layer
    • Easy mocking and dependency injection in tests

When the schema changes in Supabase, this file should be updated first.
"""

from enum import Enum
from typing import Any, Dict, Optional, Protocol, TypedDict


# ---------------------------------------------------------------------------
# NotableKind
# ---------------------------------------------------------------------------
# The closed set of notable kinds. The value is what is stored in the
# `type` column of the notables table; each kind owns a single-character
# trigger used by the reference syntax in note content.
#
# NotableKind("Weapon") raises ValueError, so membership is validated at
# construction rather than by checking free strings later.
# ---------------------------------------------------------------------------
class NotableKind(Enum):
    CHARACTER = "Character"
    ITEM = "Item"
    LOCATION = "Location"

    @property
    def trigger(self) -> str:
        return _TRIGGERS[self]

    @property
    def plural(self) -> str:
        return f"{self.value}s"

    @classmethod
    def from_trigger(cls, trigger: str) -> "NotableKind":
        for kind, kind_trigger in _TRIGGERS.items():
            if kind_trigger == trigger:
                return kind
        raise ValueError(f"Unknown trigger character: {trigger!r}")


_TRIGGERS: Dict[NotableKind, str] = {
    NotableKind.CHARACTER: "@",
    NotableKind.ITEM: ":",
    NotableKind.LOCATION: "#",
}

# Error message used when a row carries a type outside the closed set.
TYPE_ERROR_MESSAGE = "Type must be one of Item/Character/Location"


# ---------------------------------------------------------------------------
# NotebookRecord
# ---------------------------------------------------------------------------
# A row of the `notebooks` table.
#
# total=False allows partial construction (e.g., before Supabase assigns "id").
# ---------------------------------------------------------------------------
class NotebookRecord(TypedDict, total=False):
    id: int
    user_id: str
    name: str
    summary: Optional[str]
    order_index: int


# ---------------------------------------------------------------------------
# NotableRecord
# ---------------------------------------------------------------------------
# A row of the `notables` table. `type` holds NotableKind.value.
# ---------------------------------------------------------------------------
class NotableRecord(TypedDict, total=False):
    id: int
    type: str
    name: str
    description: Optional[str]
    notebook_id: int
    order_index: int
    viewed_at: Optional[str]


# ---------------------------------------------------------------------------
# NoteRecord
# ---------------------------------------------------------------------------
# A row of the `notes` table. The link set is not a column: it lives in the
# `notables_notes` table and is owned by the link set reconciler.
# ---------------------------------------------------------------------------
class NoteRecord(TypedDict, total=False):
    id: int
    notebook_id: int
    content: str
    order_index: int


# ---------------------------------------------------------------------------
# LinkRecord
# ---------------------------------------------------------------------------
# A row of the `notables_notes` join table. Pure association, no attributes.
# ---------------------------------------------------------------------------
class LinkRecord(TypedDict):
    notable_id: int
    note_id: int


# ---------------------------------------------------------------------------
# SupabaseExecuteResponse
# ---------------------------------------------------------------------------
# Represents the normalized response returned from Supabase `.execute()`.
#
# The real Supabase client returns a dynamic object with .data and .error;
# test doubles return dictionaries with the same fields.
# ---------------------------------------------------------------------------
class SupabaseExecuteResponse(TypedDict, total=False):
    status: int
    data: Any
    error: Optional[Any]


# ---------------------------------------------------------------------------
# TableQuery
# ---------------------------------------------------------------------------
# A simple equality-filtered query against a Supabase table.
#
# Used for listing rows and as the scope key of the order sequencer:
#     {"table": "notes", "filters": {"notebook_id": 3}}
# ---------------------------------------------------------------------------
class TableQuery(TypedDict):
    table: str
    filters: Dict[str, Any]


# ---------------------------------------------------------------------------
# NotableLookup
# ---------------------------------------------------------------------------
# The notebook-scoped lookup capability consumed by the link resolver.
# SupabaseClient implements it; tests may pass any object with this method.
# ---------------------------------------------------------------------------
class NotableLookup(Protocol):
    def find_notable(
        self, notebook_id: int, kind: NotableKind, notable_id: int
    ) -> Optional[NotableRecord]:
        """
        Return the notable of this kind and id if it belongs to the notebook,
        otherwise None.
        """
        ...


# ---------------------------------------------------------------------------
# SupabaseClientInterface
# ---------------------------------------------------------------------------
# Protocol describing the subset of the Supabase Python client used by
# SupabaseClient (worldnotes/supabase_client.py):
#
#   client.table("notes").select("*").eq("notebook_id", 1).execute()
#   client.table("notes").insert({...}).execute()
#   client.table("notes").update({...}).eq("id", 4).execute()
#   client.table("notes").delete().eq("id", 4).execute()
#
# The Protocol is structural: the real SDK and the in-memory FakeClient used
# by the test suite are both accepted.
# ---------------------------------------------------------------------------
class SupabaseClientInterface(Protocol):
    def table(self, name: str) -> Any:
        """
        Return a query builder for the given table.
        The returned object must support select/insert/update/delete,
        the eq/in_/order/limit filters, and .execute().
        """
        ...
