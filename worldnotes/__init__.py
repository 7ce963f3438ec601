"""
Public API surface for worldnotes.

Callers should rely on:

    from worldnotes import NotebookService, SupabaseClient, NotableKind

The linking engine itself lives in worldnotes.linking.
"""

from .errors import (
    ContentFormatError,
    NotFoundError,
    OrderIndexConflictError,
    UnresolvedReferenceError,
    ValidationErrors,
)
from .notebooks import NotebookService
from .supabase_client import SupabaseClient
from .types import NotableKind

__all__ = [
    "ContentFormatError",
    "NotFoundError",
    "NotableKind",
    "NotebookService",
    "OrderIndexConflictError",
    "SupabaseClient",
    "UnresolvedReferenceError",
    "ValidationErrors",
]
