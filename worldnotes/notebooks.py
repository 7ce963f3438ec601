"""
Notebook service: the CRUD layer around the linking engine.

NotebookService maps create/read/update/destroy on notebooks, notables and
notes to the Supabase wrapper, scoped to one already-authenticated user.
Everything touching note content goes through
worldnotes.linking.validate_and_link; the service never writes link rows
itself.

Cascades are explicit:

    • destroy_notebook → its notes (and their links), its notables, itself
    • destroy_notable  → every note linked to it (and those notes' other
                         links), then itself
    • destroy_note     → its own links, then itself
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union, cast

from worldnotes.errors import NotFoundError, ValidationErrors
from worldnotes.linking import (
    LinkResult,
    ensure_unique_order_index,
    next_order_index,
    notable_scope,
    notebook_scope,
    text_code,
    unlink_note,
    validate_and_link,
)
from worldnotes.logging_utils import log_verbose
from worldnotes.supabase_client import LINK_TABLE, SupabaseClient
from worldnotes.types import (
    TYPE_ERROR_MESSAGE,
    NotableKind,
    NotableRecord,
    NotebookRecord,
    NoteRecord,
)

NOTEBOOK_NAME_MAX_LENGTH = 45
NOTEBOOK_SUMMARY_MAX_LENGTH = 250
RECENT_NOTABLES_LIMIT = 5


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def coerce_kind(kind: Union[NotableKind, str, None]) -> NotableKind:
    """
    Return `kind` as a NotableKind.

    Raises
    ------
    ValueError
        With the type error message when `kind` is not one of the three kinds.
    """
    if isinstance(kind, NotableKind):
        return kind
    try:
        return NotableKind(kind)
    except ValueError:
        raise ValueError(TYPE_ERROR_MESSAGE) from None


def notable_text_code(notable: NotableRecord) -> str:
    """Reference token a client inserts into note content to link this notable."""
    return text_code(coerce_kind(notable["type"]), notable["name"], notable["id"])


class NotebookService:
    """
    CRUD operations for one user's notebooks and their contents.

    Parameters
    ----------
    client : SupabaseClient
        Persistence wrapper.
    user_id : str
        The already-authenticated current user.
    verbose : bool
        Print high-level progress through log_verbose.
    clock : callable
        Returns the current timestamp as an ISO string; injectable for tests.
    """

    def __init__(
        self,
        client: SupabaseClient,
        user_id: str,
        verbose: bool = False,
        clock: Callable[[], str] = _utcnow,
    ) -> None:
        self.client = client
        self.user_id = user_id
        self.verbose = verbose
        self.clock = clock

    # =======================================================================
    # NOTEBOOKS
    # =======================================================================

    def _validate_notebook(self, name: Optional[str], summary: Optional[str]) -> None:
        errors: List[str] = []

        if not name or not name.strip():
            errors.append("Name can't be blank")
        elif len(name) > NOTEBOOK_NAME_MAX_LENGTH:
            errors.append(
                f"Name is too long (maximum is {NOTEBOOK_NAME_MAX_LENGTH} characters)"
            )

        if summary is not None and len(summary) > NOTEBOOK_SUMMARY_MAX_LENGTH:
            errors.append(
                f"Summary is too long (maximum is {NOTEBOOK_SUMMARY_MAX_LENGTH} characters)"
            )

        if errors:
            raise ValidationErrors(errors)

    def create_notebook(self, name: str, summary: Optional[str] = None) -> NotebookRecord:
        self._validate_notebook(name, summary)

        scope = notebook_scope()
        order_index = next_order_index(self.client, scope)
        ensure_unique_order_index(self.client, scope, order_index)

        notebook = self.client.insert_row(
            "notebooks",
            {
                "user_id": self.user_id,
                "name": name,
                "summary": summary,
                "order_index": order_index,
            },
        )
        log_verbose(f"Created notebook {notebook['id']}.", self.verbose)
        return cast(NotebookRecord, notebook)

    def list_notebooks(self) -> List[NotebookRecord]:
        rows = self.client.list_rows(
            {"table": "notebooks", "filters": {"user_id": self.user_id}},
            order_by="order_index",
        )
        return cast(List[NotebookRecord], rows)

    def get_notebook(self, notebook_id: int) -> NotebookRecord:
        """
        Return one of the current user's notebooks.

        Raises NotFoundError for a missing notebook and for another user's.
        """
        row = self.client.get_row(
            "notebooks", {"id": notebook_id, "user_id": self.user_id}, "Notebook"
        )
        return cast(NotebookRecord, row)

    def update_notebook(
        self,
        notebook_id: int,
        name: Optional[str] = None,
        summary: Optional[str] = None,
    ) -> NotebookRecord:
        notebook = self.get_notebook(notebook_id)

        changes: Dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if summary is not None:
            changes["summary"] = summary

        self._validate_notebook(changes.get("name", notebook.get("name")), changes.get("summary"))

        if not changes:
            return notebook
        return cast(NotebookRecord, self.client.update_row("notebooks", notebook_id, changes))

    def destroy_notebook(self, notebook_id: int) -> None:
        self.get_notebook(notebook_id)

        for note in self.list_notes(notebook_id):
            unlink_note(self.client, note["id"])

        self.client.delete_rows("notes", {"notebook_id": notebook_id})
        self.client.delete_rows("notables", {"notebook_id": notebook_id})
        self.client.delete_rows("notebooks", {"id": notebook_id})
        log_verbose(f"Destroyed notebook {notebook_id}.", self.verbose)

    # =======================================================================
    # NOTABLES
    # =======================================================================

    def create_notable(
        self,
        notebook_id: int,
        kind: Union[NotableKind, str, None],
        name: Optional[str],
        description: Optional[str] = None,
    ) -> NotableRecord:
        self.get_notebook(notebook_id)

        errors: List[str] = []
        resolved_kind: Optional[NotableKind] = None
        try:
            resolved_kind = coerce_kind(kind)
        except ValueError as e:
            errors.append(str(e))

        if not name or not name.strip():
            errors.append("Name can't be blank")

        if errors or resolved_kind is None:
            raise ValidationErrors(errors)

        # One sequence for all kinds in the notebook.
        scope = notable_scope(notebook_id)
        order_index = next_order_index(self.client, scope)
        ensure_unique_order_index(self.client, scope, order_index)

        notable = self.client.insert_row(
            "notables",
            {
                "type": resolved_kind.value,
                "name": name,
                "description": description,
                "notebook_id": notebook_id,
                "order_index": order_index,
                "viewed_at": self.clock(),
            },
        )
        log_verbose(
            f"Created {resolved_kind.value} {notable['id']} in notebook {notebook_id}.",
            self.verbose,
        )
        return cast(NotableRecord, notable)

    def get_notable(self, notebook_id: int, notable_id: int) -> NotableRecord:
        self.get_notebook(notebook_id)
        row = self.client.get_row(
            "notables", {"id": notable_id, "notebook_id": notebook_id}, "Notable"
        )
        return cast(NotableRecord, row)

    def view_notable(self, notebook_id: int, notable_id: int) -> NotableRecord:
        """Fetch a notable and record that it was viewed now."""
        self.get_notable(notebook_id, notable_id)
        row = self.client.update_row("notables", notable_id, {"viewed_at": self.clock()})
        return cast(NotableRecord, row)

    def update_notable(
        self,
        notebook_id: int,
        notable_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> NotableRecord:
        """
        Update name and/or description.

        The kind and the order index are never changed here: notes reference
        a notable through its kind's trigger, and the order index is fixed at
        creation.
        """
        notable = self.get_notable(notebook_id, notable_id)

        changes: Dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationErrors(["Name can't be blank"])
            changes["name"] = name
        if description is not None:
            changes["description"] = description

        if not changes:
            return notable
        return cast(NotableRecord, self.client.update_row("notables", notable_id, changes))

    def destroy_notable(self, notebook_id: int, notable_id: int) -> List[int]:
        """
        Destroy a notable and every note that references it.

        Two phases: collect the linked note ids first, then destroy each note
        (which tears down all of its links), then the notable.

        Returns:
            The ids of the destroyed notes.
        """
        self.get_notable(notebook_id, notable_id)

        note_ids = self.client.linked_note_ids(notable_id)
        log_verbose(
            f"Destroying {len(note_ids)} notes linked to notable {notable_id}.", self.verbose
        )

        for note_id in note_ids:
            self.destroy_note(notebook_id, note_id)

        self.client.delete_rows("notables", {"id": notable_id})
        return note_ids

    def list_notables(
        self, notebook_id: int, kind: Union[NotableKind, str, None] = None
    ) -> List[NotableRecord]:
        """List a notebook's notables in order, optionally only one kind."""
        self.get_notebook(notebook_id)

        filters: Dict[str, Any] = {"notebook_id": notebook_id}
        if kind is not None:
            filters["type"] = coerce_kind(kind).value

        rows = self.client.list_rows({"table": "notables", "filters": filters}, order_by="order_index")
        return cast(List[NotableRecord], rows)

    def recent_notables(
        self, notebook_id: int, limit: int = RECENT_NOTABLES_LIMIT
    ) -> List[NotableRecord]:
        """Most recently viewed notables first."""
        self.get_notebook(notebook_id)
        rows = self.client.list_rows(
            {"table": "notables", "filters": {"notebook_id": notebook_id}},
            order_by="viewed_at",
            desc=True,
            limit=limit,
        )
        return cast(List[NotableRecord], rows)

    def notes_for_notable(self, notebook_id: int, notable_id: int) -> List[NoteRecord]:
        """Notes that reference a notable, in note order, each once."""
        self.get_notable(notebook_id, notable_id)

        note_ids = self.client.linked_note_ids(notable_id)
        if not note_ids:
            return []

        rows = self.client.list_rows(
            {"table": "notes", "filters": {"id": note_ids, "notebook_id": notebook_id}},
            order_by="order_index",
        )
        return cast(List[NoteRecord], rows)

    # =======================================================================
    # NOTES
    # =======================================================================

    def _save_note(self, notebook_id: int, note_id: Optional[int], content: Optional[str]) -> LinkResult:
        result = validate_and_link(self.client, notebook_id, note_id, content, verbose=self.verbose)
        if not result.ok:
            raise ValidationErrors(result.errors)
        return result

    def create_note(self, notebook_id: int, content: Optional[str]) -> LinkResult:
        """
        Create a note and link it to every notable its content references.

        Raises
        ------
        ValidationErrors
            With every content and reference error; nothing is written.
        """
        self.get_notebook(notebook_id)
        return self._save_note(notebook_id, None, content)

    def get_note(self, notebook_id: int, note_id: int) -> NoteRecord:
        self.get_notebook(notebook_id)
        row = self.client.get_row("notes", {"id": note_id, "notebook_id": notebook_id}, "Note")
        return cast(NoteRecord, row)

    def update_note(self, notebook_id: int, note_id: int, content: Optional[str]) -> LinkResult:
        """
        Replace a note's content and re-run the full linking pipeline.

        The order index is left untouched.
        """
        self.get_note(notebook_id, note_id)
        return self._save_note(notebook_id, note_id, content)

    def destroy_note(self, notebook_id: int, note_id: int) -> None:
        """Destroy a note and its own links. Linked notables are untouched."""
        self.get_note(notebook_id, note_id)
        unlink_note(self.client, note_id)
        self.client.delete_rows("notes", {"id": note_id})
        log_verbose(f"Destroyed note {note_id}.", self.verbose)

    def list_notes(self, notebook_id: int) -> List[NoteRecord]:
        self.get_notebook(notebook_id)
        rows = self.client.list_rows(
            {"table": "notes", "filters": {"notebook_id": notebook_id}},
            order_by="order_index",
        )
        return cast(List[NoteRecord], rows)

    def list_unlinked_notes(self, notebook_id: int) -> List[NoteRecord]:
        """Notes that reference no notable, in note order."""
        notes = self.list_notes(notebook_id)
        if not notes:
            return []

        links = self.client.list_rows(
            {"table": LINK_TABLE, "filters": {"note_id": [n["id"] for n in notes]}}
        )
        linked = {link["note_id"] for link in links}
        return [n for n in notes if n["id"] not in linked]

    def linked_notables(self, notebook_id: int, note_id: int) -> List[NotableRecord]:
        """The note's current link set, in notable order."""
        self.get_note(notebook_id, note_id)

        notable_ids = self.client.linked_notable_ids(note_id)
        if not notable_ids:
            return []

        rows = self.client.list_rows(
            {"table": "notables", "filters": {"id": notable_ids}},
            order_by="order_index",
        )
        return cast(List[NotableRecord], rows)
