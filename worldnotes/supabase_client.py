"""
Supabase persistence wrapper for worldnotes.

This wrapper is the repository-style collaborator consumed by the linking
engine and the service layer. It provides a stable, typed interface over a
Supabase-compatible client:

    • notebook-scoped notable lookup (find_notable)
    • generic row access (get_row, list_rows, insert_row, update_row, delete_rows)
    • order index queries for the order sequencer
    • primitive link-row operations for the link set reconciler

The class relies on the SupabaseClientInterface Protocol defined in
worldnotes/types.py, so the real SDK client and the in-memory test double are
interchangeable.

Link rows are only ever written through the reconciler
(worldnotes/linking/reconciler.py); the link helpers here do not decide what
to link, they only execute it.
"""

from typing import Any, Dict, List, Optional, TypeVar, cast

from worldnotes.errors import NotFoundError
from worldnotes.types import LinkRecord, NotableKind, NotableRecord, TableQuery

T = TypeVar("T", bound=Dict[str, Any])

LINK_TABLE = "notables_notes"

# ---------------------------------------------------------------------------
# Helper: normalize Supabase responses
# ---------------------------------------------------------------------------


def _extract_data(resp: Any) -> List[T]:
    """
    Normalize Supabase responses across:
        • real SDK objects
        • dict-style responses from test doubles

    Always returns a list of row dictionaries.
    Raises RuntimeError on any Supabase error.
    """

    # Dict-style response (FakeClient, FailingClient)
    if isinstance(resp, dict):
        status = resp.get("status", 200)
        if status >= 400 or resp.get("error"):
            raise RuntimeError(f"Supabase error: {resp}")
        data = resp.get("data", [])
        return cast(List[T], data or [])

    # SDK-style response
    error = getattr(resp, "error", None)
    if error:
        raise RuntimeError(f"Supabase error: {error}")

    data = getattr(resp, "data", None)
    if data is None:
        return []

    if isinstance(data, list):
        return cast(List[T], data)

    return cast(List[T], [data])


def _apply_filters(builder: Any, filters: Dict[str, Any]) -> Any:
    """
    Apply equality filters to a query builder.

    List or tuple values become `.in_()` filters; everything else `.eq()`.
    Filter methods return a new builder, so the result is reassigned each time.
    """
    for key, value in filters.items():
        if isinstance(value, (list, tuple)):
            builder = builder.in_(key, list(value))
        else:
            builder = builder.eq(key, value)
    return builder


# ---------------------------------------------------------------------------
# Main wrapper class
# ---------------------------------------------------------------------------


class SupabaseClient:
    """
    A minimal, dependency-injected wrapper around a Supabase-compatible client.

    Accepts `client: Any` because the real Supabase SDK does not implement our
    Protocol nominally and the test double is a plain class. Duck typing
    keeps the wrapper flexible.
    """

    def __init__(self, client: Any = None) -> None:
        self.client = client

    @classmethod
    def from_env(cls) -> "SupabaseClient":
        """
        Factory constructor for production usage.

        Reads SUPABASE_URL and SUPABASE_KEY (populated via python-dotenv in
        worldnotes/config.py) and creates the official SDK client.

        Raises
        ------
        RuntimeError
            If either credential is missing.
        """
        from supabase import create_client

        from worldnotes import config

        if not config.SUPABASE_URL or not config.SUPABASE_KEY:
            raise RuntimeError(
                "Supabase credentials not found. Ensure SUPABASE_URL and SUPABASE_KEY "
                "are set in your environment or .env file."
            )

        return cls(create_client(config.SUPABASE_URL, config.SUPABASE_KEY))

    # -----------------------------------------------------------------------
    # Internal helper: enforce presence of a configured client
    # -----------------------------------------------------------------------

    def _require_client(self) -> Any:
        if self.client is None:
            raise RuntimeError("Supabase client is not configured")
        return self.client

    # -----------------------------------------------------------------------
    # Generic row access
    # -----------------------------------------------------------------------

    def list_rows(
        self,
        query: TableQuery,
        order_by: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Execute a filtered SELECT and return the rows.

        Parameters
        ----------
        query : TableQuery
            Table name and equality filters.
        order_by : str | None
            Optional column to order by.
        desc : bool
            Descending order when True.
        limit : int | None
            Optional maximum number of rows.
        """
        client = self._require_client()
        builder = _apply_filters(client.table(query["table"]).select("*"), query["filters"])

        if order_by:
            builder = builder.order(order_by, desc=desc)
        if limit is not None:
            builder = builder.limit(limit)

        return _extract_data(builder.execute())

    def get_row(self, table: str, filters: Dict[str, Any], resource: str) -> Dict[str, Any]:
        """
        Return the single row matching `filters`.

        Raises
        ------
        NotFoundError
            If no row matches. `resource` names the thing in the error.
        """
        rows = self.list_rows({"table": table, "filters": filters}, limit=1)
        if not rows:
            raise NotFoundError(resource, filters.get("id"))
        return rows[0]

    def insert_row(self, table: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        client = self._require_client()
        rows: List[Dict[str, Any]] = _extract_data(client.table(table).insert(payload).execute())
        if not rows:
            raise RuntimeError(f"Insert into {table} returned no rows")
        return rows[0]

    def update_row(self, table: str, row_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update one row by id and return it.

        Raises
        ------
        NotFoundError
            If no row has this id.
        """
        client = self._require_client()
        resp = client.table(table).update(payload).eq("id", row_id).execute()

        rows: List[Dict[str, Any]] = _extract_data(resp)
        if not rows:
            raise NotFoundError(table, row_id)
        return rows[0]

    def delete_rows(self, table: str, filters: Dict[str, Any]) -> None:
        """
        Delete every row matching `filters`.

        An empty filter set is refused so a bug can never wipe a table.
        """
        if not filters:
            raise ValueError(f"Refusing to delete from {table} without filters")

        client = self._require_client()
        builder = _apply_filters(client.table(table).delete(), filters)
        _extract_data(builder.execute())

    # -----------------------------------------------------------------------
    # Notebook-scoped lookup (NotableLookup protocol)
    # -----------------------------------------------------------------------

    def find_notable(
        self, notebook_id: int, kind: NotableKind, notable_id: int
    ) -> Optional[NotableRecord]:
        """
        Return the notable with this id and kind if it belongs to the notebook.

        A notable that exists in another notebook is reported exactly like a
        missing one: None.
        """
        rows = self.list_rows(
            {
                "table": "notables",
                "filters": {"id": notable_id, "notebook_id": notebook_id, "type": kind.value},
            },
            limit=1,
        )
        if not rows:
            return None
        return cast(NotableRecord, rows[0])

    # -----------------------------------------------------------------------
    # Order sequencer support
    # -----------------------------------------------------------------------

    def order_indices(self, scope: TableQuery) -> List[int]:
        client = self._require_client()
        builder = _apply_filters(client.table(scope["table"]).select("order_index"), scope["filters"])
        rows: List[Dict[str, Any]] = _extract_data(builder.execute())
        return [row["order_index"] for row in rows if row.get("order_index") is not None]

    # -----------------------------------------------------------------------
    # Link rows (written only by the link set reconciler)
    # -----------------------------------------------------------------------

    def linked_notable_ids(self, note_id: int) -> List[int]:
        rows = self.list_rows({"table": LINK_TABLE, "filters": {"note_id": note_id}})
        return [row["notable_id"] for row in rows]

    def linked_note_ids(self, notable_id: int) -> List[int]:
        """Return the ids of notes linked to a notable, without duplicates."""
        rows = self.list_rows({"table": LINK_TABLE, "filters": {"notable_id": notable_id}})
        return list(dict.fromkeys(row["note_id"] for row in rows))

    def insert_note_links(self, note_id: int, notable_ids: List[int]) -> None:
        if not notable_ids:
            return

        payload: List[LinkRecord] = [{"notable_id": nid, "note_id": note_id} for nid in notable_ids]
        client = self._require_client()
        _extract_data(client.table(LINK_TABLE).insert(payload).execute())

    def delete_note_links(self, note_id: int, notable_ids: Optional[List[int]] = None) -> None:
        """
        Delete link rows of a note: only those to `notable_ids` when given,
        otherwise all of them.
        """
        filters: Dict[str, Any] = {"note_id": note_id}
        if notable_ids is not None:
            if not notable_ids:
                return
            filters["notable_id"] = notable_ids
        self.delete_rows(LINK_TABLE, filters)
