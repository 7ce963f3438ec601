"""
Unit tests for the SupabaseClient wrapper.

These tests verify:
    - response normalization and error propagation
    - filtered listing, ordering and limits
    - notebook-scoped notable lookup
    - the link-row primitives used by the reconciler
"""

import pytest

from tests.fake_supabase import FailingClient
from worldnotes import config
from worldnotes.errors import NotFoundError
from worldnotes.supabase_client import LINK_TABLE, SupabaseClient, _extract_data
from worldnotes.types import NotableKind


# =====================================================================
# Response normalization
# =====================================================================


class SdkResponse:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error


def test_extract_data_handles_dict_and_sdk_responses() -> None:
    assert _extract_data({"status": 200, "data": [{"id": 1}]}) == [{"id": 1}]
    assert _extract_data({"status": 200, "data": None}) == []
    assert _extract_data(SdkResponse(data=[{"id": 2}])) == [{"id": 2}]
    assert _extract_data(SdkResponse(data={"id": 3})) == [{"id": 3}]
    assert _extract_data(SdkResponse(data=None)) == []


def test_extract_data_raises_on_errors() -> None:
    with pytest.raises(RuntimeError, match="Supabase error"):
        _extract_data({"status": 500, "data": None})

    with pytest.raises(RuntimeError, match="Supabase error"):
        _extract_data(SdkResponse(error="boom"))


def test_failing_client_errors_propagate() -> None:
    client = SupabaseClient(FailingClient())

    with pytest.raises(RuntimeError, match="Supabase error"):
        client.list_rows({"table": "notes", "filters": {}})


def test_unconfigured_client_raises() -> None:
    with pytest.raises(RuntimeError, match="Supabase client is not configured"):
        SupabaseClient().insert_row("notes", {"content": "hello"})


def test_from_env_requires_credentials(monkeypatch) -> None:
    monkeypatch.setattr(config, "SUPABASE_URL", None)
    monkeypatch.setattr(config, "SUPABASE_KEY", None)

    with pytest.raises(RuntimeError, match="Supabase credentials not found"):
        SupabaseClient.from_env()


# =====================================================================
# Row access
# =====================================================================


def test_list_rows_filters_orders_and_limits(client, fake_client) -> None:
    fake_client.store["notes"] = [
        {"id": 1, "notebook_id": 1, "order_index": 2},
        {"id": 2, "notebook_id": 1, "order_index": 0},
        {"id": 3, "notebook_id": 2, "order_index": 1},
        {"id": 4, "notebook_id": 1, "order_index": 1},
    ]

    rows = client.list_rows({"table": "notes", "filters": {"notebook_id": 1}}, order_by="order_index")
    assert [r["id"] for r in rows] == [2, 4, 1]

    rows = client.list_rows(
        {"table": "notes", "filters": {"id": [1, 3]}}, order_by="order_index", desc=True, limit=1
    )
    assert [r["id"] for r in rows] == [1]


def test_get_and_update_missing_rows(client) -> None:
    with pytest.raises(NotFoundError):
        client.get_row("notes", {"id": 5}, "Note")

    with pytest.raises(NotFoundError):
        client.update_row("notes", 5, {"content": "nothing here"})


def test_delete_rows_refuses_empty_filters(client) -> None:
    with pytest.raises(ValueError):
        client.delete_rows("notes", {})


def test_order_indices(client, fake_client) -> None:
    fake_client.store["notables"] = [
        {"id": 1, "notebook_id": 1, "order_index": 0},
        {"id": 2, "notebook_id": 1, "order_index": None},
        {"id": 3, "notebook_id": 2, "order_index": 4},
    ]

    assert client.order_indices({"table": "notables", "filters": {"notebook_id": 1}}) == [0]


# =====================================================================
# Notebook-scoped lookup
# =====================================================================


def test_find_notable_is_scoped_by_notebook_and_kind(client, fake_client) -> None:
    fake_client.store["notables"] = [
        {"id": 5, "type": "Character", "name": "Bob", "notebook_id": 1},
    ]

    assert client.find_notable(1, NotableKind.CHARACTER, 5)["name"] == "Bob"
    assert client.find_notable(2, NotableKind.CHARACTER, 5) is None
    assert client.find_notable(1, NotableKind.ITEM, 5) is None


# =====================================================================
# Link rows
# =====================================================================


def test_link_primitives(client, fake_client) -> None:
    client.insert_note_links(1, [10, 11, 12])
    client.insert_note_links(2, [10])
    client.insert_note_links(3, [])

    assert client.linked_notable_ids(1) == [10, 11, 12]
    assert client.linked_note_ids(10) == [1, 2]

    client.delete_note_links(1, [11])
    assert client.linked_notable_ids(1) == [10, 12]

    client.delete_note_links(1, [])
    assert client.linked_notable_ids(1) == [10, 12]

    client.delete_note_links(1)
    assert client.linked_notable_ids(1) == []
    assert [r["note_id"] for r in fake_client.store[LINK_TABLE]] == [2]
