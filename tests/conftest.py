"""
Shared pytest configuration for the worldnotes test suite.

This file centralizes reusable testing utilities so that:
    • Service and pipeline tests run against the same in-memory FakeClient
    • Notebooks and notables are created the same way everywhere
    • Timestamps are deterministic

All helpers here are intentionally simple and deterministic.
"""

import itertools

import pytest
from typer.testing import CliRunner

from tests.fake_supabase import FakeClient
from worldnotes.notebooks import NotebookService
from worldnotes.supabase_client import SupabaseClient
from worldnotes.types import NotableKind

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


# ============================================================================
# SHARED TEST INFRASTRUCTURE
# ============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provides a fresh Typer CliRunner instance for CLI tests."""
    return CliRunner()


@pytest.fixture
def fake_client() -> FakeClient:
    """Empty in-memory Supabase-like client."""
    return FakeClient()


@pytest.fixture
def client(fake_client) -> SupabaseClient:
    """SupabaseClient wrapper over the in-memory FakeClient."""
    return SupabaseClient(fake_client)


@pytest.fixture
def clock():
    """
    Deterministic clock: each call returns a later ISO timestamp.
    """
    counter = itertools.count(1)

    def _now() -> str:
        return f"2024-01-01T00:00:{next(counter):02d}+00:00"

    return _now


@pytest.fixture
def service(client, clock) -> NotebookService:
    return NotebookService(client, USER_ID, clock=clock)


@pytest.fixture
def other_service(client, clock) -> NotebookService:
    """A second user sharing the same store."""
    return NotebookService(client, OTHER_USER_ID, clock=clock)


@pytest.fixture
def notebook(service):
    return service.create_notebook("The Shattered Coast", "Pirates and storms")


@pytest.fixture
def other_notebook(service):
    return service.create_notebook("Elsewhere")


# ---------------------------------------------------------------------------
# Fixture: make_notable
# ---------------------------------------------------------------------------
@pytest.fixture
def make_notable(service, notebook):
    """
    Factory for notables in the default notebook.

        make_notable(NotableKind.CHARACTER, "Bob")
        make_notable(NotableKind.ITEM, "Sword", notebook_id=other["id"])
    """

    def _make(kind: NotableKind, name: str, notebook_id=None, description=None):
        return service.create_notable(
            notebook_id if notebook_id is not None else notebook["id"],
            kind,
            name,
            description,
        )

    return _make
