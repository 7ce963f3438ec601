"""
Command-line interface for working with notes.

Two commands, mounted under `worldnotes notes`:

    • worldnotes notes check <path>
        Offline. Validates the note content and lists the references it
        contains, without touching Supabase.

    • worldnotes notes save <path> --notebook-id N [--dry-run]
        Runs the full save pipeline against Supabase. With --dry-run the
        references are resolved but nothing is written.

Note files are Markdown with optional YAML frontmatter:

    ---
    id: 12            # optional; present → update that note
    notebook_id: 3    # optional; --notebook-id wins
    ---
    Say hi to @[Bob](@5) at #[The Docks](#2).
"""

from pathlib import Path
from typing import Any, Dict, Optional

import frontmatter
import typer

from worldnotes import config
from worldnotes.errors import ValidationErrors
from worldnotes.linking import check_links, scan_references, validate_content
from worldnotes.logging_utils import log_debug, log_verbose
from worldnotes.notebooks import NotebookService
from worldnotes.supabase_client import SupabaseClient

notes_app = typer.Typer(
    help="Commands for checking and saving notes with notable references."
)


# ---------------------------------------------------------------------------
# Helper: load a note file from disk
# ---------------------------------------------------------------------------
def load_note_file(path: Path) -> Dict[str, Any]:
    """
    Load a Markdown note file into {"id", "notebook_id", "content"}.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Note file not found: {path}")

    post = frontmatter.load(str(path))

    return {
        "id": post.metadata.get("id"),
        "notebook_id": post.metadata.get("notebook_id"),
        "content": post.content,
    }


def _fail(messages: Any) -> None:
    if isinstance(messages, str):
        messages = [messages]
    for message in messages:
        typer.echo(f"Error: {message}")
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Command: notes check <path>
# ---------------------------------------------------------------------------
@notes_app.command("check")
def check_note(
    path: Path = typer.Argument(..., help="Path to the Markdown note file."),
) -> None:
    """
    Validate note content and list its references. No Supabase access.
    """
    try:
        note = load_note_file(path)
    except FileNotFoundError as e:
        _fail(str(e))

    errors = validate_content(note["content"])
    if errors:
        _fail(errors)

    found = 0
    for kind, tokens in scan_references(note["content"]).items():
        for token, raw_id in tokens:
            typer.echo(f"{kind.value} {raw_id}: {token}")
            found += 1

    if not found:
        typer.echo("No references found.")


# ---------------------------------------------------------------------------
# Command: notes save <path>
# ---------------------------------------------------------------------------
@notes_app.command("save")
def save_note(
    path: Path = typer.Argument(..., help="Path to the Markdown note file."),
    notebook_id: Optional[int] = typer.Option(
        None,
        "--notebook-id",
        help="Notebook that owns the note. Defaults to notebook_id in the frontmatter.",
    ),
    user_id: Optional[str] = typer.Option(
        None,
        "--user-id",
        help="Acting user. Defaults to WORLDNOTES_USER_ID.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Validate and resolve references without writing to Supabase.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show high-level progress logs."),
    debug: bool = typer.Option(False, "--debug", help="Show full payloads."),
) -> None:
    """
    Create or update a note and link it to the notables it references.
    """
    try:
        note = load_note_file(path)
    except FileNotFoundError as e:
        _fail(str(e))

    notebook_id = notebook_id if notebook_id is not None else note["notebook_id"]
    if notebook_id is None:
        _fail("No notebook id given. Use --notebook-id or notebook_id in the frontmatter.")

    user_id = user_id or config.WORLDNOTES_USER_ID
    if not user_id:
        _fail("No user id given. Use --user-id or set WORLDNOTES_USER_ID.")

    log_verbose(f"Loaded note from {path}.", verbose)
    log_debug("Note", note, debug)

    try:
        client = SupabaseClient.from_env()
        service = NotebookService(client, user_id, verbose=verbose)

        if dry_run:
            service.get_notebook(int(notebook_id))
            result = check_links(client, int(notebook_id), note["content"], verbose=verbose)
            if not result.ok:
                raise ValidationErrors(result.errors)
            typer.echo(f"[dry-run] {result.message}")
            return

        if note["id"] is None:
            result = service.create_note(int(notebook_id), note["content"])
        else:
            result = service.update_note(int(notebook_id), int(note["id"]), note["content"])
    except ValidationErrors as e:
        _fail(e.messages)
    except (LookupError, RuntimeError) as e:
        _fail(str(e))

    log_debug("Saved note", result.to_summary_dict(), debug)
    typer.echo(result.message)
