"""
Root entrypoint for the worldnotes CLI.

This module defines the top-level `worldnotes` command and mounts sub-apps
from other modules under worldnotes/cli/:

    • worldnotes/cli/notes_cli.py  →  `worldnotes notes ...`
"""

from dotenv import load_dotenv
import typer

from .notes_cli import notes_app

# Load environment variables
load_dotenv()

cli = typer.Typer(
    help=(
        "worldnotes command-line interface.\n\n"
        "Check note content for notable references offline:\n\n"
        "    worldnotes notes check <path>\n\n"
        "Save a note and link it to the notables it references:\n\n"
        "    worldnotes notes save <path> --notebook-id <id>"
    )
)

cli.add_typer(notes_app, name="notes")

if __name__ == "__main__":
    cli()
