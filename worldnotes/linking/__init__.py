"""
Public linking API surface.

External callers (service layer, CLI, tests) should import from here rather
than reaching into submodules directly.

The linking subsystem includes:
    • validate_and_link: the note save pipeline
    • check_links: the read-only part of that pipeline
    • LinkResult: outcome of a pipeline run
    • next_order_index: creation-time ordering
"""

from .grammar import any_token_pattern, extract_id, text_code, token_pattern
from .ordering import (
    ensure_unique_order_index,
    next_order_index,
    notable_scope,
    note_scope,
    notebook_scope,
)
from .reconciler import LinkResult, apply_links, check_links, unlink_note, validate_and_link
from .scanner import scan_references, scan_tokens
from .validator import has_stray_brackets, validate_content

__all__ = [
    "LinkResult",
    "any_token_pattern",
    "apply_links",
    "check_links",
    "ensure_unique_order_index",
    "extract_id",
    "has_stray_brackets",
    "next_order_index",
    "notable_scope",
    "note_scope",
    "notebook_scope",
    "scan_references",
    "scan_tokens",
    "text_code",
    "token_pattern",
    "unlink_note",
    "validate_and_link",
    "validate_content",
]
