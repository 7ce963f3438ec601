"""
Error taxonomy for worldnotes.

Content and link errors are user-correctable and are always collected and
reported together. OrderIndexConflictError and NotFoundError are raised
directly; neither is ever retried.
"""

from typing import Iterable, List

from worldnotes.types import NotableKind


class ContentFormatError(ValueError):
    """Note content contains a square bracket outside a recognized reference."""

    def __init__(self) -> None:
        super().__init__("Content cannot include square bracket characters")


class UnresolvedReferenceError(ValueError):
    """
    One or more references of a kind did not resolve to a notable in the
    note's notebook. A nonexistent id and an id from another notebook produce
    the same error.
    """

    def __init__(self, kind: NotableKind) -> None:
        self.kind = kind
        super().__init__(f"{kind.plural} must be from this notebook")


class ValidationErrors(ValueError):
    """
    A save was rejected. Carries every collected message so the caller sees
    all problems at once.
    """

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages: List[str] = list(messages)
        super().__init__("; ".join(self.messages))


class OrderIndexConflictError(RuntimeError):
    """
    An order index is already held by a sibling in the same scope.

    This is a data-integrity bug, not a validation failure. It must not be
    retried.
    """


class NotFoundError(LookupError):
    """A directly requested notebook, notable or note does not exist in scope."""

    def __init__(self, resource: str, resource_id: object) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")
