"""Application-wide exception hierarchy for Learning Feed.

All custom exceptions subclass ``LearningFeedError`` so that the API layer
can translate the whole hierarchy into HTTP responses in one place.

Hierarchy::

    LearningFeedError
    ├── ValidationError    (field: str | None)   → HTTP 400
    ├── NotFoundError      (resource, item_id)   → HTTP 404
    └── InternalError                            → HTTP 500
"""

from __future__ import annotations


class LearningFeedError(Exception):
    """Base class for all Learning Feed exceptions."""


class ValidationError(LearningFeedError):
    """Raised when caller input is malformed or violates a lifecycle rule.

    Raised before any store mutation, so a failed validation never leaves
    partial state behind.

    Args:
        message: Human-readable description of the problem.
        field: Wire name of the first offending field (e.g. ``"title"``,
            ``"focus"``), or ``None`` when the error is not tied to one field.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(LearningFeedError):
    """Raised when a referenced record does not exist.

    Args:
        resource: Kind of record that was looked up (e.g. ``"content item"``).
        item_id: The identifier that matched nothing.
    """

    def __init__(self, resource: str, item_id: int) -> None:
        super().__init__(f"{resource.capitalize()} {item_id} not found")
        self.resource = resource
        self.item_id = item_id


class InternalError(LearningFeedError):
    """Raised for store or transport faults.

    The message is logged but never returned to the client.
    """
