"""Domain errors surfaced to the admin console and the public display.

Every error carries a single human-readable message; routers turn them into
``{"error": message}`` responses with the matching ``status_code``.
"""

from __future__ import annotations


class BoardError(Exception):
    """Base exception for roster board errors."""

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(BoardError):
    """A location is missing a configuration step required by the operation."""


class NoUpcomingPlanError(ConfigurationError):
    """The linked service type has no plan scheduled in the future."""

    status_code = 404


class NotFoundError(BoardError):
    """Unknown location, person, position or microphone."""

    status_code = 404


class HierarchyError(BoardError):
    """The upstream folder tree is cyclic or deeper than allowed."""

    status_code = 422


class PrimaryLocationError(BoardError):
    """The primary location cannot be removed while other locations exist."""


class InvalidInputError(BoardError):
    """A value supplied by the admin is malformed (slug, timezone, name)."""


class ConflictError(BoardError):
    """The change collides with an existing row (duplicate slug)."""

    status_code = 409
