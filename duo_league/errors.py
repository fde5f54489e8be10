"""Error types raised by the league core."""

from __future__ import annotations

from typing import Any


class LeagueError(Exception):
    """Base class for every error the league core raises."""

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


class ValidationError(LeagueError):
    """Malformed input: missing fields, duplicate players, bad scores."""


class StateError(LeagueError):
    """The request conflicts with the current lifecycle or dependent records."""


class NotFoundError(LeagueError):
    """An id that does not refer to any known record."""

    def __init__(self, kind: str, identifier: Any) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


__all__ = ["LeagueError", "NotFoundError", "StateError", "ValidationError"]
