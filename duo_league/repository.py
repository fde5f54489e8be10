"""Repository contracts and the in-memory backend for the duo_league models."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional, Protocol
import uuid

from .errors import NotFoundError
from .models import Match, Player, Season


class PlayerRepository(Protocol):
    """Storage contract for players.

    Callers must refuse ``delete_player`` for players that appear in a match;
    the repository does not check references.
    """

    def list_players(self) -> List[Player]: ...

    def get_player(self, player_id: uuid.UUID) -> Player: ...

    def create_player(self, name: str) -> Player: ...

    def update_player(self, player_id: uuid.UUID, **changes: Any) -> Player: ...

    def delete_player(self, player_id: uuid.UUID) -> None: ...


class SeasonRepository(Protocol):
    def list_seasons(self) -> List[Season]: ...

    def get_season(self, season_id: uuid.UUID) -> Season: ...

    def add_season(self, season: Season) -> Season: ...

    def update_season(self, season_id: uuid.UUID, **changes: Any) -> Season: ...

    def delete_season(self, season_id: uuid.UUID) -> None: ...

    def get_active_season(self) -> Optional[Season]: ...


class MatchRepository(Protocol):
    def list_matches(self, season_id: Optional[uuid.UUID] = None) -> List[Match]: ...

    def get_match(self, match_id: uuid.UUID) -> Match: ...

    def add_match(self, match: Match) -> Match: ...

    def update_match(self, match_id: uuid.UUID, **changes: Any) -> Match: ...

    def delete_match(self, match_id: uuid.UUID) -> None: ...


class InMemoryLeagueRepository:
    """Process-local backend implementing all three repository contracts.

    Records are kept in insertion order, which is the order ``list_*`` returns.
    """

    def __init__(self) -> None:
        self._players: Dict[uuid.UUID, Player] = {}
        self._seasons: Dict[uuid.UUID, Season] = {}
        self._matches: Dict[uuid.UUID, Match] = {}
        self._lock = threading.RLock()

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    @staticmethod
    def _lookup(table: Dict[uuid.UUID, Any], kind: str, key: uuid.UUID) -> Any:
        try:
            return table[key]
        except KeyError:
            raise NotFoundError(kind, key) from None

    # Player operations -------------------------------------------------
    def list_players(self) -> List[Player]:
        with self._transaction():
            return list(self._players.values())

    def get_player(self, player_id: uuid.UUID) -> Player:
        with self._transaction():
            return self._lookup(self._players, "player", player_id)

    def create_player(self, name: str) -> Player:
        player = Player(id=uuid.uuid4(), name=name)
        with self._transaction():
            self._players[player.id] = player
        return player

    def update_player(self, player_id: uuid.UUID, **changes: Any) -> Player:
        with self._transaction():
            player = replace(self._lookup(self._players, "player", player_id), **changes)
            self._players[player_id] = player
        return player

    def delete_player(self, player_id: uuid.UUID) -> None:
        with self._transaction():
            self._lookup(self._players, "player", player_id)
            del self._players[player_id]

    # Season operations -------------------------------------------------
    def list_seasons(self) -> List[Season]:
        with self._transaction():
            return list(self._seasons.values())

    def get_season(self, season_id: uuid.UUID) -> Season:
        with self._transaction():
            return self._lookup(self._seasons, "season", season_id)

    def add_season(self, season: Season) -> Season:
        with self._transaction():
            self._seasons[season.id] = season
        return season

    def update_season(self, season_id: uuid.UUID, **changes: Any) -> Season:
        with self._transaction():
            season = replace(self._lookup(self._seasons, "season", season_id), **changes)
            self._seasons[season_id] = season
        return season

    def delete_season(self, season_id: uuid.UUID) -> None:
        with self._transaction():
            self._lookup(self._seasons, "season", season_id)
            del self._seasons[season_id]

    def get_active_season(self) -> Optional[Season]:
        with self._transaction():
            for season in self._seasons.values():
                if season.is_active:
                    return season
        return None

    # Match operations --------------------------------------------------
    def list_matches(self, season_id: Optional[uuid.UUID] = None) -> List[Match]:
        with self._transaction():
            matches = list(self._matches.values())
        if season_id is None:
            return matches
        return [match for match in matches if match.season_id == season_id]

    def get_match(self, match_id: uuid.UUID) -> Match:
        with self._transaction():
            return self._lookup(self._matches, "match", match_id)

    def add_match(self, match: Match) -> Match:
        with self._transaction():
            self._matches[match.id] = match
        return match

    def update_match(self, match_id: uuid.UUID, **changes: Any) -> Match:
        with self._transaction():
            match = replace(self._lookup(self._matches, "match", match_id), **changes)
            self._matches[match_id] = match
        return match

    def delete_match(self, match_id: uuid.UUID) -> None:
        with self._transaction():
            self._lookup(self._matches, "match", match_id)
            del self._matches[match_id]


__all__ = [
    "InMemoryLeagueRepository",
    "MatchRepository",
    "PlayerRepository",
    "SeasonRepository",
]
