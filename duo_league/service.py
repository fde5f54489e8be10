"""League service: players, matches and standings on top of one repository."""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union
import uuid

from .errors import StateError, ValidationError
from .models import Match, MatchOutcome, Player, StandingsRow
from .projection import ProjectionMethod, project
from .repository import InMemoryLeagueRepository
from .seasons import SeasonRegistry
from .standings import (
    MatchStats,
    StandingsOverview,
    aggregate,
    filter_matches,
    match_stats,
    overview,
)
from .validation import SeasonTarget, validate_match


logger = logging.getLogger(__name__)


class MatchOrder(Enum):
    """Match list orderings; a leading ``-`` means descending."""

    NEWEST_FIRST = "-created_at"
    OLDEST_FIRST = "created_at"
    LATEST_MATCH_DATE = "-match_date"
    EARLIEST_MATCH_DATE = "match_date"


class LeagueService:
    """Entry point used by the HTTP layer and scripts.

    ``repository`` must implement the player, season and match repository
    contracts from :mod:`duo_league.repository`.
    """

    def __init__(
        self,
        repository: Optional[InMemoryLeagueRepository] = None,
        *,
        today: Callable[[], date] = date.today,
        projection: Union[ProjectionMethod, str] = ProjectionMethod.VOLATILITY,
    ) -> None:
        self.repository = repository if repository is not None else InMemoryLeagueRepository()
        self.seasons = SeasonRegistry(self.repository, self.repository, today=today)
        self.projection = ProjectionMethod(projection)
        self._today = today

    # Player operations -------------------------------------------------
    def list_players(self) -> List[Player]:
        return self.repository.list_players()

    def add_player(self, name: str) -> Player:
        name = self._checked_player_name(name)
        player = self.repository.create_player(name)
        logger.info("player_created player=%s name=%r", player.id, player.name)
        return player

    def rename_player(self, player_id: uuid.UUID, name: str) -> Player:
        """Change the display name. Matches reference ids, so history follows."""

        self.repository.get_player(player_id)
        name = self._checked_player_name(name, exclude=player_id)
        return self.repository.update_player(player_id, name=name)

    def remove_player(self, player_id: uuid.UUID) -> None:
        player = self.repository.get_player(player_id)
        if any(match.involves(player_id) for match in self.repository.list_matches()):
            raise StateError(f"cannot delete player with matches: {player.name!r}")
        self.repository.delete_player(player_id)
        logger.info("player_deleted player=%s", player_id)

    # Match operations --------------------------------------------------
    def list_matches(
        self,
        season_id: Optional[uuid.UUID] = None,
        *,
        outcome: Optional[MatchOutcome] = None,
        player_id: Optional[uuid.UUID] = None,
        order: Union[MatchOrder, str] = MatchOrder.NEWEST_FIRST,
        limit: Optional[int] = None,
    ) -> List[Match]:
        try:
            order = MatchOrder(order)
        except ValueError:
            raise ValidationError(f"invalid match order: {order!r}") from None
        matches = self.repository.list_matches(season_id=season_id)
        if outcome is not None:
            matches = [match for match in matches if match.outcome is outcome]
        if player_id is not None:
            matches = [match for match in matches if match.involves(player_id)]
        field_name = order.value.lstrip("-")
        matches.sort(
            key=lambda match: getattr(match, field_name),
            reverse=order.value.startswith("-"),
        )
        if limit is not None:
            matches = matches[:limit]
        return matches

    def match_stats(self, season_id: Optional[uuid.UUID] = None) -> MatchStats:
        """Result counts for one season, or all time when ``season_id`` is None."""

        return match_stats(self._scoped_matches(season_id))

    def record_match(self, payload: Mapping[str, Any]) -> Match:
        """Validate ``payload`` and append it to its season.

        A locked explicit season is refused before anything else. When no
        season is active, a default one is created only once the payload has
        passed validation.
        """

        explicit_id = payload.get("season_id") or None
        if explicit_id is not None and not isinstance(explicit_id, uuid.UUID):
            try:
                explicit_id = uuid.UUID(str(explicit_id))
            except ValueError:
                raise ValidationError(f"invalid season id: {explicit_id!r}") from None
        season_id = self.seasons.resolve_write_target(explicit_id)

        validated = validate_match(
            {**payload, "season_id": explicit_id},
            self.repository.list_players(),
            active_season_id=season_id,
            today=self._today(),
        )
        if validated.target is SeasonTarget.AUTO_CREATE:
            season_id = self.seasons.ensure_writable_season().id
        else:
            season_id = validated.season_id

        match = self.repository.add_match(
            Match(
                id=uuid.uuid4(),
                season_id=season_id,
                team1_player1=validated.team1[0],
                team1_player2=validated.team1[1],
                team2_player1=validated.team2[0],
                team2_player2=validated.team2[1],
                team1_score=validated.team1_score,
                team2_score=validated.team2_score,
                match_date=validated.match_date,
            )
        )
        logger.info(
            "match_recorded match=%s season=%s score=%d-%d",
            match.id,
            match.season_id,
            match.team1_score,
            match.team2_score,
        )
        return match

    def edit_match(self, match_id: uuid.UUID, payload: Mapping[str, Any]) -> Match:
        """Replace players, scores or date of an existing match.

        The match stays in its season; moving matches between seasons goes
        through :meth:`SeasonRegistry.reassign_matches`.
        """

        existing = self.repository.get_match(match_id)
        self.seasons.require_writable(existing.season_id)

        requested = payload.get("season_id")
        if requested not in (None, "") and str(requested) != str(existing.season_id):
            raise ValidationError("season cannot be changed by editing a match")

        merged = {
            "team1_player1": existing.team1_player1,
            "team1_player2": existing.team1_player2,
            "team2_player1": existing.team2_player1,
            "team2_player2": existing.team2_player2,
            "team1_score": existing.team1_score,
            "team2_score": existing.team2_score,
            "match_date": existing.match_date,
        }
        merged.update({key: value for key, value in payload.items() if key in merged})
        merged["season_id"] = existing.season_id
        validated = validate_match(merged, self.repository.list_players())

        match = self.repository.update_match(
            match_id,
            team1_player1=validated.team1[0],
            team1_player2=validated.team1[1],
            team2_player1=validated.team2[0],
            team2_player2=validated.team2[1],
            team1_score=validated.team1_score,
            team2_score=validated.team2_score,
            match_date=validated.match_date,
        )
        logger.info("match_edited match=%s", match_id)
        return match

    def remove_match(self, match_id: uuid.UUID) -> None:
        match = self.repository.get_match(match_id)
        self.seasons.require_writable(match.season_id)
        self.repository.delete_match(match_id)
        logger.info("match_deleted match=%s season=%s", match_id, match.season_id)

    # Standings ---------------------------------------------------------
    def standings(
        self,
        season_id: Optional[uuid.UUID] = None,
        *,
        include_idle: bool = False,
        method: Optional[ProjectionMethod] = None,
    ) -> List[StandingsRow]:
        """Return the projected table for one season, or all time when ``season_id`` is None."""

        rows = aggregate(
            self.repository.list_players(),
            self._scoped_matches(season_id),
            include_idle=include_idle,
        )
        return project(rows, method=method or self.projection)

    def overview(self, season_id: Optional[uuid.UUID] = None) -> StandingsOverview:
        matches = self._scoped_matches(season_id)
        return overview(aggregate(self.repository.list_players(), matches), matches)

    # Helpers -----------------------------------------------------------
    def _scoped_matches(self, season_id: Optional[uuid.UUID]) -> List[Match]:
        if season_id is not None:
            self.seasons.get(season_id)
        return filter_matches(self.repository.list_matches(), season_id)

    def _checked_player_name(self, name: Optional[str], *, exclude: Optional[uuid.UUID] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("player name is required")
        for player in self.repository.list_players():
            if player.id != exclude and player.key == name.casefold():
                raise ValidationError(f"player name already exists: {name!r}")
        return name


__all__ = ["LeagueService", "MatchOrder"]
