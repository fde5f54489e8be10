"""Season lifecycle: scheduled -> active -> locked.

:class:`SeasonRegistry` is the one place that flips ``is_active``, so the
"at most one active season" rule holds whatever backend sits behind the
repositories. The deactivate-all-then-activate sweep is not atomic against
concurrent writers; callers sharing a backend across processes must
serialize activations themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, FrozenSet, List, Optional
import uuid

from .errors import NotFoundError, StateError, ValidationError
from .models import Season, SeasonState
from .repository import MatchRepository, SeasonRepository


logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: Dict[SeasonState, FrozenSet[SeasonState]] = {
    SeasonState.SCHEDULED: frozenset({SeasonState.ACTIVE, SeasonState.LOCKED}),
    # An active season returns to scheduled when another one is activated.
    SeasonState.ACTIVE: frozenset({SeasonState.LOCKED, SeasonState.SCHEDULED}),
    SeasonState.LOCKED: frozenset(),
}


@dataclass(frozen=True)
class SeasonSummary:
    season_id: uuid.UUID
    total_matches: int
    total_players: int
    first_match_date: Optional[date]
    last_match_date: Optional[date]


def default_season_name(today: date) -> str:
    return f"Season {today.year}"


class SeasonRegistry:
    """Owns every season transition and the write gate for matches."""

    def __init__(
        self,
        seasons: SeasonRepository,
        matches: MatchRepository,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._seasons = seasons
        self._matches = matches
        self._today = today

    # Queries -----------------------------------------------------------
    def list(self) -> List[Season]:
        return self._seasons.list_seasons()

    def get(self, season_id: uuid.UUID) -> Season:
        return self._seasons.get_season(season_id)

    def active(self) -> Optional[Season]:
        return self._seasons.get_active_season()

    def can_accept_matches(self, season_id: uuid.UUID) -> bool:
        try:
            season = self._seasons.get_season(season_id)
        except NotFoundError:
            return False
        return not season.is_locked

    def require_writable(self, season_id: uuid.UUID) -> Season:
        season = self._seasons.get_season(season_id)
        if season.is_locked:
            logger.info("season_write_rejected season=%s reason=locked", season_id)
            raise StateError(f"season is locked: {season.name!r} no longer accepts matches")
        return season

    # Transitions -------------------------------------------------------
    def create(
        self,
        name: str,
        *,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_active: bool = False,
    ) -> Season:
        """Insert a new scheduled season, activating it when requested."""

        name = self._checked_name(name)
        start_date = start_date or self._today()
        _check_date_range(start_date, end_date)

        season = self._seasons.add_season(
            Season(
                id=uuid.uuid4(),
                name=name,
                description=description,
                start_date=start_date,
                end_date=end_date,
            )
        )
        logger.info("season_created season=%s name=%r", season.id, season.name)
        if is_active:
            season = self._activate(season)
        return season

    def activate(self, season_id: uuid.UUID) -> Season:
        season = self._seasons.get_season(season_id)
        if season.is_active:
            return season
        self._check_transition(season, SeasonState.ACTIVE)
        return self._activate(season)

    def end_season(self, season_id: uuid.UUID, *, stamp_end_date: bool = True) -> Season:
        season = self._seasons.get_season(season_id)
        if season.is_locked:
            raise StateError(f"season is already locked: {season.name!r}")

        self._check_transition(season, SeasonState.LOCKED)

        changes = {"is_locked": True, "is_active": False}
        if stamp_end_date and season.end_date is None:
            changes["end_date"] = self._today()
        season = self._seasons.update_season(season_id, **changes)
        logger.info("season_locked season=%s end_date=%s", season.id, season.end_date)
        return season

    def update(
        self,
        season_id: uuid.UUID,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Season:
        """Edit season metadata. Locked seasons are read-only."""

        season = self._seasons.get_season(season_id)
        if season.is_locked:
            raise StateError(f"season is locked: {season.name!r} cannot be edited")

        changes = {}
        if name is not None:
            changes["name"] = self._checked_name(name, exclude=season_id)
        if description is not None:
            changes["description"] = description
        if start_date is not None:
            changes["start_date"] = start_date
        if end_date is not None:
            changes["end_date"] = end_date
        _check_date_range(
            changes.get("start_date", season.start_date),
            changes.get("end_date", season.end_date),
        )
        if not changes:
            return season
        return self._seasons.update_season(season_id, **changes)

    def delete(self, season_id: uuid.UUID) -> None:
        season = self._seasons.get_season(season_id)
        if self._matches.list_matches(season_id=season_id):
            raise StateError(f"cannot delete season with matches: {season.name!r}")
        self._seasons.delete_season(season_id)
        logger.info("season_deleted season=%s", season_id)

    # Match write targets -----------------------------------------------
    def resolve_write_target(self, explicit_id: Optional[uuid.UUID] = None) -> Optional[uuid.UUID]:
        """Return the season a new match goes to.

        ``None`` means no season is active and the caller has to materialize
        one with :meth:`ensure_writable_season`.
        """

        if explicit_id is not None:
            return self.require_writable(explicit_id).id
        active = self._seasons.get_active_season()
        if active is None:
            return None
        # The active season is never locked, end_season clears both flags.
        return active.id

    def ensure_writable_season(self, explicit_id: Optional[uuid.UUID] = None) -> Season:
        season_id = self.resolve_write_target(explicit_id)
        if season_id is not None:
            return self._seasons.get_season(season_id)

        today = self._today()
        taken = {season.name.casefold() for season in self._seasons.list_seasons()}
        name = default_season_name(today)
        suffix = 2
        while name.casefold() in taken:
            name = f"{default_season_name(today)} ({suffix})"
            suffix += 1
        season = self.create(name, start_date=today, is_active=True)
        logger.info("season_auto_created season=%s name=%r", season.id, season.name)
        return season

    def reassign_matches(self, from_id: uuid.UUID, to_id: uuid.UUID) -> int:
        """Move every match of ``from_id`` to ``to_id``; returns the count."""

        self.require_writable(from_id)
        self.require_writable(to_id)
        moved = 0
        for match in self._matches.list_matches(season_id=from_id):
            self._matches.update_match(match.id, season_id=to_id)
            moved += 1
        logger.info("matches_reassigned from=%s to=%s count=%d", from_id, to_id, moved)
        return moved

    def summary(self, season_id: uuid.UUID) -> SeasonSummary:
        self._seasons.get_season(season_id)
        matches = self._matches.list_matches(season_id=season_id)
        players = {player_id for match in matches for player_id in match.player_ids}
        dates = [match.match_date for match in matches]
        return SeasonSummary(
            season_id=season_id,
            total_matches=len(matches),
            total_players=len(players),
            first_match_date=min(dates) if dates else None,
            last_match_date=max(dates) if dates else None,
        )

    # Helpers -----------------------------------------------------------
    def _activate(self, season: Season) -> Season:
        for other in self._seasons.list_seasons():
            if other.is_active and other.id != season.id:
                self._seasons.update_season(other.id, is_active=False)
                logger.info("season_deactivated season=%s", other.id)
        season = self._seasons.update_season(season.id, is_active=True)
        logger.info("season_activated season=%s", season.id)
        return season

    def _check_transition(self, season: Season, target: SeasonState) -> None:
        current = season.state
        if target in ALLOWED_TRANSITIONS[current]:
            return
        if current is SeasonState.LOCKED:
            raise StateError(f"season is locked: {season.name!r} cannot become {target.value}")
        raise StateError(f"invalid season transition: {current.value} -> {target.value}")

    def _checked_name(self, name: Optional[str], *, exclude: Optional[uuid.UUID] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("season name is required")
        for season in self._seasons.list_seasons():
            if season.id != exclude and season.name.casefold() == name.casefold():
                raise ValidationError(f"season name already exists: {name!r}")
        return name


def _check_date_range(start_date: date, end_date: Optional[date]) -> None:
    if end_date is not None and end_date < start_date:
        raise ValidationError("end_date must be on or after start_date")


__all__ = [
    "ALLOWED_TRANSITIONS",
    "SeasonRegistry",
    "SeasonSummary",
    "default_season_name",
]
