"""Structural checks for a proposed match before it is recorded."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
import uuid

from .errors import ValidationError
from .models import Player


PLAYER_SLOTS = ("team1_player1", "team1_player2", "team2_player1", "team2_player2")
SCORE_FIELDS = ("team1_score", "team2_score")


class SeasonTarget(Enum):
    """Where a validated match should be written."""

    EXPLICIT = "explicit"
    ACTIVE = "active"
    AUTO_CREATE = "auto_create"


@dataclass(frozen=True)
class ValidatedMatch:
    team1: Tuple[uuid.UUID, uuid.UUID]
    team2: Tuple[uuid.UUID, uuid.UUID]
    team1_score: int
    team2_score: int
    match_date: date
    season_id: Optional[uuid.UUID]
    target: SeasonTarget


def _slot_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_score(field_name: str, value: Any) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"missing score: {field_name} is required")
    if isinstance(value, bool):
        raise ValidationError(f"invalid score: {field_name} must be an integer")
    if isinstance(value, int):
        score = value
    elif isinstance(value, str):
        try:
            score = int(value.strip())
        except ValueError:
            raise ValidationError(f"invalid score: {field_name} must be an integer") from None
    else:
        raise ValidationError(f"invalid score: {field_name} must be an integer")
    if score < 0:
        raise ValidationError(f"invalid score: {field_name} must be 0 or higher")
    return score


def _parse_date(value: Any, today: Optional[date]) -> date:
    if value is None or value == "":
        return today or date.today()
    if isinstance(value, date):
        return value.date() if isinstance(value, datetime) else value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"invalid match date: {value!r}") from None


def _parse_season_id(value: Any) -> Optional[uuid.UUID]:
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"invalid season id: {value!r}") from None


def _player_index(players: Iterable[Player]) -> Dict[str, Player]:
    index: Dict[str, Player] = {}
    for player in players:
        index[player.key] = player
        index[str(player.id)] = player
    return index


def validate_match(
    payload: Mapping[str, Any],
    candidate_players: Iterable[Player],
    *,
    active_season_id: Optional[uuid.UUID] = None,
    today: Optional[date] = None,
) -> ValidatedMatch:
    """Check ``payload`` and resolve its players.

    Rules are applied in order and the first failure raises
    :class:`ValidationError`. Slots may name a player (case-insensitive) or
    carry the player's id. The season target is reported, never created.
    """

    slots = [_slot_text(payload.get(slot)) for slot in PLAYER_SLOTS]
    for slot, text in zip(PLAYER_SLOTS, slots):
        if not text:
            raise ValidationError(f"missing player: {slot} is required")

    seen = set()
    for text in slots:
        key = text.casefold()
        if key in seen:
            raise ValidationError(f"duplicate player: {text!r} appears more than once")
        seen.add(key)

    index = _player_index(candidate_players)
    resolved = []
    for text in slots:
        player = index.get(text.casefold())
        if player is None:
            raise ValidationError(f"unknown player: {text!r}")
        resolved.append(player.id)
    # A name in one slot and the same player's id in another.
    if len(set(resolved)) != len(resolved):
        raise ValidationError("duplicate player: the same player fills two slots")

    team1_score, team2_score = (
        _parse_score(name, payload.get(name)) for name in SCORE_FIELDS
    )

    season_id = _parse_season_id(payload.get("season_id"))
    if season_id is not None:
        target = SeasonTarget.EXPLICIT
    elif active_season_id is not None:
        season_id = active_season_id
        target = SeasonTarget.ACTIVE
    else:
        target = SeasonTarget.AUTO_CREATE

    return ValidatedMatch(
        team1=(resolved[0], resolved[1]),
        team2=(resolved[2], resolved[3]),
        team1_score=team1_score,
        team2_score=team2_score,
        match_date=_parse_date(payload.get("match_date"), today),
        season_id=season_id,
        target=target,
    )


__all__ = ["PLAYER_SLOTS", "SeasonTarget", "ValidatedMatch", "validate_match"]
