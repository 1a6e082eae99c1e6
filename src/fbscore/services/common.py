"""Lookup helpers shared by the services."""

from __future__ import annotations

from typing import Type, TypeVar

from sqlalchemy.orm import Session

from fbscore.db.models import Base, Player
from fbscore.errors import NotFound

ModelT = TypeVar("ModelT", bound=Base)

ACTION_ACCEPT = "accept"
ACTION_REJECT = "reject"
APPROVAL_ACTIONS = (ACTION_ACCEPT, ACTION_REJECT)


def get_or_404(db: Session, model: Type[ModelT], record_id: int, label: str) -> ModelT:
    """Load a row by primary key or raise NotFound('<label> not found')."""
    row = db.get(model, record_id)
    if row is None:
        raise NotFound(label, record_id)
    return row


def current_player(db: Session, user_id: int) -> Player | None:
    """The user's roster entry, if they are on a team."""
    return db.query(Player).filter(Player.user_id == user_id).first()


def jersey_taken(db: Session, team_id: int, player_no: str) -> bool:
    return (
        db.query(Player.id)
        .filter(Player.team_id == team_id, Player.player_no == player_no)
        .first()
        is not None
    )
