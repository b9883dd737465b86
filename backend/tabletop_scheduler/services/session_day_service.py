"""Session-day service — DM-proposed play dates for a game.

Only the game's DM may touch its session days. A session day that does not
exist and one owned by another DM produce the same 404, so callers cannot
probe for existence.

Lifecycle: created (unconfirmed) → confirmed → deleted; deletion is allowed
from either state and there is no way back from confirmed.
"""
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tabletop_scheduler.errors import NotFoundOrForbidden
from tabletop_scheduler.models.game import Game, GameSessionDay
from tabletop_scheduler.services.game_service import get_owned_game

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("date", "start_time", "end_time", "notes")


def _get_owned_session_day(db: Session, session_day_id: str, actor_id: str) -> GameSessionDay:
    """Resolve a session day through its game and check the DM."""
    session_day = (
        db.query(GameSessionDay)
        .join(Game, Game.game_id == GameSessionDay.game_id)
        .filter(GameSessionDay.session_day_id == session_day_id, Game.dm_id == actor_id)
        .first()
    )
    if not session_day:
        raise NotFoundOrForbidden("Session day not found or access denied")
    return session_day


def list_session_days(db: Session, game_id: str, actor_id: str) -> list[GameSessionDay]:
    get_owned_game(db, game_id, actor_id)
    return (
        db.query(GameSessionDay)
        .filter(GameSessionDay.game_id == game_id)
        .order_by(GameSessionDay.date, GameSessionDay.start_time)
        .all()
    )


def create_session_days(
    db: Session,
    game_id: str,
    actor_id: str,
    items: list[dict[str, Any]],
) -> list[GameSessionDay]:
    """Create one session day per item.

    Every row is flushed on its own so a bad item fails at its own insert,
    but the batch commits together: any failure rolls the batch back and
    propagates to the caller.
    """
    get_owned_game(db, game_id, actor_id)

    created = []
    try:
        for item in items:
            session_day = GameSessionDay(
                game_id=game_id,
                date=item["date"],
                start_time=item.get("start_time"),
                end_time=item.get("end_time"),
                notes=item.get("notes") or None,
                is_confirmed=False,
            )
            db.add(session_day)
            db.flush()
            created.append(session_day)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Creating %d session days for game %s failed", len(items), game_id)
        raise

    for session_day in created:
        db.refresh(session_day)
    logger.info("Created %d session days for game %s", len(created), game_id)
    return created


def update_session_day(
    db: Session,
    session_day_id: str,
    actor_id: str,
    updates: dict[str, Any],
) -> GameSessionDay:
    session_day = _get_owned_session_day(db, session_day_id, actor_id)
    for field, value in updates.items():
        if field == "date" and value is None:
            continue
        if field == "notes":
            value = value or None
        if field in EDITABLE_FIELDS:
            setattr(session_day, field, value)
    db.commit()
    db.refresh(session_day)
    logger.info("Updated session day %s (%s)", session_day_id, ", ".join(sorted(updates)) or "no fields")
    return session_day


def confirm_session_day(db: Session, session_day_id: str, actor_id: str) -> GameSessionDay:
    """Mark a session day confirmed. Confirming twice is harmless."""
    session_day = _get_owned_session_day(db, session_day_id, actor_id)
    if not session_day.is_confirmed:
        session_day.is_confirmed = True
        db.commit()
        db.refresh(session_day)
        logger.info("Confirmed session day %s for game %s", session_day_id, session_day.game_id)
    return session_day


def delete_session_day(db: Session, session_day_id: str, actor_id: str) -> None:
    session_day = _get_owned_session_day(db, session_day_id, actor_id)
    db.delete(session_day)
    db.commit()
    logger.info("Deleted session day %s", session_day_id)
