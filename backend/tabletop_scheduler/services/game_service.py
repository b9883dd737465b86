"""Game service — game CRUD and the per-date game statistics view.

``aggregate_games`` is read-only: it joins games, their subscriptions and
session days with everyone's availability for a date range.
"""
import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session, selectinload

from tabletop_scheduler.errors import NotFoundOrForbidden
from tabletop_scheduler.models.availability import Availability
from tabletop_scheduler.models.game import Game, GameSessionDay, GameSubscription
from tabletop_scheduler.models.user import User

logger = logging.getLogger(__name__)


def _user_summary(user: User) -> dict[str, Any]:
    return {"user_id": user.user_id, "display_name": user.display_name, "email": user.email}


def _session_day_summary(session_day: Optional[GameSessionDay]) -> Optional[dict[str, Any]]:
    if session_day is None:
        return None
    return {
        "session_day_id": session_day.session_day_id,
        "game_id": session_day.game_id,
        "date": session_day.date,
        "start_time": session_day.start_time,
        "end_time": session_day.end_time,
        "notes": session_day.notes,
        "is_confirmed": session_day.is_confirmed,
        "created_at": session_day.created_at,
        "updated_at": session_day.updated_at,
    }


def overlaps_range(game: Game, start: date, end: date) -> bool:
    """True if the game's subscriptions count toward the range [start, end].

    Always-available games, and games missing either bound, always count.
    """
    if game.is_always_available:
        return True
    if game.start_date is None or game.end_date is None:
        return True
    return game.start_date <= end and game.end_date >= start


def create_game(
    db: Session,
    dm_id: str,
    name: str,
    description: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    is_always_available: bool = False,
    max_players: Optional[int] = None,
) -> Game:
    """Create a game owned by ``dm_id``. Input is validated by the schema."""
    game = Game(
        name=name,
        description=description,
        dm_id=dm_id,
        start_date=None if is_always_available else start_date,
        end_date=None if is_always_available else end_date,
        is_always_available=is_always_available,
        max_players=max_players,
        subscription_count=0,
    )
    db.add(game)
    db.commit()
    db.refresh(game)
    logger.info("Created game '%s' (%s) by DM %s", name, game.game_id, dm_id)
    return game


def get_game(db: Session, game_id: str) -> Game:
    game = db.query(Game).filter(Game.game_id == game_id).first()
    if not game:
        raise NotFoundOrForbidden("Game not found")
    return game


def get_owned_game(db: Session, game_id: str, actor_id: str) -> Game:
    """Fetch a game the actor runs; missing and not-owned look identical."""
    game = db.query(Game).filter(Game.game_id == game_id).first()
    if not game or game.dm_id != actor_id:
        raise NotFoundOrForbidden("Game not found or access denied")
    return game


def delete_game(db: Session, game_id: str, actor_id: str) -> None:
    game = get_owned_game(db, game_id, actor_id)
    db.delete(game)
    db.commit()
    logger.info("Deleted game %s by DM %s", game_id, actor_id)


def aggregate_games(db: Session, start: date, end: date, dates: list[date]) -> list[dict[str, Any]]:
    """Build per-game, per-date statistics for the range.

    For each date: how many users are available, which of them are, which
    relevant subscribers are available, and the game's session day (if any).
    """
    games = (
        db.query(Game)
        .options(
            selectinload(Game.dm),
            selectinload(Game.subscriptions).selectinload(GameSubscription.user),
            selectinload(Game.session_days),
        )
        .order_by(Game.created_at.desc())
        .all()
    )

    available_by_date: dict[date, list[User]] = {d: [] for d in dates}
    if dates:
        rows = (
            db.query(Availability, User)
            .join(User, User.user_id == Availability.user_id)
            .filter(Availability.date.in_(dates), Availability.is_available.is_(True))
            .order_by(User.display_name)
            .all()
        )
        for availability, user in rows:
            available_by_date[availability.date].append(user)

    formatted = []
    for game in games:
        relevant = list(game.subscriptions) if overlaps_range(game, start, end) else []

        session_by_date = {}
        for session_day in game.session_days:
            # First session day on a date wins
            session_by_date.setdefault(session_day.date, session_day)

        by_date = []
        for day in dates:
            available = available_by_date[day]
            available_ids = {u.user_id for u in available}
            subscribed = [sub.user for sub in relevant if sub.user_id in available_ids]
            by_date.append({
                "date": day,
                "total_available": len(available),
                "available_players": [_user_summary(u) for u in available],
                "subscribed_players": [_user_summary(u) for u in subscribed],
                "session_day": _session_day_summary(session_by_date.get(day)),
            })

        formatted.append({
            "game_id": game.game_id,
            "name": game.name,
            "description": game.description,
            "dm": _user_summary(game.dm),
            "start_date": game.start_date,
            "end_date": game.end_date,
            "is_always_available": game.is_always_available,
            "max_players": game.max_players,
            "total_subscriptions": len(relevant),
            "subscriber_ids": [sub.user_id for sub in game.subscriptions],
            "availability_by_date": by_date,
        })

    logger.info("Aggregated %d games over %d dates (%s..%s)", len(formatted), len(dates), start, end)
    return formatted
