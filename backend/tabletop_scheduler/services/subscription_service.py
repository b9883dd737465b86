"""Subscription service — joining and leaving games.

Join is idempotent and capacity-checked. The cap is enforced by a
conditional UPDATE on ``games.subscription_count`` (backed by a CHECK
constraint) and duplicates by a unique constraint, so two racing requests
cannot both slip past a pre-check.
"""
import logging

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tabletop_scheduler.errors import CapacityExceeded, NotFoundOrForbidden
from tabletop_scheduler.models.game import Game, GameSubscription

logger = logging.getLogger(__name__)


def _find_subscription(db: Session, game_id: str, user_id: str):
    return (
        db.query(GameSubscription)
        .filter(GameSubscription.game_id == game_id, GameSubscription.user_id == user_id)
        .first()
    )


def join_game(db: Session, game_id: str, user_id: str) -> tuple[GameSubscription, bool]:
    """Subscribe ``user_id`` to a game.

    Returns ``(subscription, created)``; an existing subscription is
    returned unchanged with ``created=False``.

    Raises:
        NotFoundOrForbidden: the game does not exist
        CapacityExceeded: the game already has ``max_players`` subscribers
    """
    game = db.query(Game).filter(Game.game_id == game_id).first()
    if not game:
        raise NotFoundOrForbidden("Game not found")

    existing = _find_subscription(db, game_id, user_id)
    if existing:
        return existing, False

    # Claim a seat atomically; zero rows means the game is full
    claimed = db.execute(
        update(Game)
        .where(
            Game.game_id == game_id,
            or_(Game.max_players.is_(None), Game.subscription_count < Game.max_players),
        )
        .values(subscription_count=Game.subscription_count + 1)
        .execution_options(synchronize_session=False)
    ).rowcount
    if claimed == 0:
        db.rollback()
        # A concurrent join by the same user may have taken the last seat
        existing = _find_subscription(db, game_id, user_id)
        if existing:
            return existing, False
        logger.warning("User %s rejected from full game %s (max %s)", user_id, game_id, game.max_players)
        raise CapacityExceeded()

    subscription = GameSubscription(game_id=game_id, user_id=user_id)
    db.add(subscription)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent join by the same user
        db.rollback()
        existing = _find_subscription(db, game_id, user_id)
        if existing is None:
            raise
        return existing, False

    db.refresh(subscription)
    logger.info("User %s joined game %s", user_id, game_id)
    return subscription, True


def leave_game(db: Session, game_id: str, user_id: str) -> int:
    """Remove the user's subscription(s); succeeds even if none existed."""
    removed = (
        db.query(GameSubscription)
        .filter(GameSubscription.game_id == game_id, GameSubscription.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if removed:
        db.execute(
            update(Game)
            .where(Game.game_id == game_id)
            .values(subscription_count=Game.subscription_count - removed)
            .execution_options(synchronize_session=False)
        )
    db.commit()
    logger.info("User %s left game %s (%d subscriptions removed)", user_id, game_id, removed)
    return removed
