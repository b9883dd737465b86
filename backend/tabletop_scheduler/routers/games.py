"""Game and subscription API routes."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from tabletop_scheduler.auth import get_current_user
from tabletop_scheduler.database import get_db
from tabletop_scheduler.models.user import User
from tabletop_scheduler.schemas.common import MessageOut
from tabletop_scheduler.schemas.game import (
    GameCreate,
    GameEnvelope,
    GameListOut,
    GameOut,
    SubscriptionEnvelope,
    SubscriptionOut,
)
from tabletop_scheduler.services import game_service, subscription_service
from tabletop_scheduler.services.date_range import generate_date_range, resolve_range

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=GameListOut)
def list_games(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """All games with per-date availability statistics for the range."""
    start, end = resolve_range(db, current_user.user_id, start_date, end_date)
    dates = generate_date_range(start, end)
    games = game_service.aggregate_games(db, start, end, dates)
    return GameListOut(games=games, dates=dates, start_date=start, end_date=end)


@router.post("/", response_model=GameEnvelope, status_code=status.HTTP_201_CREATED)
def create_game(
    payload: GameCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a game run by the caller."""
    game = game_service.create_game(
        db=db,
        dm_id=current_user.user_id,
        name=payload.name,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_always_available=payload.is_always_available,
        max_players=payload.max_players,
    )
    return GameEnvelope(message="Game created successfully", game=GameOut.model_validate(game))


@router.get("/{game_id}", response_model=GameEnvelope)
def get_game(
    game_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    game = game_service.get_game(db, game_id)
    return GameEnvelope(game=GameOut.model_validate(game))


@router.delete("/{game_id}", response_model=MessageOut)
def delete_game(
    game_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a game the caller runs, with its subscriptions and session days."""
    game_service.delete_game(db, game_id, current_user.user_id)
    return MessageOut(message="Game deleted successfully")


@router.post("/{game_id}/subscribe", response_model=SubscriptionEnvelope)
def subscribe(
    game_id: str,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Join a game. Joining again returns the existing subscription."""
    subscription, created = subscription_service.join_game(db, game_id, current_user.user_id)
    if created:
        response.status_code = status.HTTP_201_CREATED
        message = "Subscribed to game successfully"
    else:
        message = "Already subscribed to game"
    return SubscriptionEnvelope(
        message=message,
        created=created,
        subscription=SubscriptionOut.model_validate(subscription),
    )


@router.delete("/{game_id}/subscribe", response_model=MessageOut)
def unsubscribe(
    game_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Leave a game. Succeeds even when the caller was not subscribed."""
    subscription_service.leave_game(db, game_id, current_user.user_id)
    return MessageOut(message="Unsubscribed from game successfully")
