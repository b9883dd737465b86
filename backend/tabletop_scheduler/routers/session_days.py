"""Session-day API routes — DM only."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tabletop_scheduler.auth import get_current_user
from tabletop_scheduler.database import get_db
from tabletop_scheduler.models.user import User
from tabletop_scheduler.schemas.common import MessageOut
from tabletop_scheduler.schemas.session_day import (
    SessionDayBatchCreate,
    SessionDayEnvelope,
    SessionDayListOut,
    SessionDayOut,
    SessionDayUpdate,
)
from tabletop_scheduler.services import session_day_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=SessionDayListOut)
def list_session_days(
    game_id: str = Query(..., description="Game whose session days to list"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session_days = session_day_service.list_session_days(db, game_id, current_user.user_id)
    return SessionDayListOut(session_days=[SessionDayOut.model_validate(sd) for sd in session_days])


@router.post("/", response_model=SessionDayListOut, status_code=status.HTTP_201_CREATED)
def create_session_days(
    payload: SessionDayBatchCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Propose one or more session days for a game the caller runs."""
    session_days = session_day_service.create_session_days(
        db=db,
        game_id=payload.game_id,
        actor_id=current_user.user_id,
        items=[item.model_dump() for item in payload.session_days],
    )
    return SessionDayListOut(
        message="Session days created successfully",
        session_days=[SessionDayOut.model_validate(sd) for sd in session_days],
    )


@router.put("/{session_day_id}", response_model=SessionDayEnvelope)
def update_session_day(
    session_day_id: str,
    payload: SessionDayUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the date, times or notes of a session day."""
    session_day = session_day_service.update_session_day(
        db, session_day_id, current_user.user_id, payload.model_dump(exclude_unset=True)
    )
    return SessionDayEnvelope(session_day=SessionDayOut.model_validate(session_day))


@router.post("/{session_day_id}/confirm", response_model=SessionDayEnvelope)
def confirm_session_day(
    session_day_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session_day = session_day_service.confirm_session_day(db, session_day_id, current_user.user_id)
    return SessionDayEnvelope(session_day=SessionDayOut.model_validate(session_day))


@router.delete("/{session_day_id}", response_model=MessageOut)
def delete_session_day(
    session_day_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session_day_service.delete_session_day(db, session_day_id, current_user.user_id)
    return MessageOut(message="Session day deleted successfully")
