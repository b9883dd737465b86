"""User API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tabletop_scheduler.auth import get_current_user
from tabletop_scheduler.database import get_db
from tabletop_scheduler.errors import Conflict, InvalidInput
from tabletop_scheduler.models.user import User
from tabletop_scheduler.schemas.user import UserCreate, UserEnvelope, UserOut, UserUpdate

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Register the profile that auth tokens refer to by user id."""
    if db.query(User).filter(User.email == payload.email).first():
        raise Conflict("A user with this email already exists")

    user = User(email=payload.email, display_name=payload.display_name, dismissed_hints=[])
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s (%s)", user.user_id, user.display_name)
    return UserEnvelope(user=UserOut.model_validate(user))


@router.get("/me", response_model=UserEnvelope)
def get_me(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserOut.model_validate(current_user))


@router.patch("/me", response_model=UserEnvelope)
def update_me(
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update display name and onboarding progress (partial update)."""
    updates = payload.model_dump(exclude_unset=True)
    if "display_name" in updates:
        name = (updates["display_name"] or "").strip()
        if not name:
            raise InvalidInput("display_name cannot be empty")
        updates["display_name"] = name
    if updates.get("onboarding_completed") is None:
        updates.pop("onboarding_completed", None)
    if "dismissed_hints" in updates:
        # Keep first occurrence order, drop repeats
        updates["dismissed_hints"] = list(dict.fromkeys(updates["dismissed_hints"] or []))

    for field, value in updates.items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    logger.info("Updated user %s", current_user.user_id)
    return UserEnvelope(user=UserOut.model_validate(current_user))
