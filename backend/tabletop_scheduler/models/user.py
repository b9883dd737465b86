"""User ORM model."""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, JSON
from sqlalchemy.sql import func
from tabletop_scheduler.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(100), nullable=False)
    # Onboarding progress, tracked server-side
    onboarding_completed = Column(Boolean, nullable=False, default=False)
    dismissed_hints = Column(JSON, nullable=True, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
