"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator


class UserCreate(BaseModel):
    email: str
    display_name: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value

    @field_validator("display_name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("display_name is required")
        return value


class UserUpdate(BaseModel):
    display_name: Optional[str] = None
    onboarding_completed: Optional[bool] = None
    dismissed_hints: Optional[list[str]] = None


class UserOut(BaseModel):
    user_id: str
    email: str
    display_name: str
    onboarding_completed: bool
    dismissed_hints: Optional[list[str]] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    user_id: str
    display_name: str
    email: str

    model_config = {"from_attributes": True}


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserOut
