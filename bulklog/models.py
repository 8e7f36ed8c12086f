from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=120)
    email: str = Field(max_length=190, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    body_weight_kg: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    height_cm: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    muscle_weight_kg: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    fat_percentage: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    created_at: datetime = Field(default_factory=utcnow)


class WorkoutSession(SQLModel, table=True):
    __tablename__ = "workout_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    workout_date: date
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=utcnow)


class StrengthSet(SQLModel, table=True):
    __tablename__ = "strength_sets"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="workout_sessions.id", ondelete="CASCADE", index=True)
    exercise_name: str = Field(max_length=120)
    set_order: int
    reps: int
    weight_kg: Decimal = Field(max_digits=10, decimal_places=2)


class CardioEntry(SQLModel, table=True):
    __tablename__ = "cardio_entries"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="workout_sessions.id", ondelete="CASCADE", index=True)
    activity_name: str = Field(max_length=120)
    time_minutes: Decimal = Field(max_digits=10, decimal_places=2)
    distance_km: Decimal = Field(max_digits=10, decimal_places=2)
    calories_burned: Decimal = Field(max_digits=10, decimal_places=2)
