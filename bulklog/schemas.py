from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # wire format is camelCase, attributes stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


# ---- requests ----

class RegisterIn(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileIn(CamelModel):
    body_weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    muscle_weight_kg: Optional[float] = None
    fat_percentage: Optional[float] = None


class SetIn(CamelModel):
    reps: Optional[int] = None
    weight_kg: Optional[float] = None


class StrengthEntryIn(CamelModel):
    exercise_name: Optional[str] = None
    sets: Optional[List[SetIn]] = None

    @field_validator("sets", mode="before")
    @classmethod
    def _ignore_malformed_sets(cls, value: Any) -> Any:
        # an entry whose sets is not a list is skipped, not rejected
        if not isinstance(value, list):
            return None
        return [s if isinstance(s, (dict, SetIn)) else {} for s in value]


class CardioEntryIn(CamelModel):
    activity_name: Optional[str] = None
    time_minutes: Optional[float] = None
    distance_km: Optional[float] = None
    calories_burned: Optional[float] = None


class WorkoutIn(CamelModel):
    workout_date: Optional[date] = None
    notes: Optional[str] = ""
    strength: List[StrengthEntryIn] = []
    cardio: List[CardioEntryIn] = []


# ---- responses ----

class UserOut(CamelModel):
    id: int
    name: str
    email: str
    body_weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    muscle_weight_kg: Optional[float] = None
    fat_percentage: Optional[float] = None
    profile_completed: bool = False


class UserEnvelope(CamelModel):
    user: UserOut


class AuthOut(CamelModel):
    user: UserOut
    token: str


class WorkoutSaved(CamelModel):
    message: str
    session_id: int


class StrengthSetOut(CamelModel):
    exercise_name: str
    set_order: int
    reps: int
    weight_kg: float


class CardioEntryOut(CamelModel):
    activity_name: str
    time_minutes: float
    distance_km: float
    calories_burned: float


class WorkoutOut(CamelModel):
    id: int
    workout_date: date
    notes: str = ""
    created_at: Optional[datetime] = None
    strength: List[StrengthSetOut] = []
    cardio: List[CardioEntryOut] = []


class WorkoutList(CamelModel):
    workouts: List[WorkoutOut]


class Health(BaseModel):
    ok: bool = True
