from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel

from ..schemas import UserOut

# Body-fat percentage at or above which the fat-loss split is suggested
FAT_LOSS_THRESHOLD = 27.0
# Muscle mass (kg) below which a beginner full-body split is suggested
FULL_BODY_MUSCLE_THRESHOLD = 30.0


class PlanDay(BaseModel):
    day: str
    focus: str
    exercises: List[str]


FAT_LOSS_SPLIT = [
    ("Upper Push", ["Bench Press", "Overhead Press", "Dips"]),
    ("Lower + Cardio", ["Squat", "Romanian Deadlift", "20 min Incline Walk"]),
    ("Upper Pull", ["Barbell Row", "Lat Pulldown", "Face Pull"]),
    ("Conditioning", ["Bike Intervals", "Core Circuit"]),
    ("Leg Hypertrophy", ["Leg Press", "Walking Lunge", "Hamstring Curl"]),
    ("Upper Hypertrophy", ["Incline DB Press", "Cable Row", "Lateral Raise"]),
]

FULL_BODY_SPLIT = [
    ("Full Body A", ["Squat", "Bench Press", "Row"]),
    ("Cardio + Core", ["Jog", "Plank", "Hanging Knee Raise"]),
    ("Full Body B", ["Deadlift", "Overhead Press", "Pulldown"]),
    ("Mobility + Cardio", ["Cycle", "Hip Mobility", "Abs"]),
    ("Full Body C", ["Leg Press", "Incline Press", "Seated Row"]),
    ("Arms + Conditioning", ["Curls", "Pushdowns", "Rower"]),
]

PUSH_PULL_LEGS_SPLIT = [
    ("Push Heavy", ["Bench Press", "Overhead Press", "Triceps Pushdown"]),
    ("Pull Heavy", ["Deadlift", "Row", "Pull-Ups"]),
    ("Legs Heavy", ["Back Squat", "RDL", "Calf Raise"]),
    ("Push Volume", ["Incline DB Press", "Machine Press", "Lateral Raise"]),
    ("Pull Volume", ["Pulldown", "Seated Row", "Rear Delt Fly"]),
    ("Leg Volume + Cardio", ["Leg Press", "Lunge", "15 min Finisher"]),
]


def _metric(profile: Union[UserOut, Mapping[str, Any], None], field: str, alias: str) -> float:
    if profile is None:
        return 0.0
    if isinstance(profile, Mapping):
        value: Optional[Any] = profile.get(alias, profile.get(field))
    else:
        value = getattr(profile, field, None)
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def suggest_six_day_plan(profile: Union[UserOut, Mapping[str, Any], None]) -> List[PlanDay]:
    """Pick a six-day split from the user's body metrics.

    Accepts a ``UserOut`` or the raw ``user`` dict returned by the API.
    Missing metrics count as zero.
    """
    fat = _metric(profile, "fat_percentage", "fatPercentage")
    muscle = _metric(profile, "muscle_weight_kg", "muscleWeightKg")

    if fat >= FAT_LOSS_THRESHOLD:
        split = FAT_LOSS_SPLIT
    elif muscle < FULL_BODY_MUSCLE_THRESHOLD:
        split = FULL_BODY_SPLIT
    else:
        split = PUSH_PULL_LEGS_SPLIT

    return [
        PlanDay(day=f"Day {i}", focus=focus, exercises=list(exercises))
        for i, (focus, exercises) in enumerate(split, start=1)
    ]
