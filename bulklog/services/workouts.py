from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..db import get_session
from ..errors import StorageError, ValidationError
from ..models import CardioEntry, StrengthSet, WorkoutSession
from ..schemas import (
    CardioEntryIn,
    CardioEntryOut,
    StrengthEntryIn,
    StrengthSetOut,
    WorkoutIn,
    WorkoutList,
    WorkoutOut,
    WorkoutSaved,
)
from ..security import TokenClaims, require_auth

logger = logging.getLogger(__name__)

router = APIRouter()


def _decimal(value: Optional[float]) -> Decimal:
    return Decimal(str(value or 0))


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive values; they were written as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _strength_rows(session_id: int, entries: Sequence[StrengthEntryIn]) -> List[StrengthSet]:
    rows: List[StrengthSet] = []
    for entry in entries:
        exercise_name = (entry.exercise_name or "").strip()
        if not exercise_name or not entry.sets:
            continue
        for order, s in enumerate(entry.sets, start=1):
            rows.append(
                StrengthSet(
                    session_id=session_id,
                    exercise_name=exercise_name,
                    set_order=order,
                    reps=int(s.reps or 0),
                    weight_kg=_decimal(s.weight_kg),
                )
            )
    return rows


def _cardio_rows(session_id: int, entries: Sequence[CardioEntryIn]) -> List[CardioEntry]:
    rows: List[CardioEntry] = []
    for entry in entries:
        activity_name = (entry.activity_name or "").strip()
        if not activity_name:
            continue
        rows.append(
            CardioEntry(
                session_id=session_id,
                activity_name=activity_name,
                time_minutes=_decimal(entry.time_minutes),
                distance_km=_decimal(entry.distance_km),
                calories_burned=_decimal(entry.calories_burned),
            )
        )
    return rows


async def save_workout(
    session: AsyncSession,
    user_id: int,
    workout_date: Optional[date],
    notes: Optional[str] = "",
    strength: Sequence[StrengthEntryIn] = (),
    cardio: Sequence[CardioEntryIn] = (),
) -> int:
    """Persist a session and all of its child rows in one transaction.

    Entries with a blank exercise/activity name are skipped. Any storage
    failure rolls back the whole save, so a session is never visible
    without its sets and cardio rows.
    """
    if workout_date is None:
        raise ValidationError("workoutDate is required.")

    try:
        workout = WorkoutSession(user_id=user_id, workout_date=workout_date, notes=notes or "")
        session.add(workout)
        await session.flush()

        strength_rows = _strength_rows(workout.id, strength)
        cardio_rows = _cardio_rows(workout.id, cardio)
        for row in strength_rows + cardio_rows:
            session.add(row)
            await session.flush()

        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("workouts: save rolled back for user %s", user_id)
        raise StorageError("Could not save workout.") from e

    logger.info(
        "workouts: saved session %s for user %s (%d sets, %d cardio)",
        workout.id, user_id, len(strength_rows), len(cardio_rows),
    )
    return workout.id


async def list_workouts(session: AsyncSession, user_id: int) -> List[WorkoutOut]:
    sessions_result = await session.exec(
        select(WorkoutSession)
        .where(WorkoutSession.user_id == user_id)
        .order_by(WorkoutSession.workout_date.desc(), WorkoutSession.id.desc())
    )
    sessions = sessions_result.all()
    if not sessions:
        return []

    session_ids = [s.id for s in sessions]

    strength_result = await session.exec(
        select(StrengthSet)
        .where(StrengthSet.session_id.in_(session_ids))
        .order_by(StrengthSet.session_id.desc(), StrengthSet.exercise_name, StrengthSet.set_order)
    )
    cardio_result = await session.exec(
        select(CardioEntry)
        .where(CardioEntry.session_id.in_(session_ids))
        .order_by(CardioEntry.session_id.desc(), CardioEntry.activity_name)
    )

    # Group by session id; rows keep the order the queries returned them in
    strength_by_session: Dict[int, List[StrengthSetOut]] = {}
    for row in strength_result.all():
        strength_by_session.setdefault(row.session_id, []).append(
            StrengthSetOut(
                exercise_name=row.exercise_name,
                set_order=row.set_order,
                reps=row.reps,
                weight_kg=float(row.weight_kg),
            )
        )

    cardio_by_session: Dict[int, List[CardioEntryOut]] = {}
    for row in cardio_result.all():
        cardio_by_session.setdefault(row.session_id, []).append(
            CardioEntryOut(
                activity_name=row.activity_name,
                time_minutes=float(row.time_minutes),
                distance_km=float(row.distance_km),
                calories_burned=float(row.calories_burned),
            )
        )

    return [
        WorkoutOut(
            id=s.id,
            workout_date=s.workout_date,
            notes=s.notes or "",
            created_at=_as_utc(s.created_at),
            strength=strength_by_session.get(s.id, []),
            cardio=cardio_by_session.get(s.id, []),
        )
        for s in sessions
    ]


@router.post("/workouts", response_model=WorkoutSaved, status_code=201)
async def create_workout(
    payload: Optional[WorkoutIn] = None,
    claims: TokenClaims = Depends(require_auth),
    session: AsyncSession = Depends(get_session),
) -> WorkoutSaved:
    payload = payload or WorkoutIn()
    session_id = await save_workout(
        session,
        claims.user_id,
        payload.workout_date,
        payload.notes,
        payload.strength,
        payload.cardio,
    )
    return WorkoutSaved(message="Workout saved.", session_id=session_id)


@router.get("/workouts", response_model=WorkoutList)
async def get_workouts(
    claims: TokenClaims = Depends(require_auth),
    session: AsyncSession = Depends(get_session),
) -> WorkoutList:
    return WorkoutList(workouts=await list_workouts(session, claims.user_id))
