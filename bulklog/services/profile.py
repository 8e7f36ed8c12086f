from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..db import get_session
from ..errors import NotFound, StorageError, ValidationError
from ..models import User
from ..schemas import ProfileIn, UserEnvelope, UserOut
from ..security import TokenClaims, require_auth

logger = logging.getLogger(__name__)

router = APIRouter()

METRIC_FIELDS = ("body_weight_kg", "height_cm", "muscle_weight_kg", "fat_percentage")


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def user_projection(user: User) -> UserOut:
    """Public view of a user row; never carries the password hash."""
    metrics = {field: _as_float(getattr(user, field)) for field in METRIC_FIELDS}
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        profile_completed=all(value is not None for value in metrics.values()),
        **metrics,
    )


async def get_user_row(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.exec(select(User).where(User.id == user_id))
    return result.first()


async def get_profile(session: AsyncSession, user_id: int) -> UserOut:
    user = await get_user_row(session, user_id)
    if user is None:
        raise NotFound("User not found.")
    return user_projection(user)


async def update_profile(session: AsyncSession, user_id: int, metrics: ProfileIn) -> UserOut:
    # No partial updates: every metric must be supplied
    if any(getattr(metrics, field) is None for field in METRIC_FIELDS):
        raise ValidationError("bodyWeightKg, heightCm, muscleWeightKg and fatPercentage are required.")

    user = await get_user_row(session, user_id)
    if user is None:
        raise NotFound("User not found.")

    for field in METRIC_FIELDS:
        setattr(user, field, Decimal(str(getattr(metrics, field))))
    session.add(user)
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("profile: update failed for user %s", user_id)
        raise StorageError("Could not update profile.") from e
    await session.refresh(user)
    return user_projection(user)


@router.put("/profile", response_model=UserEnvelope)
async def put_profile(
    payload: Optional[ProfileIn] = None,
    claims: TokenClaims = Depends(require_auth),
    session: AsyncSession = Depends(get_session),
) -> UserEnvelope:
    user = await update_profile(session, claims.user_id, payload or ProfileIn())
    return UserEnvelope(user=user)
