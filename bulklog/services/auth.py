from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..db import get_session
from ..errors import DuplicateEmail, InvalidCredentials, StorageError, ValidationError
from ..models import User
from ..schemas import AuthOut, LoginIn, RegisterIn, UserEnvelope, UserOut
from ..security import TokenClaims, get_app_settings, hash_password, issue_token, require_auth, verify_password
from ..settings import Settings
from .profile import get_profile, user_projection

logger = logging.getLogger(__name__)

router = APIRouter()


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.exec(select(User).where(User.email == normalize_email(email)))
    return result.first()


async def register(
    session: AsyncSession,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    rounds: int = 12,
) -> UserOut:
    name = (name or "").strip()
    email = normalize_email(email or "")
    if not name or not email or not password:
        raise ValidationError("name, email and password are required.")

    # bcrypt is deliberately slow; keep it off the event loop
    password_hash = await run_in_threadpool(hash_password, password, rounds)
    user = User(name=name, email=email, password_hash=password_hash)
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.info("auth: duplicate registration for %s", email)
        raise DuplicateEmail() from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("auth: could not create account for %s", email)
        raise StorageError("Failed to create account.") from e

    await session.refresh(user)
    logger.info("auth: registered user %s", user.id)
    return user_projection(user)


async def authenticate(
    session: AsyncSession,
    email: Optional[str],
    password: Optional[str],
    rounds: int = 12,
) -> UserOut:
    if not email or not password:
        raise ValidationError("email and password are required.")

    user = await get_user_by_email(session, email)
    stored_hash = user.password_hash if user is not None else None
    matches = await run_in_threadpool(verify_password, password, stored_hash, rounds)
    if user is None or not matches:
        logger.warning("auth: failed login for %s", normalize_email(email))
        raise InvalidCredentials()
    return user_projection(user)


def _auth_response(settings: Settings, user: UserOut) -> AuthOut:
    token = issue_token(settings, user.id, user.email, user.name)
    return AuthOut(user=user, token=token)


@router.post("/auth/register", response_model=AuthOut, status_code=201)
async def register_route(
    payload: Optional[RegisterIn] = None,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> AuthOut:
    payload = payload or RegisterIn()
    user = await register(session, payload.name, payload.email, payload.password, settings.bcrypt_rounds)
    return _auth_response(settings, user)


@router.post("/auth/login", response_model=AuthOut)
async def login_route(
    payload: Optional[LoginIn] = None,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> AuthOut:
    payload = payload or LoginIn()
    user = await authenticate(session, payload.email, payload.password, settings.bcrypt_rounds)
    return _auth_response(settings, user)


@router.get("/me", response_model=UserEnvelope)
async def me(
    claims: TokenClaims = Depends(require_auth),
    session: AsyncSession = Depends(get_session),
) -> UserEnvelope:
    return UserEnvelope(user=await get_profile(session, claims.user_id))
