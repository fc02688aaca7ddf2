"""
Authentication helpers -- password hashing, bearer tokens, role guards.

Tokens are HS256 JWTs carrying the user id in ``sub``; routes depend on
``get_current_user`` / ``require_role(...)`` instead of parsing headers.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from backend.database import get_session
from backend.models import User
from config_env import JWT_ALGORITHM, JWT_EXPIRES_DAYS, JWT_SECRET

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def create_access_token(user_id: str, expires_days: int = JWT_EXPIRES_DAYS) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + dt.timedelta(days=expires_days),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id in *token*; raises 401 on expired or malformed tokens."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired.")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Token is not valid.")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token is not valid.")
    return user_id


async def _load_active_user(session: AsyncSession, user_id: str) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Token is not valid. User not found.")
    if user.status != "active":
        raise HTTPException(status_code=401, detail="Account is not active.")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    session: AsyncSession = Depends(get_session),
) -> User:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")
    user_id = decode_access_token(credentials.credentials)
    return await _load_active_user(session, user_id)


async def optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    session: AsyncSession = Depends(get_session),
) -> Optional[User]:
    """Like ``get_current_user`` but anonymous callers (or bad tokens) get None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        user_id = decode_access_token(credentials.credentials)
        return await _load_active_user(session, user_id)
    except HTTPException as e:
        logger.debug("Ignoring invalid optional token: %s", e.detail)
        return None


def require_role(*roles: str):
    """Dependency factory: the user's type must be in *roles* ("both" always passes)."""

    async def _check(user: User = Depends(get_current_user)) -> User:
        if user.user_type != "both" and user.user_type not in roles:
            raise HTTPException(
                status_code=403,
                detail=f"Access denied. Required role: {' or '.join(roles)}",
            )
        return user

    return _check


async def require_kyc(user: User = Depends(get_current_user)) -> User:
    if user.kyc_status != "verified":
        raise HTTPException(
            status_code=403,
            detail="KYC verification required to perform this action.",
        )
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin only.")
    return user
