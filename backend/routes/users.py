"""Public user profiles and the investor leaderboard."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_session
from backend.models import User
from backend.schemas import InvestorBrief, UserPublic

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/leaderboard/investors", response_model=list[InvestorBrief])
async def investor_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
):
    stmt = (
        select(User)
        .where(User.user_type.in_(("investor", "both")), User.status == "active")
        .order_by(User.total_invested.desc(), User.id)
        .limit(limit)
    )
    return (await session.execute(stmt)).scalars().all()


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(user_id: str, session: AsyncSession = Depends(get_session)):
    user = await session.get(User, user_id)
    if user is None or user.status != "active":
        raise HTTPException(status_code=404, detail="User not found")
    return user
