"""Startup listings -- browse, detail, create / edit, reactions, progress posts."""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_session
from backend.models import Startup, StartupReaction, StartupUpdate, User
from backend.schemas import (
    BookmarkResponse,
    LikeResponse,
    ModerationRequest,
    Pagination,
    StartupBrief,
    StartupCreate,
    StartupDetail,
    StartupEdit,
    StartupListResponse,
    UpdatePostOut,
    UpdatePostRequest,
)
from backend.security import get_current_user, optional_user, require_admin, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/startups", tags=["startups"])

SORTS = {
    "newest": (Startup.published_at.desc(), Startup.created_at.desc()),
    "trending": (Startup.views.desc(), Startup.likes.desc()),
    "funding_progress": (Startup.current_amount.desc(),),
    "ai_score": (Startup.ai_score_overall.desc(),),
}

PUBLIC_STATUSES = ("active", "funded")


def listed():
    """Filter for startups visible in public listings."""
    return (Startup.status == "active", Startup.moderation_status == "approved")


def paginate(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        current_page=page,
        total_pages=math.ceil(total / limit) if total else 0,
        total_count=total,
        has_next=page * limit < total,
        has_prev=page > 1,
    )


async def user_reactions(
    session: AsyncSession, user: Optional[User], startup_ids: list[str],
) -> tuple[set[str], set[str]]:
    """(liked ids, bookmarked ids) of *user* among *startup_ids*."""
    if user is None or not startup_ids:
        return set(), set()
    rows = (
        await session.execute(
            select(StartupReaction.startup_id, StartupReaction.kind).where(
                StartupReaction.user_id == user.id,
                StartupReaction.startup_id.in_(startup_ids),
            )
        )
    ).all()
    liked = {sid for sid, kind in rows if kind == "like"}
    bookmarked = {sid for sid, kind in rows if kind == "bookmark"}
    return liked, bookmarked


async def briefs(
    session: AsyncSession, startups: list[Startup], user: Optional[User],
) -> list[StartupBrief]:
    liked, bookmarked = await user_reactions(session, user, [s.id for s in startups])
    out = []
    for s in startups:
        item = StartupBrief.model_validate(s)
        if user is not None:
            item = item.model_copy(update={
                "is_liked": s.id in liked,
                "is_bookmarked": s.id in bookmarked,
            })
        out.append(item)
    return out


async def get_startup_or_404(session: AsyncSession, startup_id: str) -> Startup:
    startup = await session.get(Startup, startup_id)
    if startup is None:
        raise HTTPException(status_code=404, detail="Startup not found")
    return startup


def ensure_visible(startup: Startup, user: Optional[User]) -> None:
    """Unpublished startups only exist for their founder and admins (404 otherwise)."""
    owner_or_admin = user is not None and (user.id == startup.founder_id or user.is_admin)
    if startup.status not in PUBLIC_STATUSES and not owner_or_admin:
        raise HTTPException(status_code=404, detail="Startup not found")


def ensure_founder(startup: Startup, user: User, action: str = "update this startup"):
    if startup.founder_id != user.id:
        raise HTTPException(
            status_code=403,
            detail=f"Access denied. Only the founder can {action}.",
        )


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

@router.get("/", response_model=StartupListResponse)
async def list_startups(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sector: Optional[str] = None,
    stage: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    min_funding: Optional[float] = Query(None, ge=0),
    max_funding: Optional[float] = Query(None, ge=0),
    sort_by: Literal["newest", "trending", "funding_progress", "ai_score"] = "trending",
    user: Optional[User] = Depends(optional_user),
    session: AsyncSession = Depends(get_session),
):
    conds = list(listed())
    if sector:
        conds.append(Startup.sector == sector)
    if stage:
        conds.append(Startup.stage == stage)
    if location:
        pattern = f"%{location}%"
        conds.append(or_(Startup.city.ilike(pattern), Startup.country.ilike(pattern)))
    if search:
        pattern = f"%{search}%"
        conds.append(or_(
            Startup.name.ilike(pattern),
            Startup.tagline.ilike(pattern),
            Startup.description.ilike(pattern),
        ))
    if min_funding is not None:
        conds.append(Startup.target_amount >= min_funding)
    if max_funding is not None:
        conds.append(Startup.target_amount <= max_funding)

    total = (
        await session.execute(select(func.count(Startup.id)).where(*conds))
    ).scalar() or 0
    stmt = (
        select(Startup)
        .where(*conds)
        .order_by(*SORTS[sort_by], Startup.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    startups = list((await session.execute(stmt)).scalars().all())

    return StartupListResponse(
        startups=await briefs(session, startups, user),
        pagination=paginate(page, limit, total),
    )


@router.get("/trending", response_model=list[StartupBrief])
async def trending_startups(
    limit: int = Query(20, ge=1, le=100),
    user: Optional[User] = Depends(optional_user),
    session: AsyncSession = Depends(get_session),
):
    """Most viewed startups published during the last week."""
    week_ago = dt.datetime.utcnow() - dt.timedelta(days=7)
    stmt = (
        select(Startup)
        .where(*listed(), Startup.published_at >= week_ago)
        .order_by(Startup.views.desc(), Startup.likes.desc(), Startup.id)
        .limit(limit)
    )
    startups = list((await session.execute(stmt)).scalars().all())
    return await briefs(session, startups, user)


@router.get("/featured", response_model=list[StartupBrief])
async def featured_startups(
    limit: int = Query(10, ge=1, le=100),
    user: Optional[User] = Depends(optional_user),
    session: AsyncSession = Depends(get_session),
):
    now = dt.datetime.utcnow()
    stmt = (
        select(Startup)
        .where(
            *listed(),
            or_(Startup.is_promoted.is_(True), Startup.featured_until >= now),
        )
        .order_by(Startup.ai_score_overall.desc(), Startup.id)
        .limit(limit)
    )
    startups = list((await session.execute(stmt)).scalars().all())
    return await briefs(session, startups, user)


@router.get("/user/my-startups", response_model=StartupListResponse)
async def my_startups(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(require_role("entrepreneur")),
    session: AsyncSession = Depends(get_session),
):
    total = (
        await session.execute(
            select(func.count(Startup.id)).where(Startup.founder_id == user.id)
        )
    ).scalar() or 0
    stmt = (
        select(Startup)
        .where(Startup.founder_id == user.id)
        .order_by(Startup.created_at.desc(), Startup.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    startups = list((await session.execute(stmt)).scalars().all())
    return StartupListResponse(
        startups=await briefs(session, startups, user),
        pagination=paginate(page, limit, total),
    )


@router.get("/{startup_id}", response_model=StartupDetail)
async def get_startup(
    startup_id: str,
    user: Optional[User] = Depends(optional_user),
    session: AsyncSession = Depends(get_session),
):
    startup = await get_startup_or_404(session, startup_id)
    ensure_visible(startup, user)

    await session.execute(
        update(Startup)
        .where(Startup.id == startup_id)
        .values(views=Startup.views + 1)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    await session.refresh(startup)

    detail = StartupDetail.model_validate(startup)
    if user is not None:
        liked, bookmarked = await user_reactions(session, user, [startup.id])
        detail = detail.model_copy(update={
            "is_liked": startup.id in liked,
            "is_bookmarked": startup.id in bookmarked,
        })
    return detail


# ---------------------------------------------------------------------------
# Create / edit
# ---------------------------------------------------------------------------

def _apply_nested(startup: Startup, req, partial: bool = False) -> None:
    """Flatten the location / funding / metrics blocks onto the row.

    With ``partial`` only the fields the client actually sent are written,
    so an edit never resets the rest of a block to its defaults.
    """
    for block in (req.location, req.funding):
        if block is None:
            continue
        for field, value in block.model_dump(exclude_unset=partial).items():
            if partial and value is None:
                continue
            setattr(startup, field, value)
    if req.metrics is not None:
        for field, value in req.metrics.model_dump(exclude_unset=True).items():
            setattr(startup, field, value)


def _check_investment_bounds(startup: Startup) -> None:
    if startup.maximum_investment is not None and startup.maximum_investment < (startup.minimum_investment or 0):
        raise HTTPException(
            status_code=400,
            detail="Maximum investment must not be lower than the minimum investment",
        )


def _check_target(startup: Startup) -> None:
    """The target may not drop below what is already raised; meeting it closes the round."""
    raised = startup.current_amount or 0
    if startup.target_amount < raised:
        raise HTTPException(
            status_code=400,
            detail="Target amount cannot be lower than the amount already raised",
        )
    if raised and startup.target_amount == raised and startup.status == "active":
        startup.status = "funded"
        startup.funding_end_date = dt.datetime.utcnow()


@router.post("/", response_model=StartupDetail, status_code=201)
async def create_startup(
    req: StartupCreate,
    user: User = Depends(require_role("entrepreneur")),
    session: AsyncSession = Depends(get_session),
):
    startup = Startup(
        name=req.name.strip(),
        tagline=req.tagline.strip(),
        description=req.description.strip(),
        logo=req.logo,
        founder_id=user.id,
        sector=req.sector,
        sub_sector=req.sub_sector,
        business_model=req.business_model,
        stage=req.stage,
        links=req.links,
        tags=req.tags,
        status="draft",
        moderation_status="pending",
    )
    _apply_nested(startup, req)
    _check_investment_bounds(startup)

    session.add(startup)
    await session.commit()
    await session.refresh(startup)
    logger.info("Startup %s created by %s", startup.id, user.id)
    return startup


@router.put("/{startup_id}", response_model=StartupDetail)
async def update_startup(
    startup_id: str,
    req: StartupEdit,
    user: User = Depends(require_role("entrepreneur")),
    session: AsyncSession = Depends(get_session),
):
    startup = await get_startup_or_404(session, startup_id)
    ensure_founder(startup, user)

    plain = req.model_dump(exclude_unset=True, exclude={"location", "funding", "metrics"})
    for field, value in plain.items():
        if value is not None:
            setattr(startup, field, value)
    _apply_nested(startup, req, partial=True)
    _check_investment_bounds(startup)
    _check_target(startup)

    await session.commit()
    await session.refresh(startup)
    return startup


# ---------------------------------------------------------------------------
# Reactions
# ---------------------------------------------------------------------------

async def _toggle_reaction(
    session: AsyncSession, startup: Startup, user: User, kind: str, counter: str,
) -> tuple[int, bool]:
    """Flip *user*'s *kind* reaction; returns (new counter value, is active)."""
    existing = (
        await session.execute(
            select(StartupReaction.id).where(
                StartupReaction.startup_id == startup.id,
                StartupReaction.user_id == user.id,
                StartupReaction.kind == kind,
            )
        )
    ).scalar()

    column = getattr(Startup, counter)
    if existing:
        await session.execute(delete(StartupReaction).where(StartupReaction.id == existing))
        delta = -1
    else:
        session.add(StartupReaction(startup_id=startup.id, user_id=user.id, kind=kind))
        delta = 1
    await session.execute(
        update(Startup)
        .where(Startup.id == startup.id)
        .values({counter: column + delta})
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    await session.refresh(startup)
    return getattr(startup, counter), not existing


@router.post("/{startup_id}/like", response_model=LikeResponse)
async def toggle_like(
    startup_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    startup = await get_startup_or_404(session, startup_id)
    likes, active = await _toggle_reaction(session, startup, user, "like", "likes")
    return LikeResponse(likes=likes, is_liked=active)


@router.post("/{startup_id}/bookmark", response_model=BookmarkResponse)
async def toggle_bookmark(
    startup_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    startup = await get_startup_or_404(session, startup_id)
    bookmarks, active = await _toggle_reaction(session, startup, user, "bookmark", "bookmarks")
    return BookmarkResponse(bookmarks=bookmarks, is_bookmarked=active)


# ---------------------------------------------------------------------------
# Progress posts / moderation
# ---------------------------------------------------------------------------

@router.post("/{startup_id}/updates", response_model=UpdatePostOut, status_code=201)
async def add_update(
    startup_id: str,
    req: UpdatePostRequest,
    user: User = Depends(require_role("entrepreneur")),
    session: AsyncSession = Depends(get_session),
):
    startup = await get_startup_or_404(session, startup_id)
    ensure_founder(startup, user, "add updates")

    post = StartupUpdate(
        startup_id=startup.id,
        title=req.title.strip(),
        content=req.content.strip(),
        milestone=req.milestone,
        images=req.images,
    )
    session.add(post)
    await session.commit()
    await session.refresh(post)
    return post


@router.post("/{startup_id}/moderate", response_model=StartupDetail)
async def moderate_startup(
    startup_id: str,
    req: ModerationRequest,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    startup = await get_startup_or_404(session, startup_id)
    if req.status is not None:
        startup.status = req.status
        if req.status == "active" and startup.published_at is None:
            startup.published_at = dt.datetime.utcnow()
    if req.moderation_status is not None:
        startup.moderation_status = req.moderation_status
    if req.notes is not None:
        startup.moderation_notes = req.notes

    await session.commit()
    await session.refresh(startup)
    logger.info(
        "Startup %s moderated by %s: status=%s moderation=%s",
        startup.id, admin.id, startup.status, startup.moderation_status,
    )
    return startup
