"""
Recommendation endpoints -- the HTTP face of the match-scoring engine.

Rows are loaded once per request, converted into read-only profiles and
handed to ``MatchScorer``; nothing here mutates state except
/preferences and /update-scores.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.converters import investor_to_profile, startup_to_profile
from backend.database import get_session
from backend.errors import server_error
from backend.models import Investment, Startup, User
from backend.routes.startups import (
    PUBLIC_STATUSES,
    ensure_founder,
    ensure_visible,
    get_startup_or_404,
    listed,
)
from backend.schemas import (
    GeneralScores,
    Insights,
    InvestmentSuggestionOut,
    InvestorBrief,
    InvestorPreferences,
    InvestorRecommendation,
    InvestorRecommendationList,
    PersonalizedScore,
    PreferencesRequest,
    PreferencesResponse,
    SectorTrendOut,
    SimilarStartup,
    StartupBrief,
    StartupInsightsResponse,
    StartupRecommendation,
    StartupRecommendationList,
    SuggestInvestmentRequest,
    SuggestInvestmentResponse,
    TrendingSectorsResponse,
    UpdateScoresResponse,
)
from backend.security import get_current_user, require_admin, require_role
from config_env import RECOMMENDATION_LIMIT
from scoring import MatchScorer
from scoring.general import general_score, startup_insights, suggest_investment
from scoring.profiles import InvestorProfile
from scoring.trending import trending_sectors as rank_sectors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

FAILED = "Failed to generate recommendations"

_scorer = MatchScorer()


def get_scorer() -> MatchScorer:
    """FastAPI dependency; tests override it with a differently weighted scorer."""
    return _scorer


# ---------------------------------------------------------------------------
# loading helpers
# ---------------------------------------------------------------------------

async def load_investor_profiles(
    session: AsyncSession, users: Iterable[User],
) -> list[InvestorProfile]:
    """Profiles for *users* with their investment history in one query."""
    users = list(users)
    if not users:
        return []
    rows = (
        await session.execute(
            select(Investment, Startup.sector)
            .join(Startup, Investment.startup_id == Startup.id)
            .where(Investment.investor_id.in_([u.id for u in users]))
            .order_by(Investment.created_at, Investment.id)
        )
    ).all()
    history: dict[str, list] = {}
    for inv, sector in rows:
        history.setdefault(inv.investor_id, []).append((inv, sector))
    return [investor_to_profile(u, history.get(u.id, ())) for u in users]


async def load_listed_startups(session: AsyncSession, exclude_founder: Optional[str] = None) -> list[Startup]:
    stmt = (
        select(Startup)
        .options(selectinload(Startup.founder))
        .where(*listed())
        .order_by(Startup.id)
    )
    if exclude_founder:
        stmt = stmt.where(Startup.founder_id != exclude_founder)
    return list((await session.execute(stmt)).scalars().all())


async def startup_recommendations_for(
    session: AsyncSession, scorer: MatchScorer, user: User, limit: Optional[int],
) -> list[StartupRecommendation]:
    startups = await load_listed_startups(session, exclude_founder=user.id)
    by_id = {s.id: s for s in startups}
    (investor,) = await load_investor_profiles(session, [user])
    ranked = scorer.rank_startups_for_investor(
        [startup_to_profile(s) for s in startups], investor, limit=limit,
    )
    return [
        StartupRecommendation(
            startup=StartupBrief.model_validate(by_id[r.candidate_id]),
            ai_score=r.overall_score,
            reasons=list(r.reasons),
        )
        for r in ranked
    ]


# ---------------------------------------------------------------------------
# endpoints
# ---------------------------------------------------------------------------

@router.get("/startups", response_model=StartupRecommendationList)
async def recommend_startups(
    limit: int = Query(RECOMMENDATION_LIMIT, ge=1, le=100),
    user: User = Depends(require_role("investor")),
    scorer: MatchScorer = Depends(get_scorer),
    session: AsyncSession = Depends(get_session),
):
    try:
        recs = await startup_recommendations_for(session, scorer, user, limit)
    except Exception as e:
        raise server_error(FAILED, e)
    return StartupRecommendationList(recommendations=recs, total_count=len(recs))


@router.get("/investors/{startup_id}", response_model=InvestorRecommendationList)
async def recommend_investors(
    startup_id: str,
    limit: int = Query(RECOMMENDATION_LIMIT, ge=1, le=100),
    user: User = Depends(require_role("entrepreneur")),
    scorer: MatchScorer = Depends(get_scorer),
    session: AsyncSession = Depends(get_session),
):
    startup = await get_startup_or_404(session, startup_id)
    ensure_founder(startup, user, "view investor matches")

    try:
        investors = (
            await session.execute(
                select(User)
                .where(
                    User.user_type.in_(("investor", "both")),
                    User.status == "active",
                    User.kyc_status == "verified",
                    User.id != user.id,
                )
                .order_by(User.id)
            )
        ).scalars().all()
        by_id = {u.id: u for u in investors}
        profiles = await load_investor_profiles(session, investors)
        ranked = scorer.rank_investors_for_startup(
            profiles, startup_to_profile(startup, founder=user), limit=limit,
        )
    except Exception as e:
        raise server_error(FAILED, e)

    recs = [
        InvestorRecommendation(
            investor=InvestorBrief.model_validate(by_id[r.candidate_id]),
            match_score=r.overall_score,
            reasons=list(r.reasons),
        )
        for r in ranked
    ]
    return InvestorRecommendationList(recommendations=recs, total_count=len(recs))


@router.get("/trending-sectors", response_model=TrendingSectorsResponse)
async def trending_sectors(
    limit: int = Query(5, ge=1, le=20),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    try:
        startups = (await session.execute(select(Startup).where(*listed()))).scalars().all()
        trends = rank_sectors([startup_to_profile(s) for s in startups], limit=limit)
    except Exception as e:
        raise server_error(FAILED, e)
    return TrendingSectorsResponse(
        sectors=[SectorTrendOut(**t.as_dict()) for t in trends],
        generated_at=dt.datetime.utcnow(),
    )


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(
    req: PreferencesRequest,
    user: User = Depends(require_role("investor")),
    scorer: MatchScorer = Depends(get_scorer),
    session: AsyncSession = Depends(get_session),
):
    for field, value in req.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    await session.commit()
    await session.refresh(user)

    try:
        recs = await startup_recommendations_for(session, scorer, user, limit=5)
    except Exception as e:
        raise server_error(FAILED, e)
    return PreferencesResponse(
        updated_preferences=InvestorPreferences.model_validate(user),
        new_recommendations=recs,
    )


@router.get("/insights/startup/{startup_id}", response_model=StartupInsightsResponse)
async def startup_insights_view(
    startup_id: str,
    user: User = Depends(get_current_user),
    scorer: MatchScorer = Depends(get_scorer),
    session: AsyncSession = Depends(get_session),
):
    startup = (
        await session.execute(
            select(Startup).options(selectinload(Startup.founder)).where(Startup.id == startup_id)
        )
    ).scalar_one_or_none()
    if startup is None:
        raise HTTPException(status_code=404, detail="Startup not found")
    ensure_visible(startup, user)

    try:
        profile = startup_to_profile(startup)
        scores = general_score(profile)

        personalized = None
        if user.is_investor:
            (investor,) = await load_investor_profiles(session, [user])
            result = scorer.score_startup_for_investor(profile, investor)
            personalized = PersonalizedScore(
                overall_score=result.overall_score,
                factor_scores=dict(result.factor_scores),
                reasons=list(result.reasons),
            )

        similar = (
            await session.execute(
                select(Startup)
                .where(
                    *listed(),
                    Startup.sector == startup.sector,
                    Startup.stage == startup.stage,
                    Startup.id != startup.id,
                )
                .order_by(Startup.ai_score_overall.desc(), Startup.id)
                .limit(5)
            )
        ).scalars().all()
    except Exception as e:
        raise server_error(FAILED, e)

    return StartupInsightsResponse(
        startup_id=startup.id,
        general_scores=GeneralScores(overall=scores.overall, breakdown=scores.breakdown()),
        personalized_score=personalized,
        insights=Insights(**startup_insights(profile, scores)),
        similar_startups=[SimilarStartup.model_validate(s) for s in similar],
        recommendations=personalized.reasons if personalized else [],
    )


@router.post("/suggest-investment", response_model=SuggestInvestmentResponse)
async def suggest_investment_view(
    req: SuggestInvestmentRequest,
    user: User = Depends(require_role("investor")),
    scorer: MatchScorer = Depends(get_scorer),
    session: AsyncSession = Depends(get_session),
):
    startup = (
        await session.execute(
            select(Startup).options(selectinload(Startup.founder)).where(Startup.id == req.startup_id)
        )
    ).scalar_one_or_none()
    if startup is None or startup.status not in PUBLIC_STATUSES:
        raise HTTPException(status_code=404, detail="Startup or investor not found")

    try:
        profile = startup_to_profile(startup)
        (investor,) = await load_investor_profiles(session, [user])
        match = scorer.score_startup_for_investor(profile, investor)
        suggestion = suggest_investment(profile, investor, match.overall_score, req.risk_level)
    except Exception as e:
        raise server_error(FAILED, e)

    return SuggestInvestmentResponse(
        match_score=match.overall_score,
        suggestion=InvestmentSuggestionOut(**suggestion.as_dict()),
        generated_at=dt.datetime.utcnow(),
    )


@router.post("/update-scores", response_model=UpdateScoresResponse)
async def update_scores(
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """Recompute and persist the general AI score of every active startup."""
    now = dt.datetime.utcnow()
    try:
        startups = (
            await session.execute(
                select(Startup)
                .options(selectinload(Startup.founder))
                .where(Startup.status == "active")
            )
        ).scalars().all()
        for startup in startups:
            scores = general_score(startup_to_profile(startup))
            startup.ai_score_overall = scores.overall
            startup.ai_score_market = scores.market
            startup.ai_score_team = scores.team
            startup.ai_score_product = scores.product
            startup.ai_score_traction = scores.traction
            startup.ai_score_financials = scores.financials
            startup.ai_score_updated_at = now
        await session.commit()
    except Exception as e:
        await session.rollback()
        raise server_error("Failed to update AI scores", e)

    logger.info("AI scores updated for %d startups by %s", len(startups), admin.id)
    return UpdateScoresResponse(updated=len(startups), updated_at=now)
