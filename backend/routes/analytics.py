"""Analytics endpoints -- sector breakdown, portfolio performance and the AI
insights report."""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.converters import startup_to_profile
from backend.database import get_session
from backend.errors import server_error
from backend.models import Startup, User
from backend.routes.recommendations import get_scorer, load_investor_profiles
from backend.routes.startups import ensure_visible, listed
from backend.schemas import (
    AIInsightsRequest,
    AIInsightsResponse,
    InsightsSummary,
    InvestorBrief,
    InvestorInsight,
    PortfolioPerformance,
    PotentialReturnsOut,
    RiskAssessmentOut,
    SectorBreakdownOut,
    StartupBrief,
    StartupInsight,
)
from backend.security import get_current_user, require_role
from scoring import MatchScorer
from scoring.general import assess_risk, estimate_returns, general_score
from scoring.trending import sector_breakdown

router = APIRouter(prefix="/analytics", tags=["analytics"])

INSIGHTS_FAILED = "Failed to generate AI insights"

INVESTOR_LIMIT = 10
STARTUP_LIMIT = 15


@router.get("/investments/by-sector", response_model=list[SectorBreakdownOut])
async def investments_by_sector(
    user: User = Depends(require_role("investor")),
    session: AsyncSession = Depends(get_session),
):
    startups = (
        await session.execute(select(Startup).where(Startup.status == "active"))
    ).scalars().all()
    rows = sector_breakdown([startup_to_profile(s) for s in startups])
    return [
        SectorBreakdownOut(
            sector=r.sector,
            total_invested=r.total_invested,
            total_startups=r.total_startups,
            avg_funding=r.avg_funding,
        )
        for r in rows
    ]


@router.get("/portfolio/performance", response_model=PortfolioPerformance)
async def portfolio_performance(user: User = Depends(require_role("investor"))):
    invested = user.total_invested or 0
    returns = user.total_returns or 0
    return PortfolioPerformance(
        total_invested=invested,
        portfolio_value=user.portfolio_value or 0,
        total_returns=returns,
        roi=round(returns / invested * 100, 2) if invested > 0 else 0,
    )


# ---------------------------------------------------------------------------
# AI insights
# ---------------------------------------------------------------------------

def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def investor_summary(matches: list[InvestorInsight]) -> InsightsSummary:
    if not matches:
        return InsightsSummary(overview="No matching investors found yet")
    sectors = list(dict.fromkeys(s for m in matches for s in m.investor.preferred_sectors))
    strong = sum(1 for m in matches if m.compatibility_score > 70)
    return InsightsSummary(
        overview=(
            f"Found {len(matches)} potential investors with "
            f"{_mean(m.compatibility_score for m in matches):.0f}% average compatibility"
        ),
        key_findings=[
            f"Top investors focus on {', '.join(sectors[:3]) or 'a broad mix of sectors'}",
            f"{strong} highly compatible matches",
        ],
        recommendations=[
            "Focus on investors with recent activity in your sector",
            "Highlight unique value propositions to stand out",
            "Consider reaching out to top 3 matches first",
        ],
    )


def startup_summary(matches: list[StartupInsight]) -> InsightsSummary:
    if not matches:
        return InsightsSummary(overview="No open funding rounds match right now")
    sectors = list(dict.fromkeys(m.startup.sector for m in matches))
    strong = sum(1 for m in matches if m.compatibility_score > 75)
    return InsightsSummary(
        overview=(
            f"Analyzed {len(matches)} startups with "
            f"{_mean(m.compatibility_score for m in matches):.0f}% average compatibility"
        ),
        key_findings=[
            f"Opportunities across {len(sectors)} sectors: {', '.join(sectors[:3])}",
            f"{strong} high-potential matches",
            f"Average funding progress: {_mean(m.startup.funding_progress for m in matches):.0f}%",
        ],
        recommendations=[
            "Diversify across high-scoring startups to reduce risk",
            "Consider early-stage opportunities for higher returns",
            "Review startup teams and traction metrics before investing",
        ],
    )


async def investors_for_startup(
    session: AsyncSession, scorer: MatchScorer, startup: Startup,
) -> list[InvestorInsight]:
    investors = (
        await session.execute(
            select(User)
            .where(
                User.user_type.in_(("investor", "both")),
                User.status == "active",
                User.kyc_status == "verified",
                User.id != startup.founder_id,
            )
            .order_by(User.id)
        )
    ).scalars().all()
    by_id = {u.id: u for u in investors}
    profiles = await load_investor_profiles(session, investors)
    ranked = scorer.rank_investors_for_startup(
        profiles, startup_to_profile(startup), limit=INVESTOR_LIMIT,
    )
    return [
        InvestorInsight(
            investor=InvestorBrief.model_validate(by_id[r.candidate_id]),
            compatibility_score=r.overall_score,
            reasoning=list(r.reasons),
        )
        for r in ranked
    ]


async def startups_for_investor(
    session: AsyncSession, scorer: MatchScorer, investor: User,
) -> list[StartupInsight]:
    startups = (
        await session.execute(
            select(Startup)
            .options(selectinload(Startup.founder))
            .where(
                *listed(),
                Startup.current_amount < Startup.target_amount,
                Startup.founder_id != investor.id,
            )
            .order_by(Startup.id)
        )
    ).scalars().all()
    by_id = {s.id: s for s in startups}
    profiles = {s.id: startup_to_profile(s) for s in startups}
    (profile,) = await load_investor_profiles(session, [investor])
    ranked = scorer.rank_startups_for_investor(list(profiles.values()), profile, limit=STARTUP_LIMIT)

    matches = []
    for r in ranked:
        startup = profiles[r.candidate_id]
        matches.append(StartupInsight(
            startup=StartupBrief.model_validate(by_id[r.candidate_id]),
            compatibility_score=r.overall_score,
            general_score=general_score(startup).overall,
            reasoning=list(r.reasons),
            risk_assessment=RiskAssessmentOut(**assess_risk(startup).as_dict()),
            potential_returns=PotentialReturnsOut(**estimate_returns(startup)),
        ))
    return matches


@router.post("/ai-insights", response_model=AIInsightsResponse)
async def ai_insights(
    req: AIInsightsRequest,
    user: User = Depends(get_current_user),
    scorer: MatchScorer = Depends(get_scorer),
    session: AsyncSession = Depends(get_session),
):
    """Match report for one startup (its best investors) or one investor
    (the open rounds that fit them best)."""
    if req.target_type == "startup" and req.analysis_type == "investor_analysis":
        startup = (
            await session.execute(
                select(Startup).options(selectinload(Startup.founder)).where(Startup.id == req.target_id)
            )
        ).scalar_one_or_none()
        if startup is None:
            raise HTTPException(status_code=404, detail="Startup not found")
        ensure_visible(startup, user)
        try:
            matches = await investors_for_startup(session, scorer, startup)
        except Exception as e:
            raise server_error(INSIGHTS_FAILED, e)
        return AIInsightsResponse(
            type="investor_analysis",
            startup=StartupBrief.model_validate(startup),
            investors=matches,
            summary=investor_summary(matches),
            analysis_timestamp=dt.datetime.utcnow(),
        )

    if req.target_type == "investor" and req.analysis_type == "startup_analysis":
        investor = await session.get(User, req.target_id)
        if investor is None or not investor.is_investor or investor.status != "active":
            raise HTTPException(status_code=404, detail="Investor not found")
        try:
            matches = await startups_for_investor(session, scorer, investor)
        except Exception as e:
            raise server_error(INSIGHTS_FAILED, e)
        return AIInsightsResponse(
            type="startup_analysis",
            investor=InvestorBrief.model_validate(investor),
            startups=matches,
            summary=startup_summary(matches),
            analysis_timestamp=dt.datetime.utcnow(),
        )

    raise HTTPException(
        status_code=400,
        detail=f"{req.analysis_type} is not available for a {req.target_type} target",
    )
