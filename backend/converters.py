"""Convert ORM rows into the scoring engine's read-only snapshots."""

from __future__ import annotations

from typing import Iterable, Optional

from backend.models import Investment, Startup, User
from scoring.profiles import (
    Engagement,
    Funding,
    InvestmentRecord,
    InvestorProfile,
    Location,
    Metrics,
    StartupProfile,
)


def _location(city, country) -> Optional[Location]:
    if not city and not country:
        return None
    return Location(city=city or None, country=country or None)


def startup_to_profile(startup: Startup, founder: Optional[User] = None) -> StartupProfile:
    # only use the relationship when already loaded (no lazy IO on async sessions)
    founder = founder or startup.__dict__.get("founder")
    return StartupProfile(
        id=startup.id,
        name=startup.name or "",
        sector=startup.sector,
        stage=startup.stage,
        funding=Funding(
            target_amount=startup.target_amount,
            current_amount=startup.current_amount,
            minimum_investment=startup.minimum_investment,
            maximum_investment=startup.maximum_investment,
            investor_count=startup.investor_count,
            currency=startup.currency or "USD",
        ),
        location=_location(startup.city, startup.country),
        engagement=Engagement(
            likes=startup.likes,
            views=startup.views,
            bookmarks=startup.bookmarks,
        ),
        metrics=Metrics(
            revenue_monthly=startup.revenue_monthly,
            revenue_growth=startup.revenue_growth,
            users_total=startup.users_total,
            users_growth=startup.users_growth,
            team_size=startup.team_size,
            team_growth=startup.team_growth,
            market_tam=startup.market_tam,
            market_sam=startup.market_sam,
        ),
        founder_experience=founder.experience if founder is not None else None,
        founder_community_score=founder.community_score if founder is not None else None,
        status=startup.status or "draft",
    )


def investor_to_profile(
    user: User,
    history: Iterable[tuple[Investment, Optional[str]]] = (),
) -> InvestorProfile:
    """``history`` is (investment, sector of the backed startup) pairs."""
    records = tuple(
        InvestmentRecord(
            startup_id=inv.startup_id,
            amount=inv.amount,
            date=inv.created_at,
            sector=sector,
        )
        for inv, sector in history
    )
    return InvestorProfile(
        id=user.id,
        name=f"{user.first_name} {user.last_name}".strip(),
        risk_tolerance=user.risk_tolerance,
        preferred_sectors=frozenset(user.preferred_sectors or ()),
        investment_capacity=user.investment_capacity,
        investment_history=records,
        location=_location(user.city, user.country),
        total_invested=user.total_invested,
        community_score=user.community_score,
    )
