"""
Investor-agnostic startup score.

Five category scores (0-100), each an additive heuristic over the startup
snapshot, plus the derived insights and investment suggestion shown on the
startup insights screen, and the risk / return screening used by the AI
insights report.

Scores produced:
    market      -- TAM / SAM size, growth sector
    team        -- founder experience, team size, founder community score
    product     -- stage, user base, user growth
    traction    -- likes, views, investor count, funding progress
    financials  -- monthly revenue, revenue growth, revenue vs. raise
    overall     -- mean of the above
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from scoring.profiles import InvestorProfile, StartupProfile

GROWTH_SECTORS = {"AI", "Health", "Climate", "FinTech"}

STAGE_PRODUCT_POINTS = {
    "expansion": 30,
    "growth": 25,
    "early-revenue": 20,
    "mvp": 15,
    "prototype": 10,
    "idea": 5,
}

RISK_ALLOCATION = {"low": 0.02, "medium": 0.05, "high": 0.10}

RISK_REASONING = {
    "low": "Conservative approach: Small allocation to test waters",
    "medium": "Balanced approach: Moderate allocation with good risk-reward ratio",
    "high": "Aggressive approach: Larger allocation for higher potential returns",
}


def _cap(val: float, hi: float = 100.0) -> float:
    return min(val, hi)


# ---------------------------------------------------------------------------
# category scores (each returns 0-100)
# ---------------------------------------------------------------------------

def score_market(startup: StartupProfile) -> float:
    m = startup.metrics
    score = 50.0
    if m.get("market_tam") > 1_000_000_000:
        score += 20
    if m.get("market_sam") > 100_000_000:
        score += 15
    if startup.sector in GROWTH_SECTORS:
        score += 15
    return _cap(score)


def score_team(startup: StartupProfile) -> float:
    score = 40.0
    exp = startup.founder_experience
    if exp == "serial":
        score += 30
    elif exp == "experienced":
        score += 20
    else:
        score += 10

    size = startup.metrics.get("team_size", 1) or 1
    if size > 10:
        score += 20
    elif size > 5:
        score += 15
    elif size > 2:
        score += 10

    if startup.community_score > 50:
        score += 10
    return _cap(score)


def score_product(startup: StartupProfile) -> float:
    m = startup.metrics
    score = 30.0 + STAGE_PRODUCT_POINTS.get(startup.stage, 0)

    users = m.get("users_total")
    if users > 10_000:
        score += 20
    elif users > 1_000:
        score += 15
    elif users > 100:
        score += 10

    growth = m.get("users_growth")
    if growth > 50:
        score += 15
    elif growth > 20:
        score += 10
    return _cap(score)


def score_traction(startup: StartupProfile) -> float:
    e, f = startup.engagement, startup.funding
    score = 20.0
    score += min(e.like_count / 10, 20)
    score += min(e.view_count / 100, 20)
    score += min(f.investors * 5, 25)
    target = f.target or 1
    score += (f.raised / target) * 15
    return _cap(score)


def score_financials(startup: StartupProfile) -> float:
    m = startup.metrics
    score = 25.0

    monthly = m.get("revenue_monthly")
    if monthly > 100_000:
        score += 35
    elif monthly > 10_000:
        score += 25
    elif monthly > 1_000:
        score += 15
    elif monthly > 0:
        score += 10

    growth = m.get("revenue_growth")
    if growth > 100:
        score += 25
    elif growth > 50:
        score += 20
    elif growth > 20:
        score += 15
    elif growth > 0:
        score += 10

    # raise spread over a 12-month runway
    burn = startup.funding.raised / 12
    if burn > 0 and monthly / burn > 0.5:
        score += 15
    return _cap(score)


@dataclass(frozen=True)
class GeneralScore:
    market: float
    team: float
    product: float
    traction: float
    financials: float

    @property
    def overall(self) -> float:
        return round((self.market + self.team + self.product + self.traction + self.financials) / 5, 2)

    def breakdown(self) -> dict[str, float]:
        return {k: round(v, 2) for k, v in asdict(self).items()}


def general_score(startup: StartupProfile) -> GeneralScore:
    return GeneralScore(
        market=score_market(startup),
        team=score_team(startup),
        product=score_product(startup),
        traction=score_traction(startup),
        financials=score_financials(startup),
    )


# ---------------------------------------------------------------------------
# insights
# ---------------------------------------------------------------------------

_STRENGTHS = [
    ("team", "Strong and experienced team"),
    ("market", "Large and growing market opportunity"),
    ("traction", "Excellent user traction and engagement"),
    ("financials", "Strong financial performance"),
    ("product", "Well-developed product with good user adoption"),
]

_CHALLENGES = [
    ("team", "Team experience could be strengthened"),
    ("market", "Market opportunity needs validation"),
    ("traction", "User traction needs improvement"),
    ("financials", "Financial metrics need development"),
    ("product", "Product development in early stages"),
]


def startup_insights(startup: StartupProfile, scores: GeneralScore, limit: int = 3) -> dict[str, list[str]]:
    """Strengths (> 80), challenges (< 50) and opportunities, ``limit`` each."""
    values = scores.breakdown()
    strengths = [text for key, text in _STRENGTHS if values[key] > 80]
    challenges = [text for key, text in _CHALLENGES if values[key] < 50]

    opportunities = []
    if startup.sector == "AI":
        opportunities.append("AI sector showing strong growth potential")
    if startup.stage == "mvp":
        opportunities.append("Good timing for seed investment")
    if startup.metrics.get("users_growth") > 50:
        opportunities.append("High user growth indicates scalability")
    if startup.funding.raised < startup.funding.target * 0.3:
        opportunities.append("Early investment opportunity with potential for better terms")

    return {
        "strengths": strengths[:limit],
        "challenges": challenges[:limit],
        "opportunities": opportunities[:limit],
    }


# ---------------------------------------------------------------------------
# investment suggestion
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvestmentSuggestion:
    amount: int
    currency: str
    reasoning: list
    confidence: str
    timeframe: str = "Consider investing within 7 days for optimal terms"

    def as_dict(self) -> dict:
        return asdict(self)


def suggest_investment(
    startup: StartupProfile,
    investor: InvestorProfile,
    match_score: float,
    risk_level: Optional[str] = "medium",
) -> InvestmentSuggestion:
    """Ticket size from capacity x risk allocation, nudged by the match score."""
    level = risk_level if risk_level in RISK_ALLOCATION else "medium"
    capacity = investor.capacity
    minimum = startup.funding.minimum

    amount = max(minimum, capacity * RISK_ALLOCATION[level])
    reasoning = [RISK_REASONING[level]]

    if match_score > 80:
        amount *= 1.2
        reasoning.append("AI analysis shows excellent match - increased allocation recommended")
    elif match_score < 40:
        amount *= 0.7
        reasoning.append("Lower AI match score - reduced allocation suggested")

    amount = max(minimum, min(amount, capacity))

    if match_score > 60:
        confidence = "high"
    elif match_score > 40:
        confidence = "medium"
    else:
        confidence = "low"

    return InvestmentSuggestion(
        amount=int(round(amount)),
        currency=startup.funding.currency or "USD",
        reasoning=reasoning,
        confidence=confidence,
    )


# ---------------------------------------------------------------------------
# deal screening (risk level, return estimate)
# ---------------------------------------------------------------------------

RETURN_MULTIPLIERS = {
    "idea": 10,
    "prototype": 8,
    "mvp": 6,
    "early-revenue": 5,
    "growth": 4,
    "expansion": 2,
}

HIGH_MULTIPLE_SECTORS = {"AI", "FinTech", "Health"}


@dataclass(frozen=True)
class RiskAssessment:
    level: str
    factors: list

    def as_dict(self) -> dict:
        return asdict(self)


def assess_risk(startup: StartupProfile) -> RiskAssessment:
    """High risk on thin traction or an idea-stage venture; low when nothing is flagged."""
    factors = []
    level = "medium"
    target = startup.funding.target
    progress = startup.funding.raised / target * 100 if target > 0 else 0
    if progress < 20:
        factors.append("Low initial traction")
        level = "high"
    if (startup.metrics.get("team_size", 1) or 1) < 2:
        factors.append("Small team size")
    if startup.stage == "idea":
        factors.append("Early stage venture")
        level = "high"
    if not factors:
        level = "low"
    return RiskAssessment(level=level, factors=factors)


def estimate_returns(startup: StartupProfile) -> dict:
    multiplier = RETURN_MULTIPLIERS.get(startup.stage, 3)
    if startup.sector in HIGH_MULTIPLE_SECTORS:
        multiplier *= 1.5
    return {
        "estimated_multiplier": f"{multiplier:g}x",
        "timeframe": "3-7 years",
        "confidence": "medium",
    }
