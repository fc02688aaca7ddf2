"""
Human-readable "why this match" lines.

Rules run in a fixed priority order and each one only looks at the data it
needs; a rule whose data is missing (or malformed) is skipped, so these
functions never raise and never return empty strings.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from scoring.profiles import InvestorProfile, StartupProfile

logger = logging.getLogger(__name__)

MAX_REASONS = 3

TOP_MATCH_THRESHOLD = 80
STRONG_MATCH_THRESHOLD = 60
HIGH_ENGAGEMENT_LIKES = 50
EXPERIENCED_INVESTOR_TOTAL = 10_000
ACTIVE_COMMUNITY_SCORE = 50

Rule = Callable[[], Optional[str]]


def _collect(rules: Iterable[Rule], limit: int = MAX_REASONS) -> tuple[str, ...]:
    reasons: list[str] = []
    for rule in rules:
        if len(reasons) >= limit:
            break
        try:
            text = rule()
        except (AttributeError, TypeError, ValueError, KeyError) as e:
            logger.debug("Reason rule %s skipped: %s", getattr(rule, "__name__", rule), e)
            continue
        if text and text.strip():
            reasons.append(text.strip())
    return tuple(reasons)


# ---------------------------------------------------------------------------
# startup -> investor
# ---------------------------------------------------------------------------

def startup_reasons(
    startup: Optional[StartupProfile],
    investor: Optional[InvestorProfile],
    overall_score: float = 0.0,
) -> tuple[str, ...]:
    """Up to 3 reasons why ``startup`` suits ``investor``."""
    if startup is None or investor is None:
        return ()

    def sector():
        if investor.prefers(startup.sector):
            return f"Matches your preferred {startup.sector} sector"
        if startup.sector and startup.sector in investor.history_sectors():
            return f"You have backed {startup.sector} startups before"
        return None

    def risk_stage():
        risk, stage = investor.risk, startup.stage
        if risk == "aggressive" and stage in ("idea", "prototype"):
            return "Early-stage opportunity matching your risk appetite"
        if risk == "conservative" and stage in ("growth", "expansion"):
            return "Established company suited to a conservative portfolio"
        if risk == "moderate" and stage in ("mvp", "early-revenue"):
            return "Stage fits your balanced risk profile"
        return None

    def geography():
        if investor.location is None or startup.location is None:
            return None
        if investor.location.same_city(startup.location):
            return "Based in your city"
        if investor.location.same_country(startup.location):
            return "Located in your region"
        return None

    def engagement():
        if startup.engagement.like_count > HIGH_ENGAGEMENT_LIKES:
            return "High community engagement"
        return None

    def founder():
        if startup.founder_experience == "serial":
            return "Serial entrepreneur with proven track record"
        return None

    def revenue():
        if startup.metrics.get("revenue_monthly") > 0:
            return "Revenue-generating startup"
        return None

    def banner():
        if overall_score > TOP_MATCH_THRESHOLD:
            return "🔥 Top AI match score"
        if overall_score > STRONG_MATCH_THRESHOLD:
            return "✨ Strong AI match score"
        return None

    return _collect([sector, risk_stage, geography, engagement, founder, revenue, banner])


# ---------------------------------------------------------------------------
# investor -> startup
# ---------------------------------------------------------------------------

def investor_reasons(
    investor: Optional[InvestorProfile],
    startup: Optional[StartupProfile],
    overall_score: float = 0.0,
) -> tuple[str, ...]:
    """Up to 3 reasons why ``investor`` suits ``startup``."""
    if startup is None or investor is None:
        return ()

    def sector():
        if investor.prefers(startup.sector):
            return f"Actively invests in {startup.sector}"
        return None

    def risk_stage():
        if investor.risk == "aggressive" and startup.stage in ("idea", "prototype"):
            return "Comfortable backing early-stage companies"
        return None

    def geography():
        if investor.location is not None and investor.location.same_country(startup.location):
            return "Local investor who understands your market"
        return None

    def portfolio():
        if investor.invested > EXPERIENCED_INVESTOR_TOTAL:
            return "Experienced investor with significant portfolio"
        return None

    def community():
        if investor.community > ACTIVE_COMMUNITY_SCORE:
            return "Active community member with high engagement"
        return None

    def banner():
        if overall_score > TOP_MATCH_THRESHOLD:
            return "🎯 Perfect match for your startup"
        return None

    return _collect([sector, risk_stage, geography, portfolio, community, banner])
