"""
Match scoring -- startup <-> investor compatibility.

Two directions, each a weighted sum of independently computed sub-scores in
[0, 1], scaled to 0-100 and clamped:

    startup for investor   sector, stage, location, funding, performance, social
    investor for startup   sector, capacity, risk, pattern, geography

Usage:
    scorer = MatchScorer()
    result = scorer.score_startup_for_investor(startup, investor)
    top = scorer.rank_startups_for_investor(startups, investor, limit=10)

All methods are pure: no I/O, no shared mutable state, no clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from scoring.errors import InvalidInputError
from scoring.profiles import InvestorProfile, StartupProfile
from scoring.reasons import investor_reasons, startup_reasons
from scoring.weights import DEFAULT_CONFIG, NEUTRAL_SCORE, ScoringConfig

logger = logging.getLogger(__name__)


def _clamp(val: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, val))


@dataclass(frozen=True)
class ScoreResult:
    """Transient result for one (startup, investor) pair. Never persisted."""

    candidate_id: Optional[str]
    overall_score: float
    factor_scores: Mapping[str, float] = field(default_factory=dict)
    reasons: tuple[str, ...] = ()

    def as_dict(self) -> dict:
        return {
            "candidate_id": self.candidate_id,
            "overall_score": self.overall_score,
            "factor_scores": dict(self.factor_scores),
            "reasons": list(self.reasons),
        }


class MatchScorer:
    """Stateless scorer; the weighting tables are fixed at construction."""

    def __init__(self, config: ScoringConfig = DEFAULT_CONFIG):
        self._config = config

    @property
    def config(self) -> ScoringConfig:
        return self._config

    # ------------------------------------------------------------------
    # startup -> investor sub-scores
    # ------------------------------------------------------------------

    def sector_score(self, startup: StartupProfile, investor: InvestorProfile) -> float:
        if investor.prefers(startup.sector):
            return 1.0
        if startup.sector and startup.sector in investor.history_sectors():
            return 0.8
        return 0.3

    def stage_score(self, startup: StartupProfile, investor: InvestorProfile) -> float:
        table = self._config.stage_preferences.get(investor.risk, {})
        return table.get(startup.stage, NEUTRAL_SCORE)

    def location_score(self, startup: StartupProfile, investor: InvestorProfile) -> float:
        ours, theirs = investor.location, startup.location
        if ours is None or theirs is None or not ours.is_known or not theirs.is_known:
            return NEUTRAL_SCORE
        if ours.same_city(theirs):
            return 1.0
        if ours.same_country(theirs):
            return 0.8
        if theirs.country_name in self._config.major_markets:
            return 0.6
        return 0.4

    def funding_score(self, startup: StartupProfile, investor: InvestorProfile) -> float:
        minimum = startup.funding.minimum
        capacity = investor.capacity
        if minimum > capacity:
            return 0.1  # priced out
        lo, hi = self._config.ideal_band
        if capacity * lo <= minimum <= capacity * hi:
            return 1.0
        if minimum < capacity * lo:
            return 0.7
        return 0.5

    def performance_score(self, startup: StartupProfile) -> float:
        """Track-record bonus: founder tier, team, revenue, users. Capped at 1."""
        m = startup.metrics
        score = 0.5

        exp = startup.founder_experience
        if exp == "serial":
            score += 0.3
        elif exp == "experienced":
            score += 0.2
        elif exp == "first-time":
            score += 0.1

        if m.get("team_size") > 5:
            score += 0.1
        if m.get("team_growth") > 0:
            score += 0.1
        if m.get("revenue_monthly") > 0:
            score += 0.2
        if m.get("revenue_growth") > 20:
            score += 0.2
        if m.get("users_total") > 1000:
            score += 0.1
        if m.get("users_growth") > 10:
            score += 0.1

        return min(score, 1.0)

    def social_proof_score(self, startup: StartupProfile) -> float:
        e = startup.engagement
        score = 0.0
        score += min(e.like_count / 100, 0.3)
        score += min(e.view_count / 1000, 0.3)
        score += min(e.bookmark_count / 50, 0.2)
        score += min(startup.funding.investors / 10, 0.2)
        return min(score, 1.0)

    # ------------------------------------------------------------------
    # investor -> startup sub-scores
    # ------------------------------------------------------------------

    def sector_interest_score(self, investor: InvestorProfile, startup: StartupProfile) -> float:
        return 1.0 if investor.prefers(startup.sector) else 0.3

    def capacity_score(self, investor: InvestorProfile, startup: StartupProfile) -> float:
        capacity = investor.capacity
        minimum = startup.funding.minimum
        if capacity < minimum:
            return 0.0
        if capacity >= minimum * 10:
            return 1.0
        return capacity / (minimum * 10)

    def risk_score(self, investor: InvestorProfile, startup: StartupProfile) -> float:
        table = self._config.risk_matrix.get(investor.risk, {})
        return table.get(startup.stage, NEUTRAL_SCORE)

    def pattern_score(self, investor: InvestorProfile, startup: StartupProfile) -> float:
        """How the startup's ticket compares with the investor's usual cheque."""
        avg = investor.average_investment()
        if not avg:
            return NEUTRAL_SCORE
        ratio = startup.funding.minimum / avg
        if 0.5 <= ratio <= 2.0:
            return 1.0
        if 0.2 <= ratio <= 5.0:
            return 0.7
        return 0.4

    def geographic_score(self, investor: InvestorProfile, startup: StartupProfile) -> float:
        ours, theirs = investor.location, startup.location
        if ours is None or theirs is None or not ours.is_known or not theirs.is_known:
            return NEUTRAL_SCORE
        if ours.same_country(theirs):
            return 1.0 if ours.same_city(theirs) else 0.8
        if self.same_timezone_region(ours.country_name, theirs.country_name):
            return 0.6
        return 0.4

    def same_timezone_region(self, country_a: Optional[str], country_b: Optional[str]) -> bool:
        if not country_a or not country_b:
            return False
        return any(
            country_a in members and country_b in members
            for members in self._config.timezone_regions.values()
        )

    # ------------------------------------------------------------------
    # pair scoring
    # ------------------------------------------------------------------

    def startup_factors(self, startup: StartupProfile, investor: InvestorProfile) -> dict[str, float]:
        return {
            "sector": self.sector_score(startup, investor),
            "stage": self.stage_score(startup, investor),
            "location": self.location_score(startup, investor),
            "funding": self.funding_score(startup, investor),
            "performance": self.performance_score(startup),
            "social": self.social_proof_score(startup),
        }

    def investor_factors(self, investor: InvestorProfile, startup: StartupProfile) -> dict[str, float]:
        return {
            "sector": self.sector_interest_score(investor, startup),
            "capacity": self.capacity_score(investor, startup),
            "risk": self.risk_score(investor, startup),
            "pattern": self.pattern_score(investor, startup),
            "geography": self.geographic_score(investor, startup),
        }

    @staticmethod
    def _combine(factors: Mapping[str, float], weights: Mapping[str, float]) -> float:
        total = sum(factors[name] * w for name, w in weights.items())
        return round(_clamp(total * 100), 2)

    def score_startup_for_investor(
        self,
        startup: Optional[StartupProfile],
        investor: Optional[InvestorProfile],
    ) -> ScoreResult:
        if startup is None:
            raise InvalidInputError("startup is required")
        if investor is None:
            raise InvalidInputError("investor is required")

        factors = self.startup_factors(startup, investor)
        overall = self._combine(factors, self._config.startup_weights.as_dict())
        return ScoreResult(
            candidate_id=startup.id,
            overall_score=overall,
            factor_scores=MappingProxyType(factors),
            reasons=startup_reasons(startup, investor, overall),
        )

    def score_investor_for_startup(
        self,
        investor: Optional[InvestorProfile],
        startup: Optional[StartupProfile],
    ) -> ScoreResult:
        if startup is None:
            raise InvalidInputError("startup is required")
        if investor is None:
            raise InvalidInputError("investor is required")

        factors = self.investor_factors(investor, startup)
        overall = self._combine(factors, self._config.investor_weights.as_dict())
        return ScoreResult(
            candidate_id=investor.id,
            overall_score=overall,
            factor_scores=MappingProxyType(factors),
            reasons=investor_reasons(investor, startup, overall),
        )

    # ------------------------------------------------------------------
    # ranking
    # ------------------------------------------------------------------

    @staticmethod
    def _rank(results: Iterable[ScoreResult], limit: Optional[int]) -> list[ScoreResult]:
        # sort is stable: equal score and id keep input order
        ranked = sorted(results, key=lambda r: (-r.overall_score, r.candidate_id or ""))
        if limit is None:
            return ranked
        return ranked[: max(limit, 0)]

    def rank_startups_for_investor(
        self,
        startups: Sequence[StartupProfile],
        investor: Optional[InvestorProfile],
        limit: Optional[int] = 10,
    ) -> list[ScoreResult]:
        if investor is None:
            raise InvalidInputError("investor is required")
        results = [
            self.score_startup_for_investor(s, investor)
            for s in (startups or ())
            if s is not None
        ]
        logger.debug("Scored %d startups for investor %s", len(results), investor.id)
        return self._rank(results, limit)

    def rank_investors_for_startup(
        self,
        investors: Sequence[InvestorProfile],
        startup: Optional[StartupProfile],
        limit: Optional[int] = 10,
    ) -> list[ScoreResult]:
        if startup is None:
            raise InvalidInputError("startup is required")
        results = [
            self.score_investor_for_startup(inv, startup)
            for inv in (investors or ())
            if inv is not None
        ]
        logger.debug("Scored %d investors for startup %s", len(results), startup.id)
        return self._rank(results, limit)
