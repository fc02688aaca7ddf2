"""
Read-only snapshots consumed by the scoring engine.

The API layer converts ORM rows into these records (see backend/converters.py);
scoring code never touches the database. Optional data is modelled as
``None`` and read through accessors that supply the documented neutral
default, so callers never branch on missing fields themselves.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Optional

SECTORS = ("AI", "Health", "Climate", "EdTech", "FinTech", "E-commerce", "Gaming", "Other")
STAGES = ("idea", "prototype", "mvp", "early-revenue", "growth", "expansion")
RISK_TOLERANCES = ("conservative", "moderate", "aggressive")
FOUNDER_EXPERIENCE = ("first-time", "experienced", "serial")

DEFAULT_RISK_TOLERANCE = "moderate"
DEFAULT_MINIMUM_INVESTMENT = 100.0

COUNTRY_ALIASES = {
    "usa": "United States",
    "us": "United States",
    "u.s.": "United States",
    "u.s.a.": "United States",
    "united states of america": "United States",
    "uk": "United Kingdom",
    "u.k.": "United Kingdom",
    "great britain": "United Kingdom",
    "england": "United Kingdom",
    "uae": "UAE",
    "united arab emirates": "UAE",
    "deutschland": "Germany",
    "bharat": "India",
}


def normalize_country(raw: Optional[str]) -> Optional[str]:
    """Canonical country name, or None for blank input."""
    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    return COUNTRY_ALIASES.get(s.lower(), s)


def _same_text(a: Optional[str], b: Optional[str]) -> bool:
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


def _num(value, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


# ---------------------------------------------------------------------------
# Value records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Location:
    city: Optional[str] = None
    country: Optional[str] = None

    @property
    def country_name(self) -> Optional[str]:
        return normalize_country(self.country)

    @property
    def is_known(self) -> bool:
        return self.country_name is not None

    def same_country(self, other: Optional["Location"]) -> bool:
        if other is None:
            return False
        return _same_text(self.country_name, other.country_name)

    def same_city(self, other: Optional["Location"]) -> bool:
        return self.same_country(other) and _same_text(self.city, other.city)


@dataclass(frozen=True)
class Funding:
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None
    minimum_investment: Optional[float] = None
    maximum_investment: Optional[float] = None
    investor_count: Optional[int] = None
    currency: str = "USD"

    @property
    def minimum(self) -> float:
        value = _num(self.minimum_investment, DEFAULT_MINIMUM_INVESTMENT)
        return value if value > 0 else DEFAULT_MINIMUM_INVESTMENT

    @property
    def target(self) -> float:
        return _num(self.target_amount)

    @property
    def raised(self) -> float:
        return _num(self.current_amount)

    @property
    def investors(self) -> int:
        return int(_num(self.investor_count))


@dataclass(frozen=True)
class Engagement:
    likes: Optional[int] = None
    views: Optional[int] = None
    bookmarks: Optional[int] = None

    @property
    def like_count(self) -> int:
        return int(_num(self.likes))

    @property
    def view_count(self) -> int:
        return int(_num(self.views))

    @property
    def bookmark_count(self) -> int:
        return int(_num(self.bookmarks))


@dataclass(frozen=True)
class Metrics:
    revenue_monthly: Optional[float] = None
    revenue_growth: Optional[float] = None  # percent
    users_total: Optional[int] = None
    users_growth: Optional[float] = None  # percent
    team_size: Optional[int] = None
    team_growth: Optional[float] = None
    market_tam: Optional[float] = None
    market_sam: Optional[float] = None

    def get(self, name: str, default: float = 0.0) -> float:
        return _num(getattr(self, name, None), default)


@dataclass(frozen=True)
class InvestmentRecord:
    startup_id: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[dt.datetime] = None
    sector: Optional[str] = None  # sector of the backed startup, when known

    @property
    def value(self) -> float:
        return _num(self.amount)


# ---------------------------------------------------------------------------
# Scored entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StartupProfile:
    id: Optional[str] = None
    name: str = ""
    sector: Optional[str] = None
    stage: Optional[str] = None
    funding: Funding = field(default_factory=Funding)
    location: Optional[Location] = None
    engagement: Engagement = field(default_factory=Engagement)
    metrics: Metrics = field(default_factory=Metrics)
    founder_experience: Optional[str] = None
    founder_community_score: Optional[float] = None
    status: str = "active"

    @property
    def community_score(self) -> float:
        return _num(self.founder_community_score)


@dataclass(frozen=True)
class InvestorProfile:
    id: Optional[str] = None
    name: str = ""
    risk_tolerance: Optional[str] = None
    preferred_sectors: frozenset = frozenset()
    investment_capacity: Optional[float] = None
    investment_history: tuple = ()
    location: Optional[Location] = None
    total_invested: Optional[float] = None
    community_score: Optional[float] = None

    @property
    def risk(self) -> str:
        if self.risk_tolerance in RISK_TOLERANCES:
            return self.risk_tolerance
        return DEFAULT_RISK_TOLERANCE

    @property
    def capacity(self) -> float:
        return max(_num(self.investment_capacity), 0.0)

    @property
    def invested(self) -> float:
        return _num(self.total_invested)

    @property
    def community(self) -> float:
        return _num(self.community_score)

    def prefers(self, sector: Optional[str]) -> bool:
        return bool(sector) and sector in (self.preferred_sectors or ())

    def history_sectors(self) -> set[str]:
        return {rec.sector for rec in (self.investment_history or ()) if rec.sector}

    def average_investment(self) -> Optional[float]:
        history = self.investment_history or ()
        if not history:
            return None
        return sum(rec.value for rec in history) / len(history)
