"""
Weighting tables for the match scorer.

Everything here is immutable; a ``ScoringConfig`` is handed to ``MatchScorer``
at construction so tests (or an A/B experiment) can swap any table without
touching module state.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Mapping


def _frozen_table(raw: dict) -> Mapping[str, Mapping[str, float]]:
    return MappingProxyType({k: MappingProxyType(dict(v)) for k, v in raw.items()})


@dataclass(frozen=True)
class StartupMatchWeights:
    """Startup -> investor direction (six factors, sum 1.0)."""

    sector: float = 0.25
    stage: float = 0.20
    location: float = 0.15
    funding: float = 0.20
    performance: float = 0.15
    social: float = 0.05

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class InvestorMatchWeights:
    """Investor -> startup direction (five factors, sum 1.0)."""

    sector: float = 0.30
    capacity: float = 0.25
    risk: float = 0.20
    pattern: float = 0.15
    geography: float = 0.10

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


# conservative favours late stage, aggressive early stage,
# moderate peaks at early-revenue / mvp
STAGE_PREFERENCES = _frozen_table({
    "conservative": {
        "growth": 1.0, "expansion": 0.9, "early-revenue": 0.7,
        "mvp": 0.4, "prototype": 0.2, "idea": 0.1,
    },
    "moderate": {
        "early-revenue": 1.0, "mvp": 0.9, "growth": 0.8,
        "expansion": 0.7, "prototype": 0.6, "idea": 0.3,
    },
    "aggressive": {
        "idea": 1.0, "prototype": 0.9, "mvp": 0.8,
        "early-revenue": 0.6, "growth": 0.4, "expansion": 0.2,
    },
})

RISK_MATRIX = _frozen_table({
    "conservative": {
        "idea": 0.1, "prototype": 0.3, "mvp": 0.5,
        "early-revenue": 0.8, "growth": 1.0, "expansion": 1.0,
    },
    "moderate": {
        "idea": 0.3, "prototype": 0.5, "mvp": 0.7,
        "early-revenue": 1.0, "growth": 0.9, "expansion": 0.8,
    },
    "aggressive": {
        "idea": 1.0, "prototype": 0.9, "mvp": 0.8,
        "early-revenue": 0.7, "growth": 0.6, "expansion": 0.5,
    },
})

MAJOR_MARKETS = frozenset({
    "United States", "India", "Singapore", "United Kingdom", "Germany",
})

TIMEZONE_REGIONS = MappingProxyType({
    "Americas": frozenset({"United States", "Canada", "Brazil", "Mexico"}),
    "Europe": frozenset({"United Kingdom", "Germany", "France", "Netherlands"}),
    "Asia": frozenset({"India", "Singapore", "Japan", "China"}),
    "MENA": frozenset({"UAE", "Saudi Arabia", "Egypt", "Israel"}),
})

NEUTRAL_SCORE = 0.5


@dataclass(frozen=True)
class ScoringConfig:
    startup_weights: StartupMatchWeights = field(default_factory=StartupMatchWeights)
    investor_weights: InvestorMatchWeights = field(default_factory=InvestorMatchWeights)
    stage_preferences: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: STAGE_PREFERENCES)
    risk_matrix: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: RISK_MATRIX)
    major_markets: frozenset = MAJOR_MARKETS
    timezone_regions: Mapping[str, frozenset] = field(default_factory=lambda: TIMEZONE_REGIONS)
    # funding fit band, as fractions of investor capacity
    ideal_band: tuple[float, float] = (0.05, 0.20)


DEFAULT_CONFIG = ScoringConfig()
