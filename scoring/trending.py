"""Sector-level aggregates over startup snapshots (group-by / sort / limit)."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Iterable

from scoring.profiles import StartupProfile


@dataclass(frozen=True)
class SectorTrend:
    sector: str
    total_funding: float
    startup_count: int
    avg_engagement: float  # mean views per startup

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SectorBreakdown:
    sector: str
    total_invested: float
    total_startups: int
    avg_funding: float

    def as_dict(self) -> dict:
        return asdict(self)


def _group(startups: Iterable[StartupProfile]) -> dict[str, list[StartupProfile]]:
    groups: dict[str, list[StartupProfile]] = defaultdict(list)
    for s in startups or ():
        if s is None:
            continue
        groups[s.sector or "Other"].append(s)
    return groups


def trending_sectors(startups: Iterable[StartupProfile], limit: int = 5) -> list[SectorTrend]:
    """Sectors by total raised funding, then average views; top ``limit``."""
    trends = []
    for sector, members in _group(startups).items():
        total = sum(s.funding.raised for s in members)
        views = sum(s.engagement.view_count for s in members)
        trends.append(SectorTrend(
            sector=sector,
            total_funding=round(total, 2),
            startup_count=len(members),
            avg_engagement=round(views / len(members), 2),
        ))
    trends.sort(key=lambda t: (-t.total_funding, -t.avg_engagement, t.sector))
    return trends[: max(limit, 0)]


def sector_breakdown(startups: Iterable[StartupProfile]) -> list[SectorBreakdown]:
    rows = []
    for sector, members in _group(startups).items():
        total = sum(s.funding.raised for s in members)
        rows.append(SectorBreakdown(
            sector=sector,
            total_invested=round(total, 2),
            total_startups=len(members),
            avg_funding=round(total / len(members), 2),
        ))
    rows.sort(key=lambda r: (-r.total_invested, r.sector))
    return rows
