"""
Import script: startups CSV -> database.

Usage:
    python -m backend.import_csv --csv startups.csv --founder-id <user id>
    python -m backend.import_csv --csv startups.csv --publish   # list them right away

Rows without a ``founder_id`` column value are attributed to --founder-id.
Unknown sectors become "Other", unknown stages "idea".
"""

from __future__ import annotations

import argparse
import asyncio
import datetime as dt
from typing import Optional

import pandas as pd

from backend.database import async_session, init_db
from backend.models import Startup
from scoring.profiles import SECTORS, STAGES

COLUMN_MAP = {
    "Name": "name",
    "Tagline": "tagline",
    "Description": "description",
    "Sector": "sector",
    "Stage": "stage",
    "Business Model": "business_model",
    "City": "city",
    "Country": "country",
    "Target Amount": "target_amount",
    "Minimum Investment": "minimum_investment",
    "Raised": "current_amount",
    "Monthly Revenue": "revenue_monthly",
    "Revenue Growth": "revenue_growth",
    "Users": "users_total",
    "User Growth": "users_growth",
    "Team Size": "team_size",
    "TAM": "market_tam",
    "Founder": "founder_id",
}

SECTOR_NAMES = {s.lower(): s for s in SECTORS}

NUMERIC_COLUMNS = {
    "target_amount": 0.0,
    "minimum_investment": 100.0,
    "current_amount": 0.0,
    "revenue_monthly": None,
    "revenue_growth": None,
    "users_total": None,
    "users_growth": None,
    "team_size": None,
    "market_tam": None,
}

TEXT_COLUMNS = ("name", "tagline", "description", "sector", "stage", "business_model",
                "city", "country", "founder_id")


def load_frame(csv_path: str) -> pd.DataFrame:
    """Read *csv_path*, rename known headers and coerce numeric columns."""
    raw = pd.read_csv(csv_path, encoding="utf-8", dtype=str)
    raw = raw.rename(columns={k: v for k, v in COLUMN_MAP.items() if k in raw.columns})

    for col in TEXT_COLUMNS:
        if col not in raw.columns:
            raw[col] = ""
    raw[list(TEXT_COLUMNS)] = raw[list(TEXT_COLUMNS)].fillna("").apply(lambda s: s.str.strip())

    for col, default in NUMERIC_COLUMNS.items():
        if col not in raw.columns:
            raw[col] = None
        raw[col] = pd.to_numeric(raw[col], errors="coerce")
        if default is not None:
            raw[col] = raw[col].fillna(default)
    return raw


def _opt(value) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def _opt_int(value) -> Optional[int]:
    return None if pd.isna(value) else int(value)


def frame_to_startups(
    frame: pd.DataFrame,
    default_founder: Optional[str] = None,
    publish: bool = False,
) -> list[Startup]:
    """Build (unsaved) Startup rows; rows without a name or founder are skipped."""
    now = dt.datetime.utcnow()
    startups = []
    for _, row in frame.iterrows():
        founder = row["founder_id"] or default_founder
        if not row["name"] or not founder:
            print(f"  skipping row without name/founder: {row['name']!r}")
            continue

        sector = SECTOR_NAMES.get(row["sector"].lower(), "Other")
        stage = row["stage"].lower() if row["stage"].lower() in STAGES else "idea"
        target = float(row["target_amount"])
        raised = min(float(row["current_amount"]), target) if target else 0.0

        startups.append(Startup(
            name=row["name"],
            tagline=row["tagline"] or row["name"],
            description=row["description"] or row["tagline"] or row["name"],
            founder_id=founder,
            sector=sector,
            business_model=row["business_model"] or "Other",
            stage=stage,
            city=row["city"] or "Unknown",
            country=row["country"] or "Unknown",
            target_amount=target,
            minimum_investment=float(row["minimum_investment"]),
            current_amount=raised,
            revenue_monthly=_opt(row["revenue_monthly"]),
            revenue_growth=_opt(row["revenue_growth"]),
            users_total=_opt_int(row["users_total"]),
            users_growth=_opt(row["users_growth"]),
            team_size=_opt_int(row["team_size"]),
            market_tam=_opt(row["market_tam"]),
            status="active" if publish else "draft",
            moderation_status="approved" if publish else "pending",
            published_at=now if publish else None,
            links={},
            tags=[],
        ))
    return startups


async def import_startups(
    csv_path: str,
    default_founder: Optional[str] = None,
    publish: bool = False,
    session_factory=async_session,
) -> int:
    frame = load_frame(csv_path)
    startups = frame_to_startups(frame, default_founder, publish)
    print(f"Importing {len(startups)} of {len(frame)} rows ...")

    async with session_factory() as session:
        for idx, startup in enumerate(startups):
            session.add(startup)
            if (idx + 1) % 500 == 0:
                await session.flush()
                print(f"  ... {idx + 1} / {len(startups)}")
        await session.commit()

    print("Import complete.")
    return len(startups)


async def _run(args):
    print("Initialising database schema ...")
    await init_db()
    await import_startups(args.csv, args.founder_id, args.publish)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--csv", default="startups.csv")
    parser.add_argument("--founder-id", default=None)
    parser.add_argument("--publish", action="store_true")
    args = parser.parse_args()
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
