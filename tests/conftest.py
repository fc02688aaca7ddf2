import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backend import models
from backend.app import app
from backend.database import get_session, init_db
from backend.security import create_access_token, hash_password
from scoring.profiles import (
    Engagement,
    Funding,
    InvestmentRecord,
    InvestorProfile,
    Location,
    Metrics,
    StartupProfile,
)

PASSWORD = "secret123"


# ---------------------------------------------------------------------------
# scoring fixtures
# ---------------------------------------------------------------------------

def make_investor(**overrides) -> InvestorProfile:
    fields = dict(
        id="inv-1",
        name="Ada Investor",
        risk_tolerance="aggressive",
        preferred_sectors=frozenset({"AI"}),
        investment_capacity=10_000,
        location=Location(city="New York", country="USA"),
    )
    fields.update(overrides)
    return InvestorProfile(**fields)


def make_startup(**overrides) -> StartupProfile:
    fields = dict(
        id="st-1",
        name="NeuroLeaf",
        sector="AI",
        stage="idea",
        funding=Funding(target_amount=50_000, current_amount=0, minimum_investment=500),
        location=Location(city="Austin", country="United States"),
        engagement=Engagement(),
        metrics=Metrics(),
        founder_experience="serial",
    )
    fields.update(overrides)
    return StartupProfile(**fields)


def history(*amounts, sector="AI"):
    return tuple(InvestmentRecord(startup_id=f"h{i}", amount=a, sector=sector) for i, a in enumerate(amounts))


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(bind=eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def client(session_factory, tmp_path, monkeypatch):
    import config_env

    monkeypatch.setattr(config_env, "UPLOAD_DIR", str(tmp_path / "uploads"))

    async def _session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def auth_header(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def create_user(session_factory):
    """Insert a user directly; returns (user, auth headers)."""

    async def _create(user_type="investor", **overrides):
        fields = dict(
            email=f"{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(PASSWORD),
            first_name="Test",
            last_name="User",
            user_type=user_type,
            kyc_status="verified",
            status="active",
            risk_tolerance="moderate",
            investment_capacity=10_000,
            preferred_sectors=[],
            preferred_stages=[],
            geographic_preferences=[],
            city="Austin",
            country="United States",
        )
        fields.update(overrides)
        user = models.User(**fields)
        async with session_factory() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return user, auth_header(user.id)

    return _create


@pytest.fixture
def create_startup(session_factory):
    """Insert a listed (active + approved) startup unless overridden."""

    async def _create(founder_id: str, **overrides):
        fields = dict(
            name="NeuroLeaf",
            tagline="Plant health from leaf images",
            description="Computer vision for farmers. " * 3,
            founder_id=founder_id,
            sector="AI",
            business_model="SaaS",
            stage="mvp",
            city="Austin",
            country="United States",
            target_amount=50_000,
            minimum_investment=500,
            current_amount=0,
            status="active",
            moderation_status="approved",
            links={},
            tags=[],
        )
        fields.update(overrides)
        startup = models.Startup(**fields)
        async with session_factory() as session:
            session.add(startup)
            await session.commit()
            await session.refresh(startup)
        return startup

    return _create


@pytest.fixture
def fetch(session_factory):
    """Re-read a row by primary key from a fresh session."""

    async def _fetch(model, pk):
        async with session_factory() as session:
            return await session.get(model, pk)

    return _fetch
