"""
SQLAlchemy ORM models -- StartupLink schema.

Tables
------
users               -- founders and investors (profiles flattened into columns)
startups            -- listing, funding round, metrics, engagement counters
investments         -- one row per recorded investment
startup_reactions   -- per-user likes / bookmarks
startup_updates     -- founder progress posts
kyc_documents       -- uploaded KYC files and their review status
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base


def new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(32), default="")
    date_of_birth = Column(Date, nullable=True)
    business_name = Column(String(255), nullable=True)
    business_type = Column(String(20), default="startup")  # startup | business | investor
    user_type = Column(String(20), nullable=False, index=True)  # entrepreneur | investor | both
    bio = Column(Text, default="")

    city = Column(String(128), nullable=True)
    state = Column(String(128), nullable=True)
    country = Column(String(128), nullable=True)

    status = Column(String(20), default="active", index=True)  # active | suspended | deactivated
    kyc_status = Column(String(20), default="pending", index=True)  # pending | verified | rejected
    is_email_verified = Column(Boolean, default=False)
    is_admin = Column(Boolean, default=False)
    community_score = Column(Float, default=0)

    # investor profile
    investment_capacity = Column(Float, default=0)
    risk_tolerance = Column(String(20), default="moderate")
    preferred_sectors = Column(JSON, default=list)
    preferred_stages = Column(JSON, default=list)
    geographic_preferences = Column(JSON, default=list)
    total_invested = Column(Float, default=0)
    portfolio_value = Column(Float, default=0)
    total_returns = Column(Float, default=0)

    # entrepreneur profile
    experience = Column(String(20), default="first-time")  # first-time | experienced | serial

    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    startups = relationship("Startup", back_populates="founder")
    investments = relationship("Investment", back_populates="investor")
    kyc_documents = relationship("KycDocument", back_populates="user")

    @property
    def is_investor(self) -> bool:
        return self.user_type in ("investor", "both")

    @property
    def is_entrepreneur(self) -> bool:
        return self.user_type in ("entrepreneur", "both")


# ---------------------------------------------------------------------------
# Startups
# ---------------------------------------------------------------------------

class Startup(Base):
    __tablename__ = "startups"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False, index=True)
    tagline = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    logo = Column(String(512), nullable=True)
    founder_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)

    sector = Column(String(32), nullable=False, index=True)
    sub_sector = Column(String(64), nullable=True)
    business_model = Column(String(32), nullable=False)
    stage = Column(String(32), nullable=False, index=True)

    city = Column(String(128), nullable=False)
    state = Column(String(128), nullable=True)
    country = Column(String(128), nullable=False)

    # funding round
    target_amount = Column(Float, nullable=False)
    currency = Column(String(8), default="USD")
    minimum_investment = Column(Float, default=100)
    maximum_investment = Column(Float, nullable=True)
    current_amount = Column(Float, default=0, nullable=False)
    investor_count = Column(Integer, default=0, nullable=False)
    funding_deadline = Column(DateTime, nullable=True)
    equity_offered = Column(Float, nullable=True)
    valuation = Column(Float, nullable=True)

    # business metrics
    revenue_monthly = Column(Float, nullable=True)
    revenue_annual = Column(Float, nullable=True)
    revenue_growth = Column(Float, nullable=True)
    users_total = Column(Integer, nullable=True)
    users_active = Column(Integer, nullable=True)
    users_growth = Column(Float, nullable=True)
    team_size = Column(Integer, nullable=True)
    team_growth = Column(Float, nullable=True)
    market_tam = Column(Float, nullable=True)
    market_sam = Column(Float, nullable=True)
    market_som = Column(Float, nullable=True)

    # engagement counters
    views = Column(Integer, default=0, nullable=False)
    likes = Column(Integer, default=0, nullable=False)
    bookmarks = Column(Integer, default=0, nullable=False)
    comments = Column(Integer, default=0, nullable=False)
    shares = Column(Integer, default=0, nullable=False)

    # general AI score (persisted by /recommendations/update-scores)
    ai_score_overall = Column(Float, default=0, index=True)
    ai_score_market = Column(Float, nullable=True)
    ai_score_team = Column(Float, nullable=True)
    ai_score_product = Column(Float, nullable=True)
    ai_score_traction = Column(Float, nullable=True)
    ai_score_financials = Column(Float, nullable=True)
    ai_score_updated_at = Column(DateTime, nullable=True)

    status = Column(String(20), default="draft", index=True)
    moderation_status = Column(String(20), default="pending", index=True)
    moderation_notes = Column(Text, nullable=True)
    is_promoted = Column(Boolean, default=False)
    featured_until = Column(DateTime, nullable=True)

    links = Column(JSON, default=dict)
    tags = Column(JSON, default=list)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
    published_at = Column(DateTime, nullable=True)
    funding_end_date = Column(DateTime, nullable=True)

    founder = relationship("User", back_populates="startups")
    investments = relationship("Investment", back_populates="startup")
    updates = relationship("StartupUpdate", back_populates="startup")

    __table_args__ = (
        Index("ix_startups_status_moderation", "status", "moderation_status"),
        Index("ix_startups_sector_status", "sector", "status"),
    )

    @property
    def funding_progress(self) -> float:
        if not self.target_amount:
            return 0.0
        return round(min((self.current_amount or 0) / self.target_amount * 100, 100.0), 2)


class StartupReaction(Base):
    __tablename__ = "startup_reactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    startup_id = Column(String(32), ForeignKey("startups.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    kind = Column(String(16), nullable=False)  # like | bookmark
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint("startup_id", "user_id", "kind", name="uq_reaction"),
    )


class StartupUpdate(Base):
    __tablename__ = "startup_updates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    startup_id = Column(String(32), ForeignKey("startups.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    milestone = Column(String(20), default="other")
    images = Column(JSON, default=list)
    published_at = Column(DateTime, default=func.now())

    startup = relationship("Startup", back_populates="updates")


# ---------------------------------------------------------------------------
# Investments
# ---------------------------------------------------------------------------

class Investment(Base):
    __tablename__ = "investments"

    id = Column(String(32), primary_key=True, default=new_id)
    investor_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    startup_id = Column(String(32), ForeignKey("startups.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    current_value = Column(Float, nullable=True)
    status = Column(String(20), default="active")  # active | exited | failed
    transaction_id = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=func.now())

    investor = relationship("User", back_populates="investments")
    startup = relationship("Startup", back_populates="investments")


# ---------------------------------------------------------------------------
# KYC
# ---------------------------------------------------------------------------

class KycDocument(Base):
    __tablename__ = "kyc_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    doc_type = Column(String(32), nullable=False)
    name = Column(String(255), nullable=False)
    path = Column(String(512), nullable=False)
    status = Column(String(20), default="pending")  # pending | approved | rejected
    uploaded_at = Column(DateTime, default=func.now())

    user = relationship("User", back_populates="kyc_documents")
