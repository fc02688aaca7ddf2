"""Pydantic schemas for FastAPI request / response models."""

from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field

Sector = Literal["AI", "Health", "Climate", "EdTech", "FinTech", "E-commerce", "Gaming", "Other"]
Stage = Literal["idea", "prototype", "mvp", "early-revenue", "growth", "expansion"]
BusinessModel = Literal["B2B", "B2C", "B2B2C", "Marketplace", "SaaS", "Hardware", "Other"]
RiskTolerance = Literal["conservative", "moderate", "aggressive"]
UserType = Literal["entrepreneur", "investor", "both"]
Experience = Literal["first-time", "experienced", "serial"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = r"^\+?[0-9][0-9 \-]{6,19}$"


class LocationIn(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


# ---------------------------------------------------------------------------
# Auth / users
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=2, max_length=100)
    last_name: str = Field(min_length=2, max_length=100)
    phone_number: str = Field(pattern=PHONE_PATTERN)
    date_of_birth: dt.date
    user_type: UserType
    business_type: Literal["startup", "business", "investor"]
    business_name: Optional[str] = Field(default=None, min_length=2)
    location: Optional[LocationIn] = None


class LoginRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1)


class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    phone_number: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    bio: Optional[str] = Field(default=None, max_length=500)
    business_name: Optional[str] = Field(default=None, min_length=2)
    location: Optional[LocationIn] = None
    experience: Optional[Experience] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class UserPublic(BaseModel):
    id: str
    first_name: str
    last_name: str
    user_type: str
    business_name: Optional[str] = None
    bio: Optional[str] = ""
    city: Optional[str] = None
    country: Optional[str] = None
    kyc_status: str = "pending"
    community_score: float = 0
    experience: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class UserPrivate(UserPublic):
    email: str
    phone_number: Optional[str] = ""
    state: Optional[str] = None
    is_email_verified: bool = False
    is_admin: bool = False
    investment_capacity: float = 0
    risk_tolerance: Optional[str] = "moderate"
    preferred_sectors: list[str] = []
    preferred_stages: list[str] = []
    geographic_preferences: list[str] = []
    total_invested: float = 0
    portfolio_value: float = 0
    total_returns: float = 0
    last_login: Optional[dt.datetime] = None


class RequiredDocument(BaseModel):
    type: str
    name: str
    required: bool


class AuthResponse(BaseModel):
    user: UserPrivate
    token: str
    required_documents: list[RequiredDocument] = []


class MessageResponse(BaseModel):
    message: str


class KycDocumentOut(BaseModel):
    id: int
    doc_type: str
    name: str
    status: str
    uploaded_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class DocumentSummary(BaseModel):
    total: int = 0
    uploaded: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    missing: list[RequiredDocument] = []
    complete: bool = False


class DocumentUploadResponse(BaseModel):
    document: KycDocumentOut
    summary: DocumentSummary


class RequiredDocumentsResponse(BaseModel):
    user_type: str
    documents: list[RequiredDocument]


class InvestorBrief(BaseModel):
    id: str
    first_name: str
    last_name: str
    city: Optional[str] = None
    country: Optional[str] = None
    risk_tolerance: Optional[str] = None
    preferred_sectors: list[str] = []
    total_invested: float = 0
    community_score: float = 0

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Startups
# ---------------------------------------------------------------------------

class StartupLocation(BaseModel):
    city: str = Field(min_length=1)
    state: Optional[str] = None
    country: str = Field(min_length=1)


class FundingIn(BaseModel):
    target_amount: float = Field(ge=1000)
    currency: str = "USD"
    minimum_investment: float = Field(default=100, gt=0)
    maximum_investment: Optional[float] = Field(default=None, gt=0)
    funding_deadline: Optional[dt.datetime] = None
    equity_offered: Optional[float] = Field(default=None, ge=0, le=100)
    valuation: Optional[float] = Field(default=None, ge=0)


class MetricsIn(BaseModel):
    revenue_monthly: Optional[float] = None
    revenue_annual: Optional[float] = None
    revenue_growth: Optional[float] = None
    users_total: Optional[int] = None
    users_active: Optional[int] = None
    users_growth: Optional[float] = None
    team_size: Optional[int] = None
    team_growth: Optional[float] = None
    market_tam: Optional[float] = None
    market_sam: Optional[float] = None
    market_som: Optional[float] = None


class StartupCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    tagline: str = Field(min_length=10, max_length=200)
    description: str = Field(min_length=50, max_length=2000)
    logo: Optional[str] = None
    sector: Sector
    sub_sector: Optional[str] = None
    business_model: BusinessModel
    stage: Stage
    location: StartupLocation
    funding: FundingIn
    metrics: MetricsIn = Field(default_factory=MetricsIn)
    links: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class StartupLocationEdit(BaseModel):
    city: Optional[str] = Field(default=None, min_length=1)
    state: Optional[str] = None
    country: Optional[str] = Field(default=None, min_length=1)


class FundingEdit(BaseModel):
    """Partial funding block; only the fields sent are changed."""

    target_amount: Optional[float] = Field(default=None, ge=1000)
    currency: Optional[str] = None
    minimum_investment: Optional[float] = Field(default=None, gt=0)
    maximum_investment: Optional[float] = Field(default=None, gt=0)
    funding_deadline: Optional[dt.datetime] = None
    equity_offered: Optional[float] = Field(default=None, ge=0, le=100)
    valuation: Optional[float] = Field(default=None, ge=0)


class StartupEdit(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    tagline: Optional[str] = Field(default=None, min_length=10, max_length=200)
    description: Optional[str] = Field(default=None, min_length=50, max_length=2000)
    logo: Optional[str] = None
    sector: Optional[Sector] = None
    sub_sector: Optional[str] = None
    business_model: Optional[BusinessModel] = None
    stage: Optional[Stage] = None
    location: Optional[StartupLocationEdit] = None
    funding: Optional[FundingEdit] = None
    metrics: Optional[MetricsIn] = None
    links: Optional[dict[str, str]] = None
    tags: Optional[list[str]] = None


class StartupBrief(BaseModel):
    id: str
    name: str
    tagline: str = ""
    logo: Optional[str] = None
    founder_id: str
    sector: str
    stage: str
    city: Optional[str] = None
    country: Optional[str] = None
    target_amount: float = 0
    current_amount: float = 0
    minimum_investment: float = 100
    currency: str = "USD"
    investor_count: int = 0
    funding_progress: float = 0
    views: int = 0
    likes: int = 0
    bookmarks: int = 0
    ai_score_overall: float = 0
    status: str = "draft"
    is_liked: Optional[bool] = None
    is_bookmarked: Optional[bool] = None

    class Config:
        from_attributes = True


class StartupDetail(StartupBrief):
    description: str = ""
    sub_sector: Optional[str] = None
    business_model: str = ""
    state: Optional[str] = None
    maximum_investment: Optional[float] = None
    funding_deadline: Optional[dt.datetime] = None
    equity_offered: Optional[float] = None
    valuation: Optional[float] = None
    revenue_monthly: Optional[float] = None
    revenue_annual: Optional[float] = None
    revenue_growth: Optional[float] = None
    users_total: Optional[int] = None
    users_active: Optional[int] = None
    users_growth: Optional[float] = None
    team_size: Optional[int] = None
    team_growth: Optional[float] = None
    market_tam: Optional[float] = None
    market_sam: Optional[float] = None
    market_som: Optional[float] = None
    moderation_status: str = "pending"
    is_promoted: bool = False
    links: dict = {}
    tags: list[str] = []
    created_at: Optional[dt.datetime] = None
    published_at: Optional[dt.datetime] = None


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


class StartupListResponse(BaseModel):
    startups: list[StartupBrief]
    pagination: Pagination


class LikeResponse(BaseModel):
    likes: int
    is_liked: bool


class BookmarkResponse(BaseModel):
    bookmarks: int
    is_bookmarked: bool


class UpdatePostRequest(BaseModel):
    title: str = Field(min_length=5, max_length=100)
    content: str = Field(min_length=20, max_length=1000)
    milestone: Literal["funding", "product", "team", "partnership", "customer", "other"] = "other"
    images: list[str] = Field(default_factory=list)


class UpdatePostOut(BaseModel):
    id: int
    startup_id: str
    title: str
    content: str
    milestone: str
    images: list[str] = []
    published_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class ModerationRequest(BaseModel):
    status: Optional[Literal["draft", "pending_review", "active", "funded", "paused", "rejected", "closed"]] = None
    moderation_status: Optional[Literal["pending", "approved", "rejected"]] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Investments
# ---------------------------------------------------------------------------

class InvestmentRequest(BaseModel):
    startup_id: str
    amount: float = Field(ge=100)


class InvestmentOut(BaseModel):
    id: str
    startup_id: str
    amount: float
    current_value: Optional[float] = None
    status: str = "active"
    transaction_id: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    startup_name: Optional[str] = None
    sector: Optional[str] = None

    class Config:
        from_attributes = True


class InvestmentResponse(BaseModel):
    investment: InvestmentOut
    startup_name: str
    funding_progress: float
    startup_status: str


class PortfolioResponse(BaseModel):
    total_invested: float = 0
    portfolio_value: float = 0
    total_returns: float = 0
    investments: list[InvestmentOut] = []


class PortfolioPerformance(BaseModel):
    total_invested: float = 0
    portfolio_value: float = 0
    total_returns: float = 0
    roi: float = 0


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------

class StartupRecommendation(BaseModel):
    startup: StartupBrief
    ai_score: float = Field(serialization_alias="aiScore")
    reasons: list[str] = []


class InvestorRecommendation(BaseModel):
    investor: InvestorBrief
    match_score: float = Field(serialization_alias="matchScore")
    reasons: list[str] = []


class StartupRecommendationList(BaseModel):
    recommendations: list[StartupRecommendation]
    total_count: int
    ai_powered: bool = True


class InvestorRecommendationList(BaseModel):
    recommendations: list[InvestorRecommendation]
    total_count: int
    ai_powered: bool = True


class SectorTrendOut(BaseModel):
    sector: str
    total_funding: float
    startup_count: int
    avg_engagement: float


class TrendingSectorsResponse(BaseModel):
    sectors: list[SectorTrendOut]
    generated_at: dt.datetime


class PreferencesRequest(BaseModel):
    preferred_sectors: Optional[list[Sector]] = None
    risk_tolerance: Optional[RiskTolerance] = None
    investment_capacity: Optional[float] = Field(default=None, ge=0)
    preferred_stages: Optional[list[Stage]] = None
    geographic_preferences: Optional[list[str]] = None


class InvestorPreferences(BaseModel):
    preferred_sectors: list[str] = []
    risk_tolerance: Optional[str] = "moderate"
    investment_capacity: float = 0
    preferred_stages: list[str] = []
    geographic_preferences: list[str] = []

    class Config:
        from_attributes = True


class PreferencesResponse(BaseModel):
    updated_preferences: InvestorPreferences
    new_recommendations: list[StartupRecommendation]


class PersonalizedScore(BaseModel):
    overall_score: float
    factor_scores: dict[str, float]
    reasons: list[str] = []


class GeneralScores(BaseModel):
    overall: float
    breakdown: dict[str, float]


class Insights(BaseModel):
    strengths: list[str] = []
    challenges: list[str] = []
    opportunities: list[str] = []


class SimilarStartup(BaseModel):
    id: str
    name: str
    tagline: str = ""
    target_amount: float = 0
    ai_score_overall: float = 0

    class Config:
        from_attributes = True


class StartupInsightsResponse(BaseModel):
    startup_id: str
    general_scores: GeneralScores
    personalized_score: Optional[PersonalizedScore] = None
    insights: Insights
    similar_startups: list[SimilarStartup] = []
    recommendations: list[str] = []


class SuggestInvestmentRequest(BaseModel):
    startup_id: str
    risk_level: Literal["low", "medium", "high"] = "medium"


class InvestmentSuggestionOut(BaseModel):
    amount: int
    currency: str
    reasoning: list[str]
    confidence: str
    timeframe: str


class SuggestInvestmentResponse(BaseModel):
    match_score: float
    suggestion: InvestmentSuggestionOut
    generated_at: dt.datetime


class UpdateScoresResponse(BaseModel):
    updated: int
    updated_at: dt.datetime


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

class SectorBreakdownOut(BaseModel):
    sector: str
    total_invested: float
    total_startups: int
    avg_funding: float


class AIInsightsRequest(BaseModel):
    target_id: str
    target_type: Literal["startup", "investor"]
    analysis_type: Literal["investor_analysis", "startup_analysis"]


class RiskAssessmentOut(BaseModel):
    level: str
    factors: list[str] = []


class PotentialReturnsOut(BaseModel):
    estimated_multiplier: str
    timeframe: str
    confidence: str


class InvestorInsight(BaseModel):
    investor: InvestorBrief
    compatibility_score: float
    reasoning: list[str] = []


class StartupInsight(BaseModel):
    startup: StartupBrief
    compatibility_score: float
    general_score: float
    reasoning: list[str] = []
    risk_assessment: RiskAssessmentOut
    potential_returns: PotentialReturnsOut


class InsightsSummary(BaseModel):
    overview: str
    key_findings: list[str] = []
    recommendations: list[str] = []


class AIInsightsResponse(BaseModel):
    """One of ``startup`` / ``investor`` is set, with the matching list."""

    type: str
    startup: Optional[StartupBrief] = None
    investor: Optional[InvestorBrief] = None
    investors: list[InvestorInsight] = []
    startups: list[StartupInsight] = []
    summary: InsightsSummary
    analysis_timestamp: dt.datetime


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

class RazorpayOrderRequest(BaseModel):
    amount: float = Field(gt=0)
    currency: str = "INR"


class RazorpayOrderResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    key: str


class StripeIntentRequest(BaseModel):
    amount: float = Field(gt=0)
    currency: str = "USD"


class StripeIntentResponse(BaseModel):
    client_secret: str
    payment_intent_id: str


class VerifyPaymentRequest(BaseModel):
    gateway: Literal["razorpay", "stripe"]
    payment_id: str
    order_id: Optional[str] = None
    signature: Optional[str] = None


class VerifyPaymentResponse(BaseModel):
    is_valid: bool
