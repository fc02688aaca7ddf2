import pytest

from conftest import make_investor, make_startup
from scoring.general import (
    assess_risk,
    estimate_returns,
    general_score,
    score_financials,
    score_market,
    score_team,
    startup_insights,
    suggest_investment,
)
from scoring.profiles import Engagement, Funding, Metrics


def test_bare_startup_gets_baseline_scores():
    startup = make_startup(sector="Gaming", stage="idea", founder_experience=None)
    scores = general_score(startup)
    assert scores.market == 50
    assert scores.team == 50
    assert scores.product == 35
    assert scores.traction == 20
    assert scores.financials == 25
    assert scores.overall == 36


def test_strong_startup_scores_and_breakdown():
    startup = make_startup(
        stage="growth",
        metrics=Metrics(
            market_tam=5e9, market_sam=5e8, team_size=12, users_total=20_000,
            users_growth=60, revenue_monthly=150_000, revenue_growth=120,
        ),
        engagement=Engagement(likes=400, views=5_000),
        funding=Funding(target_amount=100_000, current_amount=50_000, investor_count=10),
        founder_community_score=75,
    )
    scores = general_score(startup)
    assert scores.market == 100
    assert scores.team == 100
    assert scores.product == 90
    assert scores.financials == 100
    assert set(scores.breakdown()) == {"market", "team", "product", "traction", "financials"}
    assert 0 <= scores.overall <= 100


@pytest.mark.parametrize("fn", [score_market, score_team, score_financials])
def test_category_scores_capped(fn):
    startup = make_startup(metrics=Metrics(
        market_tam=1e12, market_sam=1e12, team_size=500, revenue_monthly=1e9, revenue_growth=1e4,
    ), founder_community_score=1_000)
    assert fn(startup) <= 100


def test_insights():
    startup = make_startup(
        stage="mvp",
        metrics=Metrics(users_growth=80),
        funding=Funding(target_amount=100_000, current_amount=1_000),
    )
    insights = startup_insights(startup, general_score(startup))
    assert insights["opportunities"] == [
        "AI sector showing strong growth potential",
        "Good timing for seed investment",
        "High user growth indicates scalability",
    ]
    assert "Financial metrics need development" in insights["challenges"]
    assert len(insights["challenges"]) <= 3


@pytest.mark.parametrize("risk,score,amount,confidence", [
    ("low", 50, 200, "medium"),
    ("medium", 50, 500, "medium"),
    ("high", 50, 1_000, "medium"),
    ("medium", 85, 600, "high"),
    ("medium", 30, 350, "low"),
    ("unknown", 50, 500, "medium"),
])
def test_suggest_investment(risk, score, amount, confidence):
    startup = make_startup(funding=Funding(target_amount=100_000, minimum_investment=100))
    suggestion = suggest_investment(startup, make_investor(investment_capacity=10_000), score, risk)
    assert suggestion.amount == amount
    assert suggestion.confidence == confidence
    assert suggestion.currency == "USD"
    assert suggestion.reasoning


def test_suggestion_never_below_minimum():
    startup = make_startup(funding=Funding(target_amount=100_000, minimum_investment=1_000))
    suggestion = suggest_investment(startup, make_investor(investment_capacity=10_000), 30, "low")
    assert suggestion.amount == 1_000
    assert suggestion.as_dict()["timeframe"]


def test_risk_flags_thin_traction_and_small_teams():
    risk = assess_risk(make_startup())
    assert risk.level == "high"
    assert risk.factors == ["Low initial traction", "Small team size", "Early stage venture"]

    halfway = make_startup(
        stage="growth",
        funding=Funding(target_amount=50_000, current_amount=25_000),
        metrics=Metrics(team_size=1),
    )
    assert assess_risk(halfway).level == "medium"

    solid = make_startup(
        stage="growth",
        funding=Funding(target_amount=50_000, current_amount=25_000),
        metrics=Metrics(team_size=6),
    )
    assert assess_risk(solid).as_dict() == {"level": "low", "factors": []}


def test_zero_target_counts_as_no_traction():
    risk = assess_risk(make_startup(stage="mvp", funding=Funding(target_amount=0), metrics=Metrics(team_size=4)))
    assert risk.level == "high"
    assert risk.factors == ["Low initial traction"]


@pytest.mark.parametrize("stage,sector,multiple", [
    ("idea", "Gaming", "10x"),
    ("mvp", "AI", "9x"),
    ("expansion", "FinTech", "3x"),
    ("growth", "Climate", "4x"),
    ("stealth", "Other", "3x"),
])
def test_return_estimate_by_stage_and_sector(stage, sector, multiple):
    estimate = estimate_returns(make_startup(stage=stage, sector=sector))
    assert estimate["estimated_multiplier"] == multiple
    assert estimate["timeframe"] == "3-7 years"
