import pytest

from conftest import history, make_investor, make_startup
from scoring import InvalidInputError, MatchScorer, ScoringError
from scoring.profiles import Engagement, Funding, Location, Metrics
from scoring.weights import STAGE_PREFERENCES, ScoringConfig, StartupMatchWeights

scorer = MatchScorer()


# ---------------------------------------------------------------------------
# startup -> investor
# ---------------------------------------------------------------------------

def test_preferred_early_stage_startup_scores_high():
    result = scorer.score_startup_for_investor(make_startup(), make_investor())

    assert result.overall_score == pytest.approx(89.0)
    assert result.candidate_id == "st-1"
    assert result.factor_scores["sector"] == 1.0
    assert result.factor_scores["stage"] == 1.0
    assert result.factor_scores["funding"] == 1.0
    assert result.factor_scores["location"] == 0.8


def test_off_preference_expensive_startup_scores_lower():
    good = scorer.score_startup_for_investor(make_startup(), make_investor())
    worse = scorer.score_startup_for_investor(
        make_startup(
            id="st-2",
            sector="Health",
            stage="growth",
            funding=Funding(target_amount=100_000, minimum_investment=9_000),
            founder_experience=None,
        ),
        make_investor(),
    )
    assert worse.overall_score < good.overall_score
    assert worse.overall_score == pytest.approx(45.0)


def test_factor_keys_match_weights():
    result = scorer.score_startup_for_investor(make_startup(), make_investor())
    assert set(result.factor_scores) == set(StartupMatchWeights().as_dict())

    result = scorer.score_investor_for_startup(make_investor(), make_startup())
    assert set(result.factor_scores) == {"sector", "capacity", "risk", "pattern", "geography"}


@pytest.mark.parametrize("risk,stage", [
    ("conservative", "idea"),
    ("moderate", "growth"),
    ("aggressive", "expansion"),
    (None, "mvp"),
    ("reckless", "unknown"),
])
def test_scores_stay_in_range(risk, stage):
    startup = make_startup(
        stage=stage,
        engagement=Engagement(likes=10_000, views=10**6, bookmarks=10_000),
        funding=Funding(target_amount=1, minimum_investment=1, investor_count=500),
    )
    investor = make_investor(risk_tolerance=risk, investment_capacity=-50)
    for result in (
        scorer.score_startup_for_investor(startup, investor),
        scorer.score_investor_for_startup(investor, startup),
    ):
        assert 0 <= result.overall_score <= 100
        assert all(0 <= v <= 1 for v in result.factor_scores.values())


def test_scoring_is_deterministic():
    startup, investor = make_startup(), make_investor(investment_history=history(400, 800))
    first = scorer.score_startup_for_investor(startup, investor)
    assert scorer.score_startup_for_investor(startup, investor) == first
    assert scorer.score_investor_for_startup(investor, startup) == scorer.score_investor_for_startup(investor, startup)


def test_sector_preference_never_hurts():
    startup = make_startup(sector="Climate")
    without = scorer.score_startup_for_investor(startup, make_investor(preferred_sectors=frozenset()))
    with_pref = scorer.score_startup_for_investor(startup, make_investor(preferred_sectors=frozenset({"Climate"})))
    assert with_pref.overall_score >= without.overall_score


def test_backed_sector_counts_for_less_than_preferred():
    startup = make_startup(sector="FinTech")
    backed = make_investor(preferred_sectors=frozenset(), investment_history=history(1000, sector="FinTech"))
    assert scorer.sector_score(startup, backed) == 0.8
    assert scorer.sector_score(startup, make_investor(preferred_sectors=frozenset())) == 0.3


def test_missing_locations_are_neutral():
    startup = make_startup(location=None)
    investor = make_investor(location=Location())
    assert scorer.location_score(startup, investor) == 0.5
    assert scorer.geographic_score(investor, startup) == 0.5


def test_location_tiers():
    investor = make_investor(location=Location(city="Bangalore", country="India"))
    assert scorer.location_score(make_startup(location=Location("bangalore", "INDIA")), investor) == 1.0
    assert scorer.location_score(make_startup(location=Location("Pune", "India")), investor) == 0.8
    assert scorer.location_score(make_startup(location=Location("Berlin", "Germany")), investor) == 0.6
    assert scorer.location_score(make_startup(location=Location("Lagos", "Nigeria")), investor) == 0.4


def test_country_aliases_are_normalised():
    investor = make_investor(location=Location(city="Boston", country="US"))
    startup = make_startup(location=Location(city="Denver", country="United States"))
    assert scorer.location_score(startup, investor) == 0.8


@pytest.mark.parametrize("minimum,expected", [
    (20_000, 0.1),   # above capacity
    (1_000, 1.0),    # inside 5-20% band
    (100, 0.7),      # below band
    (5_000, 0.5),    # above band
])
def test_funding_fit(minimum, expected):
    startup = make_startup(funding=Funding(target_amount=100_000, minimum_investment=minimum))
    assert scorer.funding_score(startup, make_investor()) == expected


def test_performance_bonus_is_capped():
    startup = make_startup(metrics=Metrics(
        revenue_monthly=50_000, revenue_growth=40, users_total=5_000,
        users_growth=30, team_size=12, team_growth=3,
    ))
    assert scorer.performance_score(startup) == 1.0
    assert scorer.performance_score(make_startup(founder_experience=None)) == 0.5


def test_custom_weights_are_honoured():
    only_sector = MatchScorer(ScoringConfig(startup_weights=StartupMatchWeights(
        sector=1.0, stage=0, location=0, funding=0, performance=0, social=0,
    )))
    assert only_sector.score_startup_for_investor(make_startup(), make_investor()).overall_score == 100.0
    off = make_startup(sector="Gaming")
    assert only_sector.score_startup_for_investor(off, make_investor()).overall_score == 30.0


def test_default_config_tables_are_shared_and_swappable():
    default = ScoringConfig()
    assert default.stage_preferences is STAGE_PREFERENCES
    assert ScoringConfig().risk_matrix is default.risk_matrix
    assert "Europe" in default.timezone_regions

    cautious = ScoringConfig(stage_preferences={"aggressive": {"idea": 0.2}})
    assert MatchScorer(cautious).stage_score(make_startup(stage="idea"), make_investor()) == 0.2
    assert MatchScorer(cautious).stage_score(make_startup(stage="growth"), make_investor()) == 0.5
    assert MatchScorer(default).stage_score(make_startup(stage="idea"), make_investor()) == 1.0


# ---------------------------------------------------------------------------
# investor -> startup
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("capacity,expected", [
    (500, 0.0),
    (5_000, 0.5),
    (10_000, 1.0),
    (50_000, 1.0),
])
def test_capacity_score(capacity, expected):
    startup = make_startup(funding=Funding(target_amount=100_000, minimum_investment=1_000))
    assert scorer.capacity_score(make_investor(investment_capacity=capacity), startup) == expected


def test_more_capacity_never_lowers_score():
    startup = make_startup(funding=Funding(target_amount=100_000, minimum_investment=1_000))
    scores = [
        scorer.score_investor_for_startup(make_investor(investment_capacity=c), startup).overall_score
        for c in (0, 900, 1_000, 4_000, 9_999, 10_000, 1_000_000)
    ]
    assert scores == sorted(scores)


@pytest.mark.parametrize("minimum,expected", [
    (500, 1.0),     # ratio 0.5
    (3_000, 0.7),   # ratio 3
    (10_000, 0.4),  # ratio 10
])
def test_pattern_score(minimum, expected):
    investor = make_investor(investment_history=history(500, 1_500))
    startup = make_startup(funding=Funding(target_amount=100_000, minimum_investment=minimum))
    assert scorer.pattern_score(investor, startup) == expected


def test_pattern_without_history_is_neutral():
    assert scorer.pattern_score(make_investor(), make_startup()) == 0.5


def test_geographic_tiers():
    investor = make_investor(location=Location(city="Austin", country="USA"))
    assert scorer.geographic_score(investor, make_startup(location=Location("Austin", "United States"))) == 1.0
    assert scorer.geographic_score(investor, make_startup(location=Location("Boston", "United States"))) == 0.8
    assert scorer.geographic_score(investor, make_startup(location=Location("Toronto", "Canada"))) == 0.6
    assert scorer.geographic_score(investor, make_startup(location=Location("Delhi", "India"))) == 0.4


def test_unknown_stage_uses_neutral_risk():
    assert scorer.risk_score(make_investor(), make_startup(stage="stealth")) == 0.5
    assert scorer.stage_score(make_startup(stage="stealth"), make_investor()) == 0.5


def test_investor_direction_example():
    investor = make_investor(
        risk_tolerance="aggressive",
        investment_history=history(500, 700),
        total_invested=20_000,
        location=Location(city="Austin", country="United States"),
    )
    result = scorer.score_investor_for_startup(investor, make_startup())
    # sector 1, capacity 1, risk 1, pattern 1, geography 1
    assert result.overall_score == pytest.approx(100.0)
    assert result.reasons[0] == "Actively invests in AI"
    assert len(result.reasons) <= 3


# ---------------------------------------------------------------------------
# ranking
# ---------------------------------------------------------------------------

def test_rank_orders_by_score_and_limits():
    investor = make_investor()
    startups = [
        make_startup(id="a", sector="Gaming", stage="expansion"),
        make_startup(id="b"),
        make_startup(id="c", sector="Health"),
    ]
    ranked = scorer.rank_startups_for_investor(startups, investor, limit=2)
    assert [r.candidate_id for r in ranked] == ["b", "c"]
    assert ranked[0].overall_score >= ranked[1].overall_score

    everything = scorer.rank_startups_for_investor(startups, investor, limit=None)
    assert len(everything) == 3
    assert scorer.rank_startups_for_investor(startups, investor, limit=0) == []


def test_ties_are_broken_by_id():
    investor = make_investor()
    ranked = scorer.rank_startups_for_investor(
        [make_startup(id="zeta"), make_startup(id="alpha"), make_startup(id="mid")], investor,
    )
    assert [r.candidate_id for r in ranked] == ["alpha", "mid", "zeta"]


def test_rank_investors_for_startup():
    startup = make_startup()
    investors = [
        make_investor(id="small", investment_capacity=600),
        make_investor(id="big", investment_capacity=100_000),
        make_investor(id="broke", investment_capacity=0),
    ]
    ranked = scorer.rank_investors_for_startup(investors, startup)
    assert [r.candidate_id for r in ranked] == ["big", "small", "broke"]


def test_empty_candidates_give_empty_ranking():
    assert scorer.rank_startups_for_investor([], make_investor()) == []
    assert scorer.rank_investors_for_startup([], make_startup()) == []


def test_missing_entities_raise_invalid_input():
    with pytest.raises(InvalidInputError):
        scorer.score_startup_for_investor(None, make_investor())
    with pytest.raises(InvalidInputError):
        scorer.score_investor_for_startup(make_investor(), None)
    with pytest.raises(ValueError):
        scorer.rank_startups_for_investor([make_startup()], None)
    with pytest.raises(ScoringError):
        scorer.rank_investors_for_startup([make_investor()], None)


def test_result_as_dict():
    data = scorer.score_startup_for_investor(make_startup(), make_investor()).as_dict()
    assert data["candidate_id"] == "st-1"
    assert isinstance(data["factor_scores"], dict)
    assert isinstance(data["reasons"], list)
