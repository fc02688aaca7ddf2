from conftest import make_startup
from scoring.profiles import Engagement, Funding
from scoring.trending import sector_breakdown, trending_sectors


def _startup(sid, sector, raised, views=0):
    return make_startup(
        id=sid,
        sector=sector,
        funding=Funding(target_amount=100_000, current_amount=raised),
        engagement=Engagement(views=views),
    )


STARTUPS = [
    _startup("a", "AI", 30_000, views=100),
    _startup("b", "AI", 10_000, views=300),
    _startup("c", "Health", 25_000, views=50),
    _startup("d", "Climate", 25_000, views=500),
    _startup("e", "Gaming", 0),
]


def test_trending_orders_by_funding_then_engagement():
    trends = trending_sectors(STARTUPS)
    assert [t.sector for t in trends] == ["AI", "Climate", "Health", "Gaming"]

    ai = trends[0]
    assert ai.total_funding == 40_000
    assert ai.startup_count == 2
    assert ai.avg_engagement == 200


def test_trending_respects_limit():
    assert [t.sector for t in trending_sectors(STARTUPS, limit=2)] == ["AI", "Climate"]
    assert trending_sectors(STARTUPS, limit=0) == []


def test_trending_of_nothing_is_empty():
    assert trending_sectors([]) == []
    assert trending_sectors([None]) == []


def test_sector_breakdown():
    rows = {r.sector: r for r in sector_breakdown(STARTUPS)}
    assert rows["AI"].total_invested == 40_000
    assert rows["AI"].avg_funding == 20_000
    assert rows["Gaming"].total_startups == 1
    assert rows["Gaming"].avg_funding == 0
    assert rows["Health"].as_dict() == {
        "sector": "Health",
        "total_invested": 25_000,
        "total_startups": 1,
        "avg_funding": 25_000,
    }
