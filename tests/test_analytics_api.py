from backend.app import app
from backend.routes.analytics import INSIGHTS_FAILED
from backend.routes.recommendations import get_scorer
from scoring import MatchScorer


class BrokenScorer(MatchScorer):
    def rank_investors_for_startup(self, *args, **kwargs):
        raise RuntimeError("weights table missing")


def insight_request(target_id, target_type="startup", analysis_type="investor_analysis"):
    return {"target_id": target_id, "target_type": target_type, "analysis_type": analysis_type}


async def test_investor_analysis_for_a_startup(client, create_user, create_startup):
    founder, founder_headers = await create_user(user_type="entrepreneur")
    startup = await create_startup(founder.id, sector="AI")
    await create_user(user_type="investor", preferred_sectors=["AI"], first_name="Keen")
    await create_user(user_type="investor", preferred_sectors=["Gaming"], first_name="Other")
    await create_user(user_type="investor", kyc_status="pending", first_name="Unverified")

    resp = await client.post("/analytics/ai-insights", headers=founder_headers, json=insight_request(startup.id))
    assert resp.status_code == 200
    data = resp.json()
    assert data["type"] == "investor_analysis"
    assert data["startup"]["id"] == startup.id
    assert data["investor"] is None
    assert data["startups"] == []

    matches = data["investors"]
    assert [m["investor"]["first_name"] for m in matches] == ["Keen", "Other"]
    assert matches[0]["compatibility_score"] >= matches[1]["compatibility_score"]
    assert matches[0]["reasoning"]
    assert data["summary"]["overview"].startswith("Found 2 potential investors")
    assert data["summary"]["key_findings"][0] == "Top investors focus on AI, Gaming"
    assert data["analysis_timestamp"]


async def test_startup_analysis_for_an_investor(client, create_user, create_startup):
    founder, _ = await create_user(user_type="entrepreneur")
    investor, headers = await create_user(user_type="investor", preferred_sectors=["AI"])
    ai = await create_startup(founder.id, name="Cortex", sector="AI")
    gaming = await create_startup(founder.id, name="Pixel", sector="Gaming", current_amount=20_000, team_size=5)
    await create_startup(founder.id, name="Closed", current_amount=50_000)
    await create_startup(founder.id, name="Hidden", status="draft")

    resp = await client.post("/analytics/ai-insights", headers=headers, json=insight_request(
        investor.id, "investor", "startup_analysis",
    ))
    assert resp.status_code == 200
    data = resp.json()
    assert data["type"] == "startup_analysis"
    assert data["investor"]["id"] == investor.id
    assert data["investors"] == []

    matches = data["startups"]
    assert [m["startup"]["id"] for m in matches] == [ai.id, gaming.id]
    top, other = matches
    assert top["risk_assessment"] == {"level": "high", "factors": ["Low initial traction", "Small team size"]}
    assert top["potential_returns"]["estimated_multiplier"] == "9x"
    assert top["general_score"] > 0
    assert other["risk_assessment"] == {"level": "low", "factors": []}
    assert other["potential_returns"]["estimated_multiplier"] == "6x"
    assert data["summary"]["key_findings"][2] == "Average funding progress: 20%"


async def test_insights_candidates_and_non_investors(client, create_user, create_startup):
    founder, headers = await create_user(user_type="entrepreneur")
    startup = await create_startup(founder.id)

    empty = (await client.post("/analytics/ai-insights", headers=headers, json=insight_request(startup.id))).json()
    assert empty["investors"] == []
    assert empty["summary"] == {"overview": "No matching investors found yet", "key_findings": [], "recommendations": []}

    await create_user(user_type="investor")
    data = (await client.post("/analytics/ai-insights", headers=headers, json=insight_request(startup.id))).json()
    assert data["summary"]["overview"].startswith("Found 1 potential investors")

    await create_startup(founder.id, name="Another", current_amount=50_000)
    resp = await client.post("/analytics/ai-insights", headers=headers, json=insight_request(
        founder.id, "investor", "startup_analysis",
    ))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Investor not found"

    both, _ = await create_user(user_type="both")
    open_rounds = await client.post("/analytics/ai-insights", headers=headers, json=insight_request(
        both.id, "investor", "startup_analysis",
    ))
    assert [m["startup"]["name"] for m in open_rounds.json()["startups"]] == ["NeuroLeaf"]


async def test_ai_insights_missing_targets(client, create_user, create_startup):
    founder, founder_headers = await create_user(user_type="entrepreneur")
    _, investor_headers = await create_user(user_type="investor")
    draft = await create_startup(founder.id, status="draft", moderation_status="pending")

    missing = await client.post("/analytics/ai-insights", headers=investor_headers, json=insight_request("nope"))
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Startup not found"

    hidden = await client.post("/analytics/ai-insights", headers=investor_headers, json=insight_request(draft.id))
    assert hidden.status_code == 404
    own = await client.post("/analytics/ai-insights", headers=founder_headers, json=insight_request(draft.id))
    assert own.status_code == 200

    nobody = await client.post("/analytics/ai-insights", headers=investor_headers, json=insight_request(
        "nope", "investor", "startup_analysis",
    ))
    assert nobody.status_code == 404


async def test_ai_insights_rejects_bad_requests(client, create_user, create_startup):
    founder, headers = await create_user(user_type="entrepreneur")
    startup = await create_startup(founder.id)

    mismatched = await client.post("/analytics/ai-insights", headers=headers, json=insight_request(
        startup.id, "startup", "startup_analysis",
    ))
    assert mismatched.status_code == 400

    unknown = await client.post("/analytics/ai-insights", headers=headers, json=insight_request(
        startup.id, "market", "investor_analysis",
    ))
    assert unknown.status_code == 422

    incomplete = await client.post("/analytics/ai-insights", headers=headers, json={"target_id": startup.id})
    assert incomplete.status_code == 422

    assert (await client.post("/analytics/ai-insights", json=insight_request(startup.id))).status_code == 401


async def test_ai_insights_scoring_failure(client, create_user, create_startup):
    founder, headers = await create_user(user_type="entrepreneur")
    startup = await create_startup(founder.id)
    app.dependency_overrides[get_scorer] = lambda: BrokenScorer()

    resp = await client.post("/analytics/ai-insights", headers=headers, json=insight_request(startup.id))
    assert resp.status_code == 500
    assert resp.json()["detail"] == INSIGHTS_FAILED
