async def test_public_profile_hides_private_fields(client, create_user):
    user, _ = await create_user(first_name="Linus", bio="Angel in dev tools")

    resp = await client.get(f"/users/{user.id}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["first_name"] == "Linus"
    assert data["bio"] == "Angel in dev tools"
    for private in ("email", "password_hash", "phone_number", "investment_capacity"):
        assert private not in data


async def test_unknown_or_inactive_user_is_404(client, create_user):
    suspended, _ = await create_user(status="suspended")
    assert (await client.get("/users/nobody")).status_code == 404
    assert (await client.get(f"/users/{suspended.id}")).status_code == 404


async def test_investor_leaderboard(client, create_user):
    small, _ = await create_user(user_type="investor", total_invested=1_000)
    big, _ = await create_user(user_type="both", total_invested=9_000)
    await create_user(user_type="entrepreneur", total_invested=50_000)
    await create_user(user_type="investor", total_invested=99_000, status="suspended")

    resp = await client.get("/users/leaderboard/investors")
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [big.id, small.id]

    top = (await client.get("/users/leaderboard/investors", params={"limit": 1})).json()
    assert [u["id"] for u in top] == [big.id]


async def test_health(client):
    resp = await client.get("/health")
    assert resp.json() == {"status": "ok", "service": "startuplink"}
