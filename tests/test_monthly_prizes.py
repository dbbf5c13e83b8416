from app.models.goals_history import GoalsHistory


def _prize(client, auth, admin, config, **fields):
    payload = {"region_config_id": str(config.id), "month": 9, "year": 2026, "rank": 1, "prize_name": "Trip", **fields}
    return client.post("/api/admin/monthly-prizes", json=payload, headers=auth(admin))


def _goals(session_factory, user, config, goals, month=9, year=2026):
    with session_factory() as db:
        db.add(
            GoalsHistory(
                user_id=user.id,
                region_config_id=config.id,
                goals=goals,
                month=month,
                year=year,
                description="test goals",
            )
        )
        db.commit()


def test_one_prize_per_rank_and_period(client, auth, make_user, make_region_config):
    admin = make_user(role="admin", region=None)
    config = make_region_config("NOLA", "ENTERPRISE")

    assert _prize(client, auth, admin, config).status_code == 200
    resp = _prize(client, auth, admin, config, prize_name="Other trip")
    assert resp.status_code == 409
    assert _prize(client, auth, admin, config, rank=2).status_code == 200
    assert _prize(client, auth, admin, config, month=10).status_code == 200


def test_patch_into_taken_slot_is_a_conflict(client, auth, make_user, make_region_config):
    admin = make_user(role="admin", region=None)
    config = make_region_config("NOLA", "ENTERPRISE")
    _prize(client, auth, admin, config)
    second = _prize(client, auth, admin, config, rank=2).json()

    resp = client.patch(f"/api/admin/monthly-prizes/{second['id']}", json={"rank": 1}, headers=auth(admin))
    assert resp.status_code == 409
    resp = client.patch(f"/api/admin/monthly-prizes/{second['id']}", json={"prize_value": 300}, headers=auth(admin))
    assert resp.json()["prize_value"] == 300


def test_list_filters_by_period_and_region(client, auth, make_user, make_region_config):
    admin = make_user(role="admin", region=None)
    nola = make_region_config("NOLA", "ENTERPRISE")
    sola = make_region_config("SOLA", "ENTERPRISE")
    _prize(client, auth, admin, nola)
    _prize(client, auth, admin, nola, month=10)
    _prize(client, auth, admin, sola)

    assert len(client.get("/api/admin/monthly-prizes", headers=auth(admin)).json()) == 3
    assert len(client.get("/api/admin/monthly-prizes?month=9&year=2026", headers=auth(admin)).json()) == 2
    assert len(client.get("/api/admin/monthly-prizes?region=SOLA", headers=auth(admin)).json()) == 1


def test_regional_admin_manages_own_region_prizes(client, auth, make_user, make_region_config):
    nola = make_region_config("NOLA", "ENTERPRISE")
    sola = make_region_config("SOLA", "ENTERPRISE")
    regional = make_user(role="regional-admin", region=None, admin_region_id=sola.id)

    assert _prize(client, auth, regional, nola).status_code == 403
    assert _prize(client, auth, regional, sola).status_code == 200


def test_standings_use_top_prize_goal_target(client, auth, session_factory, make_user, make_region_config):
    admin = make_user(role="admin", region=None)
    config = make_region_config("NOLA", "ENTERPRISE", monthly_goal_target=10)
    leader = make_user(username="alice")
    runner_up = make_user(username="bob")
    _goals(session_factory, leader, config, 4)
    _goals(session_factory, leader, config, 2.5)
    _goals(session_factory, runner_up, config, 5)
    _goals(session_factory, runner_up, config, 50, month=8)
    _prize(client, auth, admin, config, goal_target=6)

    standings = client.get(
        f"/api/admin/monthly-prizes/standings?region_config_id={config.id}&month=9&year=2026",
        headers=auth(admin),
    ).json()
    assert [(s["username"], s["goals"], s["qualified"]) for s in standings] == [
        ("alice", 6.5, True),
        ("bob", 5.0, False),
    ]


def test_standings_fall_back_to_config_target(client, auth, session_factory, make_user, make_region_config):
    admin = make_user(role="admin", region=None)
    config = make_region_config("NOLA", "ENTERPRISE", monthly_goal_target=3)
    user = make_user()
    _goals(session_factory, user, config, 3)

    standings = client.get(
        f"/api/admin/monthly-prizes/standings?region_config_id={config.id}&month=9&year=2026",
        headers=auth(admin),
    ).json()
    assert standings[0]["qualified"] is True

    resp = client.get(
        f"/api/admin/monthly-prizes/standings?region_config_id={config.id}&month=13&year=2026",
        headers=auth(admin),
    )
    assert resp.status_code == 400


def test_delete_prize(client, auth, make_user, make_region_config):
    admin = make_user(role="admin", region=None)
    prize = _prize(client, auth, admin, make_region_config()).json()

    assert client.delete(f"/api/admin/monthly-prizes/{prize['id']}", headers=auth(admin)).json() == {"deleted": True}
    assert client.get("/api/admin/monthly-prizes", headers=auth(admin)).json() == []
