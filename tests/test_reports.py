from datetime import datetime


def _approved(make_deal, user, value, points, approved_at=datetime(2026, 6, 1)):
    return make_deal(user, deal_value=value, status="approved", points_earned=points, approved_at=approved_at)


def test_summary_counts_by_status(client, auth, make_user, make_deal, make_reward, grant_points):
    admin = make_user(role="admin", region=None)
    nola = make_user(region="NOLA")
    sola = make_user(region="SOLA")
    _approved(make_deal, nola, 2000, 2)
    make_deal(nola)
    make_deal(sola, status="rejected")
    grant_points(nola, 30)
    grant_points(nola, -10)

    everything = client.get("/api/admin/reports", headers=auth(admin)).json()
    assert everything["region"] == "all"
    assert everything["total_users"] == 2
    assert everything["total_deals"] == 3
    assert everything["deals_by_status"] == {"approved": 1, "pending": 1, "rejected": 1}
    assert everything["points_awarded"] == 30

    nola_only = client.get("/api/admin/reports?region=NOLA", headers=auth(admin)).json()
    assert nola_only["total_deals"] == 2
    assert nola_only["total_users"] == 1


def test_user_ranking_and_deals_per_user(client, auth, make_user, make_deal):
    admin = make_user(role="admin", region=None)
    top = make_user()
    second = make_user()
    _approved(make_deal, top, 3000, 3)
    _approved(make_deal, top, 1000, 1)
    _approved(make_deal, second, 2000, 2)
    make_deal(second, deal_value=90000)

    ranking = client.get("/api/admin/reports/user-ranking", headers=auth(admin)).json()
    assert [(r["user_id"], r["rank"], r["total_points"]) for r in ranking] == [
        (str(top.id), 1, 4),
        (str(second.id), 2, 2),
    ]

    per_user = client.get("/api/admin/reports/deals-per-user", headers=auth(admin)).json()
    assert per_user[0]["user_id"] == str(top.id)
    assert per_user[0]["total_deals"] == 2
    assert per_user[0]["total_sales"] == 4000.0
    assert per_user[0]["average_deal_size"] == 2000.0


def test_user_ranking_respects_window(client, auth, make_user, make_deal):
    admin = make_user(role="admin", region=None)
    user = make_user()
    _approved(make_deal, user, 1000, 1, approved_at=datetime(2025, 3, 1))

    resp = client.get(
        "/api/admin/reports/user-ranking?start_date=2026-01-01T00:00:00&end_date=2026-12-31T00:00:00",
        headers=auth(admin),
    )
    assert resp.json() == []


def test_reward_redemptions_report(client, auth, make_user, make_reward, grant_points):
    admin = make_user(role="admin", region=None)
    user = make_user()
    reward = make_reward(points_cost=100, name="Mug")
    grant_points(user, 500)
    client.post(f"/api/rewards/{reward.id}/redeem", headers=auth(user))

    rows = client.get("/api/admin/reports/reward-redemptions", headers=auth(admin)).json()
    assert len(rows) == 1
    assert rows[0]["reward_name"] == "Mug"
    assert rows[0]["status"] == "pending"
    assert rows[0]["email"] == user.email


def test_regional_admin_reports_are_pinned(client, auth, make_user, make_region_config, make_deal):
    sola = make_region_config("SOLA", "ENTERPRISE")
    regional = make_user(role="regional-admin", region=None, admin_region_id=sola.id)
    make_deal(make_user(region="NOLA"))
    make_deal(make_user(region="SOLA"))

    summary = client.get("/api/admin/reports?region=NOLA", headers=auth(regional)).json()
    assert summary["region"] == "SOLA"
    assert summary["total_deals"] == 1

    stats = client.get("/api/admin/region-stats", headers=auth(regional)).json()
    assert [s["region"] for s in stats] == ["SOLA"]
    assert stats[0]["configs"] == 1


def test_top_scorers(client, auth, make_user, grant_points):
    admin = make_user(role="admin", region=None)
    users = [make_user() for _ in range(3)]
    for points, user in zip((5, 50, 20), users):
        grant_points(user, points)

    top = client.get("/api/admin/top-scorers?limit=2", headers=auth(admin)).json()
    assert [t["points"] for t in top] == [50, 20]


def test_region_stats_for_all_regions(client, auth, make_user, make_region_config):
    admin = make_user(role="super-admin", region=None)
    make_region_config("BRASIL", "SMB", monthly_goal_target=12)
    make_user(region="BRASIL")

    stats = {s["region"]: s for s in client.get("/api/admin/region-stats", headers=auth(admin)).json()}
    assert set(stats) == {"NOLA", "SOLA", "BRASIL", "MEXICO"}
    assert stats["BRASIL"]["users"] == 1
    assert stats["BRASIL"]["monthly_goal_target"] == 12


def test_notifications_read_flow(client, auth, make_user, make_deal):
    owner = make_user()
    admin = make_user(role="admin", region=None)
    first = make_deal(owner)
    second = make_deal(owner)
    client.post(f"/api/deals/{first.id}/approve", headers=auth(admin))
    client.post(f"/api/deals/{second.id}/reject", headers=auth(admin))

    notifications = client.get("/api/notifications", headers=auth(owner)).json()
    assert len(notifications) == 2

    target = notifications[0]["id"]
    assert client.patch(f"/api/notifications/{target}/read", headers=auth(admin)).status_code == 403
    assert client.patch(f"/api/notifications/{target}/read", headers=auth(owner)).json()["is_read"] is True
    assert len(client.get("/api/notifications?unread=true", headers=auth(owner)).json()) == 1

    assert client.patch("/api/notifications/read-all", headers=auth(owner)).json() == {"updated": 1}


def test_ui_options(client, auth, make_user, make_region_config, make_reward):
    admin = make_user(role="admin", region=None)
    make_region_config("NOLA", "ENTERPRISE")
    make_region_config("SOLA", "SMB", is_active=False)
    make_reward(points_cost=100, name="Mug")
    make_reward(points_cost=200, name="Hidden", is_active=False)

    regions = client.get("/api/admin/ui-options/regions", headers=auth(admin)).json()
    assert regions["regions"] == ["NOLA", "SOLA", "BRASIL", "MEXICO"]
    assert "PLATINUM" in regions["mexicoLevels"]["SMB"]

    configs = client.get("/api/admin/ui-options/region-configs", headers=auth(admin)).json()["items"]
    assert [c["region"] for c in configs] == ["NOLA"]

    rewards = client.get("/api/admin/ui-options/rewards", headers=auth(admin)).json()["items"]
    assert [r["name"] for r in rewards] == ["Mug"]
