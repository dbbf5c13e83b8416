from app.models.audit_log import AuditLog
from app.models.deal import Deal
from app.models.goals_history import GoalsHistory
from app.models.points_history import PointsHistory


DEAL_PAYLOAD = {
    "product_type": "software",
    "product_name": "Endpoint Suite",
    "deal_value": 2500,
    "deal_type": "new_customer",
    "quantity": 1,
    "close_date": "2026-09-30T00:00:00",
}


def test_create_deal_starts_pending_and_attaches_region_config(client, auth, make_user, make_region_config):
    config = make_region_config("NOLA", "ENTERPRISE")
    user = make_user(region="NOLA", region_category="ENTERPRISE")

    resp = client.post("/api/deals", json=DEAL_PAYLOAD, headers=auth(user))
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "pending"
    assert body["region_config_id"] == str(config.id)
    assert body["points_earned"] == 0
    assert body["goals_earned"] == 0


def test_explicit_region_config_must_match_caller_region(client, auth, make_user, make_region_config):
    nola = make_region_config("NOLA", "ENTERPRISE", new_customer_goal_rate=1)
    sola = make_region_config("SOLA", "ENTERPRISE")
    user = make_user(region="SOLA", region_category="ENTERPRISE")

    resp = client.post("/api/deals", json={**DEAL_PAYLOAD, "region_config_id": str(nola.id)}, headers=auth(user))
    assert resp.status_code == 403
    assert resp.json() == {"message": "Region config belongs to another region"}

    resp = client.post("/api/deals", json={**DEAL_PAYLOAD, "region_config_id": str(sola.id)}, headers=auth(user))
    assert resp.status_code == 200
    assert resp.json()["region_config_id"] == str(sola.id)


def test_admin_cannot_move_deal_to_another_region_config(client, auth, make_user, make_region_config, make_deal):
    nola = make_region_config("NOLA", "ENTERPRISE")
    admin = make_user(role="super-admin", region=None)
    deal = make_deal(make_user(region="SOLA"))
    url = f"/api/admin/deals/{deal.id}"

    assert client.patch(url, json={"region_config_id": str(nola.id)}, headers=auth(admin)).status_code == 403
    resp = client.patch(url, json={"deal_value": None}, headers=auth(admin))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid data"


def test_duplicate_license_number_is_a_conflict(client, auth, make_user):
    user = make_user()
    payload = {**DEAL_PAYLOAD, "license_agreement_number": "LA-0001"}

    assert client.post("/api/deals", json=payload, headers=auth(user)).status_code == 200
    resp = client.post("/api/deals", json=payload, headers=auth(user))
    assert resp.status_code == 409
    assert resp.json()["code"] == "DUPLICATE_LICENSE_NUMBER"


def test_invalid_deal_payload_returns_400_message(client, auth, make_user):
    user = make_user()
    resp = client.post("/api/deals", json={**DEAL_PAYLOAD, "deal_value": -5}, headers=auth(user))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid data"


def test_missing_caller_is_unauthorized(client):
    resp = client.get("/api/deals")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authenticated"}


def test_approval_converts_value_with_region_config_rate(
    client, auth, session_factory, make_user, make_region_config, make_deal
):
    make_region_config("NOLA", "ENTERPRISE", None, new_customer_goal_rate=1000)
    owner = make_user(region="NOLA", region_category="ENTERPRISE")
    admin = make_user(role="super-admin", region=None)
    deal = make_deal(owner, deal_value=2500)

    resp = client.post(f"/api/deals/{deal.id}/approve", headers=auth(admin))
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "approved"
    assert body["goals_earned"] == 2.5
    assert body["points_earned"] == 2
    assert body["approved_by"] == str(admin.id)
    assert body["approved_at"] is not None

    with session_factory() as db:
        ledger = db.query(PointsHistory).filter(PointsHistory.user_id == owner.id).all()
        goals = db.query(GoalsHistory).filter(GoalsHistory.user_id == owner.id).all()
    assert [row.points for row in ledger] == [2]
    assert len(goals) == 1
    assert float(goals[0].goals) == 2.5


def test_approval_without_region_config_uses_default_rate(client, auth, make_user, make_deal):
    owner = make_user(region="SOLA", region_category="SMB")
    admin = make_user(role="admin", region=None)
    deal = make_deal(owner, deal_value=4000, deal_type="renewal")

    body = client.post(f"/api/admin/deals/{deal.id}/approve", headers=auth(admin)).json()
    assert body["goals_earned"] == 2.0
    assert body["points_earned"] == 2


def test_renewal_rate_comes_from_deal_region_config(client, auth, make_user, make_region_config, make_deal):
    config = make_region_config("MEXICO", "SMB", "PLATINUM", renewal_goal_rate=500)
    owner = make_user(region="MEXICO", region_category="SMB", region_subcategory="GOLD (2)")
    admin = make_user(role="super-admin", region=None)
    deal = make_deal(owner, deal_value=4000, deal_type="renewal", region_config_id=config.id)

    body = client.post(f"/api/deals/{deal.id}/approve", headers=auth(admin)).json()
    assert body["goals_earned"] == 8.0


def test_expired_region_config_falls_back_to_default(client, auth, make_user, make_region_config, make_deal):
    from datetime import datetime

    make_region_config("NOLA", "ENTERPRISE", None, new_customer_goal_rate=250, expiration_date=datetime(2020, 1, 1))
    owner = make_user(region="NOLA", region_category="ENTERPRISE")
    admin = make_user(role="super-admin", region=None)
    deal = make_deal(owner, deal_value=3000)

    body = client.post(f"/api/deals/{deal.id}/approve", headers=auth(admin)).json()
    assert body["goals_earned"] == 3.0


def test_points_rate_follows_region_points_config(client, auth, make_user, make_deal):
    super_admin = make_user(role="super-admin", region=None)
    owner = make_user(region="NOLA")
    resp = client.patch(
        "/api/admin/points-config?region=NOLA",
        json={"new_customer_rate": 500},
        headers=auth(super_admin),
    )
    assert resp.status_code == 200

    deal = make_deal(owner, deal_value=2750)
    body = client.post(f"/api/deals/{deal.id}/approve", headers=auth(super_admin)).json()
    assert body["points_earned"] == 5


def test_status_only_moves_out_of_pending(client, auth, make_user, make_deal):
    owner = make_user()
    admin = make_user(role="admin", region=None)
    approved = make_deal(owner)
    rejected = make_deal(owner)

    assert client.post(f"/api/deals/{approved.id}/approve", headers=auth(admin)).status_code == 200
    resp = client.post(f"/api/deals/{approved.id}/reject", headers=auth(admin))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Deal is not pending"

    assert client.post(f"/api/deals/{rejected.id}/reject", headers=auth(admin)).json()["status"] == "rejected"
    assert client.post(f"/api/deals/{rejected.id}/approve", headers=auth(admin)).status_code == 400
    assert client.post(f"/api/deals/{rejected.id}/reject", headers=auth(admin)).status_code == 400


def test_rejection_does_not_convert(client, auth, session_factory, make_user, make_deal):
    owner = make_user()
    admin = make_user(role="admin", region=None)
    deal = make_deal(owner)

    body = client.post(f"/api/deals/{deal.id}/reject", headers=auth(admin)).json()
    assert body["points_earned"] == 0
    assert body["goals_earned"] == 0
    with session_factory() as db:
        assert db.query(PointsHistory).count() == 0


def test_plain_user_cannot_approve(client, auth, make_user, make_deal):
    owner = make_user()
    deal = make_deal(owner)
    resp = client.post(f"/api/deals/{deal.id}/approve", headers=auth(owner))
    assert resp.status_code == 403


def test_editing_approved_deal_does_not_recompute(client, auth, make_user, make_region_config, make_deal):
    # known gap: conversion only happens at approval time
    make_region_config("NOLA", "ENTERPRISE")
    owner = make_user(region="NOLA", region_category="ENTERPRISE")
    admin = make_user(role="super-admin", region=None)
    deal = make_deal(owner, deal_value=2500)
    client.post(f"/api/deals/{deal.id}/approve", headers=auth(admin))

    resp = client.patch(f"/api/admin/deals/{deal.id}", json={"deal_value": 10000}, headers=auth(admin))
    assert resp.status_code == 200
    body = resp.json()
    assert body["deal_value"] == 10000
    assert body["goals_earned"] == 2.5
    assert body["points_earned"] == 2


def test_regional_admin_only_sees_own_region(client, auth, make_user, make_region_config, make_deal):
    sola_config = make_region_config("SOLA", "ENTERPRISE")
    regional = make_user(role="regional-admin", region=None, admin_region_id=sola_config.id)
    nola_user = make_user(region="NOLA")
    sola_user = make_user(region="SOLA")
    make_deal(nola_user)
    sola_deal = make_deal(sola_user)

    resp = client.get("/api/admin/deals?region=NOLA", headers=auth(regional))
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert [d["id"] for d in body["deals"]] == [str(sola_deal.id)]
    assert body["deals"][0]["user_region"] == "SOLA"

    pending = client.get("/api/admin/deals/pending", headers=auth(regional)).json()
    assert [d["id"] for d in pending] == [str(sola_deal.id)]


def test_regional_admin_cannot_approve_other_region(client, auth, make_user, make_region_config, make_deal):
    sola_config = make_region_config("SOLA", "ENTERPRISE")
    regional = make_user(role="regional-admin", region=None, admin_region_id=sola_config.id)
    deal = make_deal(make_user(region="NOLA"))

    assert client.post(f"/api/deals/{deal.id}/approve", headers=auth(regional)).status_code == 403


def test_super_admin_can_filter_by_region(client, auth, make_user, make_deal):
    admin = make_user(role="super-admin", region=None)
    make_deal(make_user(region="NOLA"))
    make_deal(make_user(region="SOLA"))

    assert client.get("/api/admin/deals", headers=auth(admin)).json()["total"] == 2
    assert client.get("/api/admin/deals?region=SOLA", headers=auth(admin)).json()["total"] == 1
    assert client.get("/api/admin/deals?region=all", headers=auth(admin)).json()["total"] == 2


def test_delete_deal_writes_audit_entry(client, auth, session_factory, make_user, make_deal):
    admin = make_user(role="admin", region=None)
    owner = make_user()
    deal = make_deal(owner)
    client.post(f"/api/deals/{deal.id}/approve", headers=auth(admin))

    resp = client.delete(f"/api/admin/deals/{deal.id}", headers={**auth(admin), "User-Agent": "pytest"})
    assert resp.status_code == 200

    with session_factory() as db:
        assert db.query(Deal).count() == 0
        assert db.query(PointsHistory).count() == 0
        entry = db.query(AuditLog).one()
    assert entry.action == "delete"
    assert entry.entity_id == deal.id
    assert entry.entity_data["product_name"] == "Endpoint Suite"
    assert entry.performed_by_username == admin.username
    assert entry.user_agent == "pytest"

    logs = client.get("/api/admin/audit-logs?entity_type=deal", headers=auth(admin)).json()
    assert len(logs) == 1


def test_recalculate_points_uses_current_rates(client, auth, session_factory, make_user, make_deal):
    admin = make_user(role="super-admin", region=None)
    owner = make_user(region="NOLA")
    deal = make_deal(owner, deal_value=2500)
    client.post(f"/api/deals/{deal.id}/approve", headers=auth(admin))
    client.patch("/api/admin/points-config?region=NOLA", json={"new_customer_rate": 500}, headers=auth(admin))

    resp = client.post("/api/admin/recalculate-points", headers=auth(admin))
    assert resp.json() == {"updated": 1, "errors": 0}

    with session_factory() as db:
        assert db.query(Deal).one().points_earned == 5
        assert [r.points for r in db.query(PointsHistory).all()] == [5]


def test_own_deal_listing(client, auth, make_user, make_deal):
    owner = make_user()
    other = make_user()
    make_deal(owner)
    make_deal(other)

    assert len(client.get("/api/deals", headers=auth(owner)).json()) == 1
    assert len(client.get("/api/deals/recent?limit=5", headers=auth(owner)).json()) == 1
