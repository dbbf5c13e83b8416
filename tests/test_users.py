from app.models.deal import Deal
from app.models.grand_prize_winner import GrandPrizeWinner
from app.models.grand_prize_criteria import GrandPrizeCriteria
from app.models.user import User


def _new_user(**overrides):
    payload = {
        "username": "jdoe",
        "email": "jdoe@acme.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "country": "COLOMBIA",
        "region": "NOLA",
        "region_category": "ENTERPRISE",
    }
    payload.update(overrides)
    return payload


def test_same_email_may_register_in_different_regions(client, auth, make_user):
    admin = make_user(role="super-admin", region=None)

    assert client.post("/api/admin/users", json=_new_user(), headers=auth(admin)).status_code == 200
    resp = client.post(
        "/api/admin/users",
        json=_new_user(username="jdoe-sola", region="SOLA"),
        headers=auth(admin),
    )
    assert resp.status_code == 200

    resp = client.post("/api/admin/users", json=_new_user(username="jdoe-2"), headers=auth(admin))
    assert resp.status_code == 409
    assert resp.json()["message"] == "Email already registered in this region"

    resp = client.post(
        "/api/admin/users",
        json=_new_user(email="other@acme.com", region="BRASIL"),
        headers=auth(admin),
    )
    assert resp.json()["message"] == "Username already exists"


def test_admin_cannot_grant_elevated_roles(client, auth, make_user, make_region_config):
    admin = make_user(role="admin", region=None)
    target = make_user()
    config = make_region_config("NOLA", "ENTERPRISE")

    resp = client.patch(
        f"/api/admin/users/{target.id}/role",
        json={"role": "regional-admin", "admin_region_id": str(config.id)},
        headers=auth(admin),
    )
    assert resp.status_code == 403

    resp = client.post("/api/admin/users", json=_new_user(role="super-admin"), headers=auth(admin))
    assert resp.status_code == 403

    assert (
        client.patch(f"/api/admin/users/{target.id}/role", json={"role": "admin"}, headers=auth(admin)).json()["role"]
        == "admin"
    )


def test_regional_admin_role_needs_region_config(client, auth, make_user, make_region_config):
    super_admin = make_user(role="super-admin", region=None)
    target = make_user()
    url = f"/api/admin/users/{target.id}/role"

    assert client.patch(url, json={"role": "regional-admin"}, headers=auth(super_admin)).status_code == 400

    config = make_region_config("SOLA", "ENTERPRISE")
    body = client.patch(
        url, json={"role": "regional-admin", "admin_region_id": str(config.id)}, headers=auth(super_admin)
    ).json()
    assert body["role"] == "regional-admin"
    assert body["admin_region_id"] == str(config.id)

    body = client.patch(url, json={"role": "user"}, headers=auth(super_admin)).json()
    assert body["admin_region_id"] is None


def test_approval_flow(client, auth, make_user):
    admin = make_user(role="admin", region=None)
    pending = make_user(is_approved=False)

    listed = client.get("/api/admin/users/pending", headers=auth(admin)).json()
    assert [u["id"] for u in listed] == [str(pending.id)]

    approved = client.put(f"/api/admin/users/{pending.id}/approve", headers=auth(admin)).json()
    assert approved["is_approved"] is True
    assert approved["approved_by"] == str(admin.id)
    assert client.get("/api/admin/users/pending", headers=auth(admin)).json() == []


def test_rejected_users_lose_access(client, auth, make_user):
    admin = make_user(role="admin", region=None)
    target = make_user(is_approved=False)

    client.put(f"/api/admin/users/{target.id}/reject", headers=auth(admin))

    rejected = client.get("/api/admin/users/rejected", headers=auth(admin)).json()
    assert [u["id"] for u in rejected] == [str(target.id)]
    assert client.get("/api/users/stats", headers=auth(target)).status_code == 401


def test_regional_admin_user_scope(client, auth, make_user, make_region_config):
    sola = make_region_config("SOLA", "ENTERPRISE")
    regional = make_user(role="regional-admin", region=None, admin_region_id=sola.id)
    sola_user = make_user(region="SOLA")
    nola_user = make_user(region="NOLA")
    make_user(role="super-admin", region="SOLA")

    listed = client.get("/api/admin/users?region=NOLA", headers=auth(regional)).json()
    assert [u["id"] for u in listed] == [str(sola_user.id)]

    resp = client.patch(f"/api/admin/users/{nola_user.id}", json={"first_name": "X"}, headers=auth(regional))
    assert resp.status_code == 403

    resp = client.patch(f"/api/admin/users/{sola_user.id}", json={"region": "NOLA"}, headers=auth(regional))
    assert resp.status_code == 403

    resp = client.post("/api/admin/users", json=_new_user(region="NOLA"), headers=auth(regional))
    assert resp.status_code == 403


def test_cannot_delete_yourself(client, auth, make_user):
    admin = make_user(role="super-admin", region=None)
    resp = client.delete(f"/api/admin/users/{admin.id}", headers=auth(admin))
    assert resp.status_code == 400
    assert resp.json() == {"message": "You cannot delete your own account"}


def test_delete_user_removes_their_records(client, auth, session_factory, make_user, make_deal, grant_points):
    admin = make_user(role="super-admin", region=None)
    target = make_user()
    make_deal(target)
    grant_points(target, 100)

    assert client.delete(f"/api/admin/users/{target.id}", headers=auth(admin)).json() == {"deleted": True}
    with session_factory() as db:
        assert db.query(User).filter(User.id == target.id).first() is None
        assert db.query(Deal).count() == 0


def test_grand_prize_winner_cannot_be_deleted(client, auth, session_factory, make_user):
    from datetime import datetime
    from uuid import uuid4

    admin = make_user(role="super-admin", region=None)
    winner = make_user()
    with session_factory() as db:
        criteria = GrandPrizeCriteria(
            name="2026",
            start_date=datetime(2026, 1, 1),
            end_date=datetime(2026, 12, 31),
            criteria_type="points",
            points_weight=100,
            deals_weight=0,
        )
        db.add(criteria)
        db.flush()
        db.add(
            GrandPrizeWinner(
                criteria_id=criteria.id,
                user_id=winner.id,
                rank=1,
                points=10,
                deals=1,
                goals=1,
                score=100.0,
                run_id=uuid4(),
                awarded_at=datetime(2026, 10, 1),
            )
        )
        db.commit()

    assert client.delete(f"/api/admin/users/{winner.id}", headers=auth(admin)).status_code == 409


def test_inactive_or_unknown_caller_is_unauthorized(client, make_user):
    inactive = make_user(is_active=False)
    assert client.get("/api/users/stats", headers={"X-User-Id": str(inactive.id)}).status_code == 401
    assert client.get("/api/users/stats", headers={"X-User-Id": "not-a-uuid"}).status_code == 401


def test_leaderboard_orders_by_points(client, auth, make_user, grant_points):
    low = make_user()
    high = make_user()
    grant_points(low, 10)
    grant_points(high, 50)

    board = client.get("/api/users/leaderboard", headers=auth(low)).json()
    assert [e["user_id"] for e in board[:2]] == [str(high.id), str(low.id)]
    assert board[0]["total_points"] == 50


def test_points_history_is_own_ledger(client, auth, make_user, grant_points):
    user = make_user()
    other = make_user()
    grant_points(user, 10, "Welcome bonus")
    grant_points(other, 99)

    rows = client.get("/api/points/history", headers=auth(user)).json()
    assert [(r["points"], r["description"]) for r in rows] == [(10, "Welcome bonus")]
