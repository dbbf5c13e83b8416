from datetime import datetime

from app.models.deal import Deal
from app.models.monthly_region_prize import MonthlyRegionPrize
from app.models.user import User
from app.schemas.region_catalog import DEFAULT_REGION_CONFIGS
from app.services.region_service import compose_subcategory


def test_compose_subcategory_for_mexico_levels():
    assert compose_subcategory("MEXICO", level="PLATINUM") == "PLATINUM"
    assert compose_subcategory("MEXICO", level="GOLD (2)", city="Monterrey") == "GOLD (2) - Monterrey"
    assert compose_subcategory("MEXICO", city="Monterrey") is None


def test_compose_subcategory_for_geography():
    assert compose_subcategory("NOLA", country="COLOMBIA") == "COLOMBIA"
    assert compose_subcategory("NOLA", country="COLOMBIA", city="Cali") == "COLOMBIA - Cali"
    assert compose_subcategory("BRASIL", city="Recife") == "Recife"
    assert compose_subcategory("SOLA", country="  ", city="") is None


def test_create_config_fills_name_and_default_rates(client, auth, make_user):
    admin = make_user(role="super-admin", region=None)
    resp = client.post(
        "/api/admin/regions",
        json={"region": "SOLA", "category": "SMB", "subcategory": ""},
        headers=auth(admin),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "SOLA SMB"
    assert body["subcategory"] is None
    assert body["new_customer_goal_rate"] == 1000
    assert body["renewal_goal_rate"] == 2000


def test_duplicate_triple_is_a_conflict(client, auth, make_user, make_region_config):
    admin = make_user(role="super-admin", region=None)
    make_region_config("NOLA", "ENTERPRISE", "COLOMBIA")
    make_region_config("SOLA", "SMB", None)

    resp = client.post(
        "/api/admin/regions",
        json={"region": "NOLA", "category": "ENTERPRISE", "subcategory": "COLOMBIA"},
        headers=auth(admin),
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "A configuration already exists for NOLA ENTERPRISE COLOMBIA"

    resp = client.post("/api/admin/regions", json={"region": "SOLA", "category": "SMB"}, headers=auth(admin))
    assert resp.status_code == 409


def test_patch_into_existing_triple_is_a_conflict(client, auth, make_user, make_region_config):
    admin = make_user(role="super-admin", region=None)
    make_region_config("NOLA", "SMB", "COLOMBIA")
    other = make_region_config("NOLA", "SMB", "CENTRO AMÉRICA")

    resp = client.patch(f"/api/admin/regions/{other.id}", json={"subcategory": "COLOMBIA"}, headers=auth(admin))
    assert resp.status_code == 409

    resp = client.patch(f"/api/admin/regions/{other.id}", json={"monthly_goal_target": 4}, headers=auth(admin))
    assert resp.json()["monthly_goal_target"] == 4


def test_patch_rejects_null_for_required_columns(client, auth, make_user, make_region_config):
    admin = make_user(role="super-admin", region=None)
    config = make_region_config("NOLA", "ENTERPRISE", "COLOMBIA")
    url = f"/api/admin/regions/{config.id}"

    resp = client.patch(url, json={"new_customer_goal_rate": None}, headers=auth(admin))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid data"

    cleared = client.patch(url, json={"subcategory": None, "expiration_date": None}, headers=auth(admin))
    assert cleared.status_code == 200
    assert cleared.json()["subcategory"] is None
    assert cleared.json()["new_customer_goal_rate"] == 1000


def test_only_super_admin_writes_configs(client, auth, make_user):
    admin = make_user(role="admin", region=None)
    resp = client.post("/api/admin/regions", json={"region": "NOLA", "category": "SMB"}, headers=auth(admin))
    assert resp.status_code == 403
    assert client.post("/api/admin/regions/seed", headers=auth(admin)).status_code == 403


def test_seed_is_idempotent(client, auth, make_user):
    admin = make_user(role="super-admin", region=None)

    first = client.post("/api/admin/regions/seed", headers=auth(admin)).json()
    assert first == {"created": len(DEFAULT_REGION_CONFIGS), "skipped": 0}

    second = client.post("/api/admin/regions/seed", headers=auth(admin)).json()
    assert second == {"created": 0, "skipped": len(DEFAULT_REGION_CONFIGS)}

    configs = client.get("/api/admin/regions", headers=auth(admin)).json()
    assert len(configs) == len(DEFAULT_REGION_CONFIGS)


def test_expired_and_inactive_configs_are_hidden_by_default(client, auth, make_user, make_region_config):
    admin = make_user(role="super-admin", region=None)
    live = make_region_config("NOLA", "ENTERPRISE")
    make_region_config("NOLA", "SMB", expiration_date=datetime(2020, 1, 1))
    make_region_config("NOLA", "MSSP", is_active=False)

    visible = client.get("/api/admin/regions", headers=auth(admin)).json()
    assert [c["id"] for c in visible] == [str(live.id)]

    everything = client.get("/api/admin/region-configs?include_inactive=true", headers=auth(admin)).json()
    assert len(everything) == 3


def test_regional_admin_sees_only_own_region_configs(client, auth, make_user, make_region_config):
    sola = make_region_config("SOLA", "ENTERPRISE")
    make_region_config("NOLA", "ENTERPRISE")
    regional = make_user(role="regional-admin", region=None, admin_region_id=sola.id)

    configs = client.get("/api/admin/regions?region=NOLA", headers=auth(regional)).json()
    assert [c["region"] for c in configs] == ["SOLA"]


def test_hierarchy_lists_active_configs(client, make_region_config):
    make_region_config("NOLA", "ENTERPRISE", "COLOMBIA")
    make_region_config("NOLA", "ENTERPRISE", "CENTRO AMÉRICA")
    make_region_config("SOLA", "SMB", None)
    make_region_config("BRASIL", "SMB", None, is_active=False)

    hierarchy = client.get("/api/region-hierarchy").json()
    assert set(hierarchy) == {"NOLA", "SOLA"}
    assert sorted(hierarchy["NOLA"]["categories"]["ENTERPRISE"]) == ["CENTRO AMÉRICA", "COLOMBIA"]
    assert hierarchy["SOLA"]["categories"]["SMB"] == []


def test_compose_subcategory_endpoint(client, auth, make_user):
    admin = make_user(role="admin", region=None)
    resp = client.post(
        "/api/admin/regions/compose-subcategory",
        json={"region": "MEXICO", "level": "PLATINUM", "city": "Puebla"},
        headers=auth(admin),
    )
    assert resp.json() == {"region": "MEXICO", "subcategory": "PLATINUM - Puebla"}


def test_delete_config_cleans_up_references(
    client, auth, session_factory, make_user, make_region_config, make_deal
):
    admin = make_user(role="super-admin", region=None)
    config = make_region_config("SOLA", "ENTERPRISE")
    regional = make_user(role="regional-admin", region=None, admin_region_id=config.id)
    deal = make_deal(make_user(region="SOLA"), region_config_id=config.id)
    with session_factory() as db:
        db.add(MonthlyRegionPrize(region_config_id=config.id, month=9, year=2026, rank=1, prize_name="Trip"))
        db.commit()

    resp = client.delete(f"/api/admin/regions/{config.id}", headers=auth(admin))
    assert resp.json() == {"deleted": True}

    with session_factory() as db:
        assert db.query(MonthlyRegionPrize).count() == 0
        assert db.query(Deal).filter(Deal.id == deal.id).one().region_config_id is None
        assert db.query(User).filter(User.id == regional.id).one().admin_region_id is None


def test_regional_admin_loses_admin_access_when_config_is_deleted(
    client, auth, make_user, make_region_config, make_deal
):
    admin = make_user(role="super-admin", region=None)
    sola = make_region_config("SOLA", "ENTERPRISE")
    regional = make_user(role="regional-admin", region=None, admin_region_id=sola.id)
    make_deal(make_user(region="SOLA"))
    make_deal(make_user(region="NOLA"))

    before = client.get("/api/admin/deals", headers=auth(regional))
    assert before.json()["total"] == 1

    client.delete(f"/api/admin/regions/{sola.id}", headers=auth(admin))

    after = client.get("/api/admin/deals", headers=auth(regional))
    assert after.status_code == 403
    assert after.json() == {"message": "No region assigned to this administrator"}
    assert client.get("/api/admin/reports", headers=auth(regional)).status_code == 403


def test_points_config_defaults_and_upsert(client, auth, make_user):
    super_admin = make_user(role="super-admin", region=None)
    admin = make_user(role="admin", region=None)

    defaults = client.get("/api/admin/points-config?region=BRASIL", headers=auth(admin)).json()
    assert defaults["id"] is None
    assert defaults["new_customer_rate"] == 1000
    assert defaults["renewal_rate"] == 2000

    assert client.get("/api/admin/points-config", headers=auth(admin)).status_code == 400
    assert (
        client.patch("/api/admin/points-config?region=BRASIL", json={"renewal_rate": 1500}, headers=auth(admin))
        .status_code
        == 403
    )

    updated = client.patch(
        "/api/admin/points-config?region=BRASIL", json={"renewal_rate": 1500}, headers=auth(super_admin)
    ).json()
    assert updated["id"] is not None
    assert updated["renewal_rate"] == 1500
    assert updated["new_customer_rate"] == 1000
    assert updated["updated_by"] == str(super_admin.id)
