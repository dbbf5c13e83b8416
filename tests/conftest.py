import os
from datetime import datetime
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base, get_db
from app.main import app as fastapi_app
from app.models.deal import Deal
from app.models.points_history import PointsHistory
from app.models.region_config import RegionConfig
from app.models.reward import Reward
from app.models.user import User


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(fastapi_app)
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _headers(user) -> dict:
        return {"X-User-Id": str(user.id)}

    return _headers


def _save(session_factory, obj):
    with session_factory() as db:
        db.add(obj)
        db.commit()
        db.refresh(obj)
    return obj


@pytest.fixture
def make_user(session_factory):
    counter = {"n": 0}

    def _make(role="user", region="NOLA", **kwargs):
        counter["n"] += 1
        n = counter["n"]
        values = {
            "username": f"user{n}",
            "email": f"user{n}@acme.com",
            "first_name": f"First{n}",
            "last_name": f"Last{n}",
            "country": "COLOMBIA",
            "role": role,
            "region": region,
            "region_category": "ENTERPRISE",
            "region_subcategory": None,
            "is_active": True,
            "is_approved": True,
        }
        values.update(kwargs)
        return _save(session_factory, User(**values))

    return _make


@pytest.fixture
def make_region_config(session_factory):
    def _make(region="NOLA", category="ENTERPRISE", subcategory=None, **kwargs):
        values = {
            "region": region,
            "category": category,
            "subcategory": subcategory,
            "name": " ".join(p for p in (region, category, subcategory) if p),
            "new_customer_goal_rate": 1000,
            "renewal_goal_rate": 2000,
            "monthly_goal_target": 10,
            "is_active": True,
        }
        values.update(kwargs)
        return _save(session_factory, RegionConfig(**values))

    return _make


@pytest.fixture
def make_reward(session_factory):
    def _make(points_cost=500, **kwargs):
        values = {
            "name": f"Reward {points_cost}",
            "points_cost": points_cost,
            "category": "merch",
            "is_active": True,
        }
        values.update(kwargs)
        return _save(session_factory, Reward(**values))

    return _make


@pytest.fixture
def make_deal(session_factory):
    def _make(user, deal_value=2500, deal_type="new_customer", **kwargs):
        values = {
            "user_id": user.id,
            "product_type": "software",
            "product_name": "Endpoint Suite",
            "deal_value": Decimal(str(deal_value)),
            "deal_type": deal_type,
            "quantity": 1,
            "close_date": datetime(2026, 9, 30),
            "status": "pending",
        }
        values.update(kwargs)
        return _save(session_factory, Deal(**values))

    return _make


@pytest.fixture
def grant_points(session_factory):
    def _grant(user, points, description="Seed points"):
        return _save(session_factory, PointsHistory(user_id=user.id, points=points, description=description))

    return _grant
