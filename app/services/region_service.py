import logging
import os
from datetime import datetime

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.points_config import PointsConfig
from app.models.region_config import RegionConfig
from app.schemas.region_catalog import DEFAULT_REGION_CONFIGS, REGIONS


logger = logging.getLogger(__name__)

DEFAULT_NEW_CUSTOMER_RATE = int(os.getenv("DEFAULT_NEW_CUSTOMER_RATE", "1000"))
DEFAULT_RENEWAL_RATE = int(os.getenv("DEFAULT_RENEWAL_RATE", "2000"))
DEFAULT_NEW_CUSTOMER_GOAL_RATE = int(os.getenv("DEFAULT_NEW_CUSTOMER_GOAL_RATE", "1000"))
DEFAULT_RENEWAL_GOAL_RATE = int(os.getenv("DEFAULT_RENEWAL_GOAL_RATE", "2000"))
DEFAULT_GRAND_PRIZE_THRESHOLD = 50000


def validate_region(region: str | None) -> str:
    if not region or region not in REGIONS:
        raise HTTPException(status_code=400, detail="Valid region is required")
    return region


def compose_subcategory(region: str, level: str | None = None, country: str | None = None, city: str | None = None):
    """Build the subcategory label for a region.

    MEXICO uses partner levels: `{level}` or `{level} - {city}`.
    Other regions use geography: `{country}`, `{city}` or `{country} - {city}`.
    """
    level = (level or "").strip()
    country = (country or "").strip()
    city = (city or "").strip()

    if region == "MEXICO":
        if not level:
            return None
        return f"{level} - {city}" if city else level

    if country and city:
        return f"{country} - {city}"
    return country or city or None


def default_config_name(region: str, category: str, subcategory: str | None) -> str:
    parts = [region, category]
    if subcategory:
        parts.append(subcategory)
    return " ".join(parts)


def is_config_active(config: RegionConfig, now: datetime | None = None) -> bool:
    if not config.is_active:
        return False
    if config.expiration_date is None:
        return True
    now = now or datetime.utcnow()
    return config.expiration_date > now


def get_points_config(db: Session, region: str | None) -> PointsConfig | None:
    if not region:
        return None
    return db.query(PointsConfig).filter(PointsConfig.region == region).first()


def points_config_view(db: Session, region: str) -> dict | PointsConfig:
    config = get_points_config(db, region)
    if config:
        return config
    return {
        "id": None,
        "region": region,
        "new_customer_rate": DEFAULT_NEW_CUSTOMER_RATE,
        "renewal_rate": DEFAULT_RENEWAL_RATE,
        "default_new_customer_goal_rate": DEFAULT_NEW_CUSTOMER_GOAL_RATE,
        "default_renewal_goal_rate": DEFAULT_RENEWAL_GOAL_RATE,
        "grand_prize_threshold": DEFAULT_GRAND_PRIZE_THRESHOLD,
    }


def points_rate_for(db: Session, region: str | None, deal_type: str) -> int:
    config = get_points_config(db, region)
    if deal_type == "renewal":
        return config.renewal_rate if config else DEFAULT_RENEWAL_RATE
    return config.new_customer_rate if config else DEFAULT_NEW_CUSTOMER_RATE


def default_goal_rate_for(db: Session, region: str | None, deal_type: str) -> int:
    config = get_points_config(db, region)
    if deal_type == "renewal":
        return config.default_renewal_goal_rate if config else DEFAULT_RENEWAL_GOAL_RATE
    return config.default_new_customer_goal_rate if config else DEFAULT_NEW_CUSTOMER_GOAL_RATE


def find_config_for_segment(db: Session, region, category, subcategory) -> RegionConfig | None:
    """Active config for an exact (region, category, subcategory) triple."""
    if not region or not category:
        return None
    q = db.query(RegionConfig).filter(RegionConfig.region == region, RegionConfig.category == category)
    if subcategory:
        q = q.filter(RegionConfig.subcategory == subcategory)
    else:
        q = q.filter(RegionConfig.subcategory.is_(None))
    for config in q.order_by(RegionConfig.created_at.asc()).all():
        if is_config_active(config):
            return config
    return None


def get_config_for_region(db: Session, region_config_id, region: str | None) -> RegionConfig:
    """Load a config a deal may be attached to; it must belong to the deal owner's region."""
    config = db.query(RegionConfig).filter(RegionConfig.id == region_config_id).first()
    if not config:
        raise HTTPException(status_code=404, detail="Region config not found")
    if config.region != region:
        raise HTTPException(status_code=403, detail="Region config belongs to another region")
    return config


def resolve_deal_region_config(db: Session, user, region_config_id=None) -> RegionConfig | None:
    """Config a new deal is attached to: explicit id, else the owner's segment, else the first active config of the owner's region."""
    if region_config_id:
        return get_config_for_region(db, region_config_id, user.region)

    config = find_config_for_segment(db, user.region, user.region_category, user.region_subcategory)
    if config:
        return config
    if not user.region:
        return None
    for candidate in (
        db.query(RegionConfig)
        .filter(RegionConfig.region == user.region)
        .order_by(RegionConfig.created_at.asc())
        .all()
    ):
        if is_config_active(candidate):
            return candidate
    return None


def ensure_unique_triple(db: Session, region, category, subcategory, config_id=None):
    q = db.query(RegionConfig.id).filter(RegionConfig.region == region, RegionConfig.category == category)
    if subcategory:
        q = q.filter(RegionConfig.subcategory == subcategory)
    else:
        q = q.filter(RegionConfig.subcategory.is_(None))
    if config_id is not None:
        q = q.filter(RegionConfig.id != config_id)
    if q.first():
        label = default_config_name(region, category, subcategory)
        raise HTTPException(status_code=409, detail=f"A configuration already exists for {label}")


def seed_default_configs(db: Session) -> dict:
    created = 0
    skipped = 0
    for region, category, subcategory, name, monthly_target in DEFAULT_REGION_CONFIGS:
        q = db.query(RegionConfig.id).filter(RegionConfig.region == region, RegionConfig.category == category)
        if subcategory:
            q = q.filter(RegionConfig.subcategory == subcategory)
        else:
            q = q.filter(RegionConfig.subcategory.is_(None))
        if q.first():
            skipped += 1
            continue
        db.add(
            RegionConfig(
                region=region,
                category=category,
                subcategory=subcategory,
                name=name,
                new_customer_goal_rate=default_goal_rate_for(db, region, "new_customer"),
                renewal_goal_rate=default_goal_rate_for(db, region, "renewal"),
                monthly_goal_target=monthly_target,
                is_active=True,
            )
        )
        created += 1
    db.flush()
    logger.info("seeded region configs", extra={"created_count": created, "skipped_count": skipped})
    return {"created": created, "skipped": skipped}


def build_region_hierarchy(db: Session) -> dict:
    hierarchy: dict = {}
    configs = (
        db.query(RegionConfig)
        .order_by(RegionConfig.region.asc(), RegionConfig.category.asc(), RegionConfig.subcategory.asc())
        .all()
    )
    for config in configs:
        if not is_config_active(config):
            continue
        categories = hierarchy.setdefault(config.region, {"categories": {}})["categories"]
        subcategories = categories.setdefault(config.category, [])
        if config.subcategory and config.subcategory not in subcategories:
            subcategories.append(config.subcategory)
    return hierarchy
