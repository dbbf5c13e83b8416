import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, filter_by_region, require_admin, require_super_admin
from app.models.deal import Deal
from app.models.monthly_region_prize import MonthlyRegionPrize
from app.models.region_config import RegionConfig
from app.models.reward import Reward
from app.models.user import User
from app.schemas.region_config import RegionConfigCreate, RegionConfigOut, RegionConfigUpdate, SubcategoryIn
from app.services.region_service import (
    build_region_hierarchy,
    compose_subcategory,
    default_config_name,
    default_goal_rate_for,
    ensure_unique_triple,
    is_config_active,
    seed_default_configs,
)
from app.services.report_service import region_stats


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["regions"])


def _get_config_or_404(db: Session, config_id: UUID) -> RegionConfig:
    config = db.query(RegionConfig).filter(RegionConfig.id == config_id).first()
    if not config:
        raise HTTPException(status_code=404, detail="Region config not found")
    return config


def _validate_reward(db: Session, reward_id: UUID | None):
    if reward_id and not db.query(Reward.id).filter(Reward.id == reward_id).first():
        raise HTTPException(status_code=404, detail="Reward not found")


@router.get("/admin/regions", response_model=list[RegionConfigOut])
def list_region_configs(
    region: str | None = None,
    include_inactive: bool = False,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = filter_by_region(db.query(RegionConfig), RegionConfig.region, ctx.scope_region(region))
    configs = q.order_by(RegionConfig.region.asc(), RegionConfig.category.asc(), RegionConfig.name.asc()).all()
    if include_inactive:
        return configs
    return [c for c in configs if is_config_active(c)]


router.add_api_route(
    "/admin/region-configs",
    list_region_configs,
    methods=["GET"],
    response_model=list[RegionConfigOut],
)


@router.post("/admin/regions", response_model=RegionConfigOut)
def create_region_config(
    payload: RegionConfigCreate,
    ctx: AuthContext = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    ensure_unique_triple(db, payload.region, payload.category, payload.subcategory)
    _validate_reward(db, payload.reward_id)

    data = payload.model_dump()
    if not data.get("name"):
        data["name"] = default_config_name(payload.region, payload.category, payload.subcategory)
    # prefilled from the region's points config, independent afterwards
    if data.get("new_customer_goal_rate") is None:
        data["new_customer_goal_rate"] = default_goal_rate_for(db, payload.region, "new_customer")
    if data.get("renewal_goal_rate") is None:
        data["renewal_goal_rate"] = default_goal_rate_for(db, payload.region, "renewal")

    config = RegionConfig(**data)
    db.add(config)
    db.commit()
    db.refresh(config)
    logger.info("region config created", extra={"config_id": str(config.id), "config_name": config.name})
    return config


@router.post("/admin/regions/seed")
def seed_region_configs(ctx: AuthContext = Depends(require_super_admin), db: Session = Depends(get_db)):
    result = seed_default_configs(db)
    db.commit()
    return result


@router.post("/admin/regions/compose-subcategory")
def post_compose_subcategory(payload: SubcategoryIn, ctx: AuthContext = Depends(require_admin)):
    return {
        "region": payload.region,
        "subcategory": compose_subcategory(payload.region, payload.level, payload.country, payload.city),
    }


@router.patch("/admin/regions/{config_id}", response_model=RegionConfigOut)
def update_region_config(
    config_id: UUID,
    payload: RegionConfigUpdate,
    ctx: AuthContext = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    config = _get_config_or_404(db, config_id)
    data = payload.model_dump(exclude_unset=True)

    if "category" in data or "subcategory" in data:
        ensure_unique_triple(
            db,
            config.region,
            data.get("category", config.category),
            data.get("subcategory", config.subcategory),
            config_id=config.id,
        )
    if "reward_id" in data:
        _validate_reward(db, data["reward_id"])

    for k, v in data.items():
        if k == "name" and not v:
            continue
        setattr(config, k, v)

    db.commit()
    db.refresh(config)
    return config


@router.delete("/admin/regions/{config_id}")
def delete_region_config(
    config_id: UUID,
    ctx: AuthContext = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    config = _get_config_or_404(db, config_id)
    db.query(MonthlyRegionPrize).filter(MonthlyRegionPrize.region_config_id == config.id).delete(
        synchronize_session=False
    )
    db.query(Deal).filter(Deal.region_config_id == config.id).update(
        {Deal.region_config_id: None}, synchronize_session=False
    )
    db.query(User).filter(User.admin_region_id == config.id).update(
        {User.admin_region_id: None}, synchronize_session=False
    )
    db.delete(config)
    db.commit()
    logger.info("region config deleted", extra={"config_id": str(config_id)})
    return {"deleted": True}


@router.get("/region-hierarchy")
def get_region_hierarchy(db: Session = Depends(get_db)):
    return build_region_hierarchy(db)


@router.get("/admin/region-stats")
def get_region_stats(
    region: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return region_stats(db, ctx.scope_region(region))
