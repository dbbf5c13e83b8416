from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, filter_by_region, require_admin
from app.models.category_master import CategoryMaster
from app.models.product_type import ProductType
from app.models.region_config import RegionConfig
from app.models.reward import Reward
from app.schemas.region_catalog import get_region_catalog
from app.services.region_service import is_config_active


router = APIRouter(prefix="/api/admin/ui-options", tags=["admin"])


@router.get("/regions")
def list_ui_options_regions(ctx: AuthContext = Depends(require_admin)):
    return get_region_catalog()


@router.get("/region-configs")
def list_ui_options_region_configs(ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    q = filter_by_region(db.query(RegionConfig), RegionConfig.region, ctx.scope_region())
    items = q.order_by(RegionConfig.name.asc()).all()
    return {
        "items": [
            {
                "id": str(c.id),
                "name": c.name,
                "region": c.region,
                "category": c.category,
                "subcategory": c.subcategory,
            }
            for c in items
            if is_config_active(c)
        ]
    }


@router.get("/rewards")
def list_ui_options_rewards(
    active: bool | None = True,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Reward)
    if active is not None:
        q = q.filter(Reward.is_active.is_(active))
    items = q.order_by(Reward.name.asc()).all()
    return {
        "items": [
            {
                "id": str(r.id),
                "name": r.name,
                "active": r.is_active,
                "pointsCost": r.points_cost,
                "region": r.region,
            }
            for r in items
        ],
    }


@router.get("/categories")
def list_ui_options_categories(ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    items = db.query(CategoryMaster).filter(CategoryMaster.active.is_(True)).order_by(CategoryMaster.name.asc()).all()
    return {"items": [{"id": str(c.id), "name": c.name, "type": c.type} for c in items]}


@router.get("/product-types")
def list_ui_options_product_types(ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    items = db.query(ProductType).filter(ProductType.active.is_(True)).order_by(ProductType.name.asc()).all()
    return {"items": [{"id": str(p.id), "name": p.name, "category": p.category} for p in items]}
