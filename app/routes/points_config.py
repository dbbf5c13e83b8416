from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, require_admin, require_super_admin
from app.models.points_config import PointsConfig
from app.schemas.points import PointsConfigOut, PointsConfigUpdate
from app.services.region_service import get_points_config, points_config_view, validate_region


router = APIRouter(prefix="/api/admin/points-config", tags=["admin-points-config"])


@router.get("", response_model=PointsConfigOut)
def get_points_config_for_region(
    region: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    region = validate_region(ctx.scope_region(region))
    return points_config_view(db, region)


@router.patch("", response_model=PointsConfigOut)
def update_points_config(
    payload: PointsConfigUpdate,
    region: str | None = None,
    ctx: AuthContext = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    region = validate_region(region)
    config = get_points_config(db, region)
    if not config:
        config = PointsConfig(region=region)
        db.add(config)

    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is not None:
            setattr(config, k, v)
    config.updated_by = ctx.user_id

    db.commit()
    db.refresh(config)
    return config
