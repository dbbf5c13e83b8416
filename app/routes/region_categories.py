from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, filter_by_region, require_admin
from app.models.region_category import RegionCategory
from app.schemas.master_data import ActiveToggle, RegionCategoryCreate, RegionCategoryOut, RegionCategoryUpdate


router = APIRouter(prefix="/api/admin/region-categories", tags=["admin-master-data"])


def _get_or_404(db: Session, item_id: UUID) -> RegionCategory:
    item = db.query(RegionCategory).filter(RegionCategory.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Region category not found")
    return item


@router.get("", response_model=list[RegionCategoryOut])
def list_region_categories(
    region: str | None = None,
    active: bool | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = filter_by_region(db.query(RegionCategory), RegionCategory.region, ctx.scope_region(region))
    if active is not None:
        q = q.filter(RegionCategory.active.is_(active))
    return q.order_by(RegionCategory.region.asc(), RegionCategory.category.asc()).all()


@router.post("", response_model=RegionCategoryOut)
def create_region_category(
    payload: RegionCategoryCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    item = RegionCategory(**payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.patch("/{item_id}", response_model=RegionCategoryOut)
def update_region_category(
    item_id: UUID,
    payload: RegionCategoryUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    item = _get_or_404(db, item_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(item, k, v)
    db.commit()
    db.refresh(item)
    return item


@router.patch("/{item_id}/active", response_model=RegionCategoryOut)
def toggle_region_category(
    item_id: UUID,
    payload: ActiveToggle,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    item = _get_or_404(db, item_id)
    item.active = payload.active
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}")
def delete_region_category(item_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    item = _get_or_404(db, item_id)
    db.delete(item)
    db.commit()
    return {"deleted": True}
