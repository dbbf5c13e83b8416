from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, require_admin
from app.models.category_master import CategoryMaster
from app.schemas.master_data import ActiveToggle, CategoryMasterCreate, CategoryMasterOut, CategoryMasterUpdate


router = APIRouter(prefix="/api/admin/categories-master", tags=["admin-master-data"])


def _get_or_404(db: Session, category_id: UUID) -> CategoryMaster:
    category = db.query(CategoryMaster).filter(CategoryMaster.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


def _validate_name(db: Session, name: str, category_id: UUID | None = None):
    q = db.query(CategoryMaster.id).filter(CategoryMaster.name == name)
    if category_id is not None:
        q = q.filter(CategoryMaster.id != category_id)
    if q.first():
        raise HTTPException(status_code=409, detail="Category name already exists")


@router.get("", response_model=list[CategoryMasterOut])
def list_categories(
    active: bool | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(CategoryMaster)
    if active is not None:
        q = q.filter(CategoryMaster.active.is_(active))
    return q.order_by(CategoryMaster.name.asc()).all()


@router.post("", response_model=CategoryMasterOut)
def create_category(
    payload: CategoryMasterCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _validate_name(db, payload.name)
    category = CategoryMaster(**payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.patch("/{category_id}", response_model=CategoryMasterOut)
def update_category(
    category_id: UUID,
    payload: CategoryMasterUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    category = _get_or_404(db, category_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("name"):
        _validate_name(db, data["name"], category.id)
    for k, v in data.items():
        setattr(category, k, v)
    db.commit()
    db.refresh(category)
    return category


@router.patch("/{category_id}/active", response_model=CategoryMasterOut)
def toggle_category(
    category_id: UUID,
    payload: ActiveToggle,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    # region configs keep the category name as a plain string
    category = _get_or_404(db, category_id)
    category.active = payload.active
    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}")
def delete_category(category_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    category = _get_or_404(db, category_id)
    db.delete(category)
    db.commit()
    return {"deleted": True}
