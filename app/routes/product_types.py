from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, require_admin
from app.models.product_type import ProductType
from app.schemas.master_data import ActiveToggle, ProductTypeCreate, ProductTypeOut, ProductTypeUpdate


router = APIRouter(prefix="/api/admin/product-types", tags=["admin-master-data"])


def _get_or_404(db: Session, product_type_id: UUID) -> ProductType:
    product_type = db.query(ProductType).filter(ProductType.id == product_type_id).first()
    if not product_type:
        raise HTTPException(status_code=404, detail="Product type not found")
    return product_type


@router.get("", response_model=list[ProductTypeOut])
def list_product_types(
    category: str | None = None,
    active: bool | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(ProductType)
    if category:
        q = q.filter(ProductType.category == category)
    if active is not None:
        q = q.filter(ProductType.active.is_(active))
    return q.order_by(ProductType.name.asc()).all()


@router.post("", response_model=ProductTypeOut)
def create_product_type(
    payload: ProductTypeCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product_type = ProductType(**payload.model_dump())
    db.add(product_type)
    db.commit()
    db.refresh(product_type)
    return product_type


@router.patch("/{product_type_id}", response_model=ProductTypeOut)
def update_product_type(
    product_type_id: UUID,
    payload: ProductTypeUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product_type = _get_or_404(db, product_type_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(product_type, k, v)
    db.commit()
    db.refresh(product_type)
    return product_type


@router.patch("/{product_type_id}/active", response_model=ProductTypeOut)
def toggle_product_type(
    product_type_id: UUID,
    payload: ActiveToggle,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product_type = _get_or_404(db, product_type_id)
    product_type.active = payload.active
    db.commit()
    db.refresh(product_type)
    return product_type


@router.delete("/{product_type_id}")
def delete_product_type(
    product_type_id: UUID,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product_type = _get_or_404(db, product_type_id)
    db.delete(product_type)
    db.commit()
    return {"deleted": True}
