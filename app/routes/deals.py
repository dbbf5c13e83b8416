from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context, get_current_user, require_admin
from app.models.deal import Deal
from app.models.user import User
from app.schemas.deal import DealCreate, DealOut
from app.services.deal_service import approve_deal, get_deal_or_404, reject_deal
from app.services.region_service import resolve_deal_region_config


router = APIRouter(prefix="/api/deals", tags=["deals"])


def ensure_unique_license(db: Session, license_number: str | None, deal_id: UUID | None = None):
    if not license_number:
        return
    q = db.query(Deal.id).filter(Deal.license_agreement_number == license_number)
    if deal_id is not None:
        q = q.filter(Deal.id != deal_id)
    if q.first():
        raise HTTPException(
            status_code=409,
            detail={
                "message": "A deal with this license agreement number already exists",
                "code": "DUPLICATE_LICENSE_NUMBER",
            },
        )


def get_deal_in_scope(db: Session, ctx: AuthContext, deal_id: UUID) -> Deal:
    deal = get_deal_or_404(db, deal_id)
    if ctx.is_regional_admin:
        owner_region = db.query(User.region).filter(User.id == deal.user_id).scalar()
        if not ctx.can_access_region(owner_region):
            raise HTTPException(status_code=403, detail="Deal is outside your region")
    return deal


@router.post("", response_model=DealOut)
def create_deal(
    payload: DealCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_unique_license(db, payload.license_agreement_number)
    config = resolve_deal_region_config(db, user, payload.region_config_id)

    data = payload.model_dump(exclude={"region_config_id"})
    deal = Deal(
        **data,
        user_id=user.id,
        region_config_id=config.id if config else None,
        status="pending",
    )
    db.add(deal)
    db.commit()
    db.refresh(deal)
    return deal


@router.get("", response_model=list[DealOut])
def list_my_deals(
    status: str | None = None,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    q = db.query(Deal).filter(Deal.user_id == ctx.user_id)
    if status:
        q = q.filter(Deal.status == status)
    return q.order_by(Deal.created_at.desc()).all()


@router.get("/recent", response_model=list[DealOut])
def list_recent_deals(limit: int = 5, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    limit = max(1, min(limit, 50))
    return (
        db.query(Deal)
        .filter(Deal.user_id == ctx.user_id)
        .order_by(Deal.created_at.desc())
        .limit(limit)
        .all()
    )


@router.post("/{deal_id}/approve", response_model=DealOut)
def post_approve_deal(deal_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    deal = get_deal_in_scope(db, ctx, deal_id)
    approve_deal(db, deal, ctx.user_id)
    db.commit()
    db.refresh(deal)
    return deal


@router.post("/{deal_id}/reject", response_model=DealOut)
def post_reject_deal(deal_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    deal = get_deal_in_scope(db, ctx, deal_id)
    reject_deal(db, deal, ctx.user_id)
    db.commit()
    db.refresh(deal)
    return deal
