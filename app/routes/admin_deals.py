from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, filter_by_region, get_current_user, require_admin, require_super_admin
from app.models.audit_log import AuditLog
from app.models.deal import Deal
from app.models.user import User
from app.routes.deals import ensure_unique_license, get_deal_in_scope, post_approve_deal, post_reject_deal
from app.schemas.audit_log import AuditLogOut
from app.schemas.deal import AdminDealOut, AdminDealPage, DealOut, DealUpdate
from app.services.audit_service import record_audit, request_meta
from app.services.deal_service import deal_snapshot, delete_deal_records, recalculate_all_points
from app.services.region_service import get_config_for_region


router = APIRouter(prefix="/api/admin", tags=["admin-deals"])


def _admin_deal_row(deal: Deal, user: User) -> AdminDealOut:
    out = AdminDealOut.model_validate(deal)
    out.username = user.username
    out.user_first_name = user.first_name
    out.user_last_name = user.last_name
    out.user_region = user.region
    return out


def _scoped_deals(db: Session, ctx: AuthContext, region: str | None):
    q = db.query(Deal, User).join(User, Deal.user_id == User.id)
    return filter_by_region(q, User.region, ctx.scope_region(region))


@router.get("/deals", response_model=AdminDealPage)
def list_deals(
    page: int = 1,
    limit: int = 20,
    region: str | None = None,
    status: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    page = max(1, page)
    limit = max(1, min(limit, 500))
    q = _scoped_deals(db, ctx, region)
    if status:
        q = q.filter(Deal.status == status)
    total = q.count()
    rows = q.order_by(Deal.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return {"deals": [_admin_deal_row(deal, user) for deal, user in rows], "total": total}


@router.get("/deals/pending", response_model=list[AdminDealOut])
def list_pending_deals(
    region: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = _scoped_deals(db, ctx, region).filter(Deal.status == "pending")
    return [_admin_deal_row(deal, user) for deal, user in q.order_by(Deal.created_at.asc()).all()]


@router.patch("/deals/{deal_id}", response_model=DealOut)
def update_deal(
    deal_id: UUID,
    payload: DealUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    deal = get_deal_in_scope(db, ctx, deal_id)
    data = payload.model_dump(exclude_unset=True)
    if "license_agreement_number" in data:
        ensure_unique_license(db, data["license_agreement_number"], deal.id)
    if data.get("region_config_id"):
        owner_region = db.query(User.region).filter(User.id == deal.user_id).scalar()
        get_config_for_region(db, data["region_config_id"], owner_region)

    # goals and points stay as computed at approval time
    for k, v in data.items():
        setattr(deal, k, v)

    db.commit()
    db.refresh(deal)
    return deal


@router.delete("/deals/{deal_id}")
def delete_deal(
    deal_id: UUID,
    request: Request,
    ctx: AuthContext = Depends(require_admin),
    actor: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    deal = get_deal_in_scope(db, ctx, deal_id)
    record_audit(
        db,
        action="delete",
        entity_type="deal",
        entity_id=deal.id,
        entity_data=deal_snapshot(deal),
        performed_by=actor,
        **request_meta(request),
    )
    delete_deal_records(db, deal)
    db.commit()
    return {"deleted": True}


router.add_api_route("/deals/{deal_id}/approve", post_approve_deal, methods=["POST"], response_model=DealOut)
router.add_api_route("/deals/{deal_id}/reject", post_reject_deal, methods=["POST"], response_model=DealOut)


@router.get("/audit-logs", response_model=list[AuditLogOut])
def list_audit_logs(
    entity_type: str | None = None,
    entity_id: UUID | None = None,
    performed_by_user_id: UUID | None = None,
    limit: int = 100,
    offset: int = 0,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    limit = max(1, min(limit, 500))
    offset = max(0, offset)
    q = db.query(AuditLog)
    if entity_type:
        q = q.filter(AuditLog.entity_type == entity_type)
    if entity_id:
        q = q.filter(AuditLog.entity_id == entity_id)
    if performed_by_user_id:
        q = q.filter(AuditLog.performed_by_user_id == performed_by_user_id)
    return q.order_by(AuditLog.performed_at.desc()).offset(offset).limit(limit).all()


@router.post("/recalculate-points")
def post_recalculate_points(ctx: AuthContext = Depends(require_super_admin), db: Session = Depends(get_db)):
    result = recalculate_all_points(db)
    db.commit()
    return result
