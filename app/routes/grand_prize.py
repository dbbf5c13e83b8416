from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, require_admin, require_super_admin
from app.models.grand_prize_criteria import GrandPrizeCriteria
from app.models.grand_prize_winner import GrandPrizeWinner
from app.schemas.grand_prize import (
    GrandPrizeCriteriaCreate,
    GrandPrizeCriteriaOut,
    GrandPrizeCriteriaUpdate,
    GrandPrizeWinnerOut,
    RankingEntry,
)
from app.services.grand_prize_service import (
    compute_ranking,
    deactivate_other_criteria,
    get_criteria_or_404,
    latest_winners,
    run_criteria,
)


router = APIRouter(prefix="/api/admin/grand-prize", tags=["admin-grand-prize"])


def _criteria_query(db: Session, ctx: AuthContext, region: str | None):
    q = db.query(GrandPrizeCriteria)
    scope = ctx.scope_region(region)
    if scope is not None:
        q = q.filter(GrandPrizeCriteria.region.in_([scope, "all"]))
    return q


def _criteria_in_scope(db: Session, ctx: AuthContext, criteria_id: UUID) -> GrandPrizeCriteria:
    criteria = get_criteria_or_404(db, criteria_id)
    if ctx.is_regional_admin and criteria.region not in (ctx.region, "all"):
        raise HTTPException(status_code=403, detail="Criteria is outside your region")
    return criteria


@router.get("/criteria", response_model=list[GrandPrizeCriteriaOut])
def list_active_criteria(
    region: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = _criteria_query(db, ctx, region).filter(GrandPrizeCriteria.is_active.is_(True))
    return q.order_by(GrandPrizeCriteria.created_at.desc()).all()


@router.get("/criteria/all", response_model=list[GrandPrizeCriteriaOut])
def list_all_criteria(
    region: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _criteria_query(db, ctx, region).order_by(GrandPrizeCriteria.created_at.desc()).all()


@router.post("/criteria", response_model=GrandPrizeCriteriaOut)
def create_criteria(
    payload: GrandPrizeCriteriaCreate,
    ctx: AuthContext = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    criteria = GrandPrizeCriteria(**payload.model_dump())
    db.add(criteria)
    db.flush()
    if criteria.is_active:
        deactivate_other_criteria(db, criteria)
    db.commit()
    db.refresh(criteria)
    return criteria


@router.patch("/criteria/{criteria_id}", response_model=GrandPrizeCriteriaOut)
def update_criteria(
    criteria_id: UUID,
    payload: GrandPrizeCriteriaUpdate,
    ctx: AuthContext = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    criteria = get_criteria_or_404(db, criteria_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(criteria, k, v)

    if criteria.end_date < criteria.start_date:
        raise HTTPException(status_code=400, detail="end_date must be after start_date")
    if criteria.criteria_type == "combined" and criteria.points_weight + criteria.deals_weight != 100:
        raise HTTPException(status_code=400, detail="points_weight + deals_weight must equal 100")

    db.flush()
    if payload.is_active:
        deactivate_other_criteria(db, criteria)
    db.commit()
    db.refresh(criteria)
    return criteria


@router.delete("/criteria/{criteria_id}")
def delete_criteria(criteria_id: UUID, ctx: AuthContext = Depends(require_super_admin), db: Session = Depends(get_db)):
    criteria = get_criteria_or_404(db, criteria_id)
    if db.query(GrandPrizeWinner.id).filter(GrandPrizeWinner.criteria_id == criteria.id).first():
        raise HTTPException(status_code=409, detail="Criteria has recorded winners; deactivate it instead")
    db.delete(criteria)
    db.commit()
    return {"deleted": True}


@router.get("/ranking/{criteria_id}", response_model=list[RankingEntry])
def get_ranking(criteria_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    criteria = _criteria_in_scope(db, ctx, criteria_id)
    return compute_ranking(db, criteria)


@router.post("/criteria/{criteria_id}/run", response_model=list[GrandPrizeWinnerOut])
def post_run_criteria(
    criteria_id: UUID,
    ctx: AuthContext = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    criteria = get_criteria_or_404(db, criteria_id)
    winners = run_criteria(db, criteria)
    db.commit()
    for w in winners:
        db.refresh(w)
    return winners


@router.get("/criteria/{criteria_id}/winners", response_model=list[GrandPrizeWinnerOut])
def get_winners(criteria_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    criteria = _criteria_in_scope(db, ctx, criteria_id)
    return latest_winners(db, criteria.id)
