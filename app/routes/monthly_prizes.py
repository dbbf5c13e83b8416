from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, require_admin
from app.models.monthly_region_prize import MonthlyRegionPrize
from app.models.region_config import RegionConfig
from app.schemas.monthly_prize import (
    MonthlyPrizeCreate,
    MonthlyPrizeOut,
    MonthlyPrizeUpdate,
    MonthlyStandingOut,
)
from app.services.monthly_prize_service import list_prizes, monthly_standings


router = APIRouter(prefix="/api/admin/monthly-prizes", tags=["admin-monthly-prizes"])


def _config_in_scope(db: Session, ctx: AuthContext, config_id: UUID) -> RegionConfig:
    config = db.query(RegionConfig).filter(RegionConfig.id == config_id).first()
    if not config:
        raise HTTPException(status_code=404, detail="Region config not found")
    if not ctx.can_access_region(config.region):
        raise HTTPException(status_code=403, detail="Region config is outside your region")
    return config


def _prize_in_scope(db: Session, ctx: AuthContext, prize_id: UUID) -> MonthlyRegionPrize:
    prize = db.query(MonthlyRegionPrize).filter(MonthlyRegionPrize.id == prize_id).first()
    if not prize:
        raise HTTPException(status_code=404, detail="Monthly prize not found")
    _config_in_scope(db, ctx, prize.region_config_id)
    return prize


def _validate_prize_slot(db: Session, region_config_id, month, year, rank, prize_id: UUID | None = None):
    q = db.query(MonthlyRegionPrize.id).filter(
        MonthlyRegionPrize.region_config_id == region_config_id,
        MonthlyRegionPrize.month == month,
        MonthlyRegionPrize.year == year,
        MonthlyRegionPrize.rank == rank,
    )
    if prize_id is not None:
        q = q.filter(MonthlyRegionPrize.id != prize_id)
    if q.first():
        raise HTTPException(status_code=409, detail="A prize already exists for this rank and period")


@router.get("", response_model=list[MonthlyPrizeOut])
def list_monthly_prizes(
    month: int | None = None,
    year: int | None = None,
    region: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return list_prizes(db, month, year, ctx.scope_region(region))


@router.get("/standings", response_model=list[MonthlyStandingOut])
def get_monthly_standings(
    region_config_id: UUID,
    month: int,
    year: int,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if month < 1 or month > 12:
        raise HTTPException(status_code=400, detail="month must be between 1 and 12")
    config = _config_in_scope(db, ctx, region_config_id)
    return monthly_standings(db, config, month, year)


@router.post("", response_model=MonthlyPrizeOut)
def create_monthly_prize(
    payload: MonthlyPrizeCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _config_in_scope(db, ctx, payload.region_config_id)
    _validate_prize_slot(db, payload.region_config_id, payload.month, payload.year, payload.rank)

    prize = MonthlyRegionPrize(**payload.model_dump())
    db.add(prize)
    db.commit()
    db.refresh(prize)
    return prize


@router.patch("/{prize_id}", response_model=MonthlyPrizeOut)
def update_monthly_prize(
    prize_id: UUID,
    payload: MonthlyPrizeUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    prize = _prize_in_scope(db, ctx, prize_id)
    data = payload.model_dump(exclude_unset=True)
    if {"month", "year", "rank"} & data.keys():
        _validate_prize_slot(
            db,
            prize.region_config_id,
            data.get("month", prize.month),
            data.get("year", prize.year),
            data.get("rank", prize.rank),
            prize_id=prize.id,
        )

    for k, v in data.items():
        setattr(prize, k, v)

    db.commit()
    db.refresh(prize)
    return prize


@router.delete("/{prize_id}")
def delete_monthly_prize(prize_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    prize = _prize_in_scope(db, ctx, prize_id)
    db.delete(prize)
    db.commit()
    return {"deleted": True}
