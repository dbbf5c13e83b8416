from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, require_admin
from app.services import report_service


router = APIRouter(prefix="/api/admin", tags=["admin-reports"])


@router.get("/reports")
def get_reports_summary(
    region: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return report_service.summary(db, ctx.scope_region(region), start_date, end_date)


@router.get("/reports/user-ranking")
def get_user_ranking(
    region: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return report_service.user_ranking(db, ctx.scope_region(region), start_date, end_date)


@router.get("/reports/reward-redemptions")
def get_reward_redemptions(
    region: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return report_service.reward_redemptions(db, ctx.scope_region(region), start_date, end_date)


@router.get("/reports/deals-per-user")
def get_deals_per_user(
    region: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return report_service.deals_per_user(db, ctx.scope_region(region), start_date, end_date)


@router.get("/top-scorers")
def get_top_scorers(
    region: str | None = None,
    limit: int = 10,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    limit = max(1, min(limit, 100))
    return report_service.top_scorers(db, ctx.scope_region(region), limit)
