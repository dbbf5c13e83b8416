from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context
from app.models.deal import Deal
from app.models.points_history import PointsHistory
from app.models.user_reward import UserReward
from app.schemas.points import PointsHistoryOut, UserStatsOut
from app.schemas.user import LeaderboardEntry
from app.services.report_service import top_scorers
from app.services.wallet_service import get_available_points, get_lifetime_points


router = APIRouter(prefix="/api", tags=["users"])


@router.get("/users/stats", response_model=UserStatsOut)
def get_user_stats(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    total_deals = db.query(func.count(Deal.id)).filter(Deal.user_id == ctx.user_id).scalar() or 0
    pending_deals = (
        db.query(func.count(Deal.id)).filter(Deal.user_id == ctx.user_id, Deal.status == "pending").scalar() or 0
    )
    redeemed = (
        db.query(func.count(UserReward.id))
        .filter(UserReward.user_id == ctx.user_id, UserReward.status.in_(["approved", "delivered"]))
        .scalar()
        or 0
    )
    return {
        "total_points": get_lifetime_points(db, ctx.user_id),
        "available_points": get_available_points(db, ctx.user_id),
        "total_deals": total_deals,
        "pending_deals": pending_deals,
        "redeemed_rewards": redeemed,
    }


@router.get("/users/leaderboard", response_model=list[LeaderboardEntry])
def get_leaderboard(
    limit: int = 5,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    limit = max(1, min(limit, 100))
    return [
        {
            "user_id": row["user_id"],
            "username": row["username"],
            "first_name": row["first_name"],
            "last_name": row["last_name"],
            "region": row["region"],
            "total_points": row["points"],
        }
        for row in top_scorers(db, None, limit)
    ]


@router.get("/points/history", response_model=list[PointsHistoryOut])
def list_points_history(
    limit: int = 100,
    offset: int = 0,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    limit = max(1, min(limit, 500))
    offset = max(0, offset)
    return (
        db.query(PointsHistory)
        .filter(PointsHistory.user_id == ctx.user_id)
        .order_by(PointsHistory.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
