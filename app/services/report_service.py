from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.deal import Deal
from app.models.points_history import PointsHistory
from app.models.region_config import RegionConfig
from app.models.reward import Reward
from app.models.user import User
from app.models.user_reward import UserReward
from app.schemas.common import to_naive_utc
from app.schemas.region_catalog import REGIONS


def _window(q, column, start_date: datetime | None, end_date: datetime | None):
    if start_date is not None:
        q = q.filter(column >= to_naive_utc(start_date))
    if end_date is not None:
        q = q.filter(column <= to_naive_utc(end_date))
    return q


def _user_row(user: User) -> dict:
    return {
        "user_id": user.id,
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "country": user.country,
        "region": user.region,
    }


def summary(db: Session, region: str | None, start_date=None, end_date=None) -> dict:
    users_q = db.query(func.count(User.id)).filter(User.role == "user")
    if region is not None:
        users_q = users_q.filter(User.region == region)

    deals_q = db.query(Deal.status, func.count(Deal.id)).join(User, Deal.user_id == User.id)
    if region is not None:
        deals_q = deals_q.filter(User.region == region)
    deals_q = _window(deals_q, Deal.created_at, start_date, end_date)
    deals_by_status = {status: count for status, count in deals_q.group_by(Deal.status).all()}

    points_q = (
        db.query(func.coalesce(func.sum(PointsHistory.points), 0))
        .join(User, PointsHistory.user_id == User.id)
        .filter(PointsHistory.points > 0)
    )
    if region is not None:
        points_q = points_q.filter(User.region == region)
    points_q = _window(points_q, PointsHistory.created_at, start_date, end_date)

    redemptions_q = db.query(UserReward.status, func.count(UserReward.id)).join(User, UserReward.user_id == User.id)
    if region is not None:
        redemptions_q = redemptions_q.filter(User.region == region)
    redemptions_q = _window(redemptions_q, UserReward.redeemed_at, start_date, end_date)
    redemptions_by_status = {status: count for status, count in redemptions_q.group_by(UserReward.status).all()}

    return {
        "region": region or "all",
        "total_users": int(users_q.scalar() or 0),
        "deals_by_status": deals_by_status,
        "total_deals": sum(deals_by_status.values()),
        "points_awarded": int(points_q.scalar() or 0),
        "redemptions_by_status": redemptions_by_status,
    }


def user_ranking(db: Session, region: str | None, start_date=None, end_date=None) -> list[dict]:
    q = (
        db.query(User, func.coalesce(func.sum(Deal.points_earned), 0), func.count(Deal.id))
        .join(Deal, Deal.user_id == User.id)
        .filter(User.role == "user", Deal.status == "approved")
    )
    if region is not None:
        q = q.filter(User.region == region)
    q = _window(q, Deal.approved_at, start_date, end_date)

    rows = [(user, int(points or 0), int(deals or 0)) for user, points, deals in q.group_by(User.id).all()]
    rows = [r for r in rows if r[1] > 0]
    rows.sort(key=lambda r: (-r[1], -r[2]))
    return [
        {**_user_row(user), "rank": rank, "total_points": points, "total_deals": deals}
        for rank, (user, points, deals) in enumerate(rows, start=1)
    ]


def reward_redemptions(db: Session, region: str | None, start_date=None, end_date=None) -> list[dict]:
    q = (
        db.query(UserReward, User, Reward)
        .join(User, UserReward.user_id == User.id)
        .join(Reward, UserReward.reward_id == Reward.id)
    )
    if region is not None:
        q = q.filter(User.region == region)
    q = _window(q, UserReward.redeemed_at, start_date, end_date)

    return [
        {
            **_user_row(user),
            "redemption_id": ur.id,
            "reward_name": reward.name,
            "points_cost": reward.points_cost,
            "status": ur.status,
            "shipment_status": ur.shipment_status,
            "redeemed_at": ur.redeemed_at,
            "approved_at": ur.approved_at,
        }
        for ur, user, reward in q.order_by(UserReward.redeemed_at.desc()).all()
    ]


def deals_per_user(db: Session, region: str | None, start_date=None, end_date=None) -> list[dict]:
    q = (
        db.query(User, func.count(Deal.id), func.coalesce(func.sum(Deal.deal_value), 0))
        .join(Deal, Deal.user_id == User.id)
        .filter(User.role == "user", Deal.status == "approved")
    )
    if region is not None:
        q = q.filter(User.region == region)
    q = _window(q, Deal.created_at, start_date, end_date)

    result = []
    for user, total_deals, total_sales in q.group_by(User.id).all():
        total_sales = float(total_sales or 0)
        average = round(total_sales / total_deals, 2) if total_deals else 0.0
        result.append(
            {
                **_user_row(user),
                "total_deals": int(total_deals),
                "total_sales": round(total_sales, 2),
                "average_deal_size": average,
            }
        )
    result.sort(key=lambda r: -r["total_sales"])
    return result


def top_scorers(db: Session, region: str | None, limit: int = 10) -> list[dict]:
    points = func.coalesce(func.sum(PointsHistory.points), 0)
    q = (
        db.query(User, points.label("points"))
        .outerjoin(PointsHistory, PointsHistory.user_id == User.id)
        .filter(User.role == "user")
    )
    if region is not None:
        q = q.filter(User.region == region)
    rows = q.group_by(User.id).having(points > 0).order_by(points.desc()).limit(limit).all()
    return [{**_user_row(user), "points": int(total)} for user, total in rows]


def region_stats(db: Session, region: str | None) -> list[dict]:
    regions = [region] if region is not None else REGIONS
    stats = []
    for code in regions:
        users = db.query(func.count(User.id)).filter(User.region == code, User.role == "user").scalar() or 0
        active = (
            db.query(func.count(User.id))
            .filter(User.region == code, User.role == "user", User.is_active.is_(True), User.is_approved.is_(True))
            .scalar()
            or 0
        )
        deals = db.query(func.count(Deal.id)).join(User, Deal.user_id == User.id).filter(User.region == code).scalar() or 0
        configs = db.query(RegionConfig).filter(RegionConfig.region == code).all()
        stats.append(
            {
                "region": code,
                "users": int(users),
                "active_users": int(active),
                "deals": int(deals),
                "configs": len(configs),
                "monthly_goal_target": sum(c.monthly_goal_target for c in configs if c.is_active),
            }
        )
    return stats
