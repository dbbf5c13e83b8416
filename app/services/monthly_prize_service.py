from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.goals_history import GoalsHistory
from app.models.monthly_region_prize import MonthlyRegionPrize
from app.models.region_config import RegionConfig
from app.models.user import User


def list_prizes(db: Session, month: int | None, year: int | None, region: str | None):
    q = db.query(MonthlyRegionPrize).join(RegionConfig, MonthlyRegionPrize.region_config_id == RegionConfig.id)
    if region is not None:
        q = q.filter(RegionConfig.region == region)
    if month is not None:
        q = q.filter(MonthlyRegionPrize.month == month)
    if year is not None:
        q = q.filter(MonthlyRegionPrize.year == year)
    return q.order_by(
        MonthlyRegionPrize.year.desc(),
        MonthlyRegionPrize.month.desc(),
        MonthlyRegionPrize.rank.asc(),
    ).all()


def qualification_target(db: Session, config: RegionConfig, month: int, year: int) -> int:
    top_prize = (
        db.query(MonthlyRegionPrize)
        .filter(
            MonthlyRegionPrize.region_config_id == config.id,
            MonthlyRegionPrize.month == month,
            MonthlyRegionPrize.year == year,
            MonthlyRegionPrize.is_active.is_(True),
        )
        .order_by(MonthlyRegionPrize.rank.asc())
        .first()
    )
    if top_prize:
        return top_prize.goal_target
    return config.monthly_goal_target


def monthly_standings(db: Session, config: RegionConfig, month: int, year: int) -> list[dict]:
    target = qualification_target(db, config, month, year)
    rows = (
        db.query(User, func.coalesce(func.sum(GoalsHistory.goals), 0))
        .join(GoalsHistory, GoalsHistory.user_id == User.id)
        .filter(
            GoalsHistory.region_config_id == config.id,
            GoalsHistory.month == month,
            GoalsHistory.year == year,
        )
        .group_by(User.id)
        .all()
    )

    entries = sorted(
        ((user, round(float(goals or 0), 2)) for user, goals in rows),
        key=lambda e: (-e[1], e[0].username),
    )
    return [
        {
            "position": position,
            "user_id": user.id,
            "username": user.username,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "goals": goals,
            "qualified": goals >= target,
        }
        for position, (user, goals) in enumerate(entries, start=1)
    ]
