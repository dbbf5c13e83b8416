from sqlalchemy.orm import Session
from sqlalchemy import func
from app.models.points_history import PointsHistory


def get_points_balance(db: Session, user_id) -> int:
    balance = (
        db.query(func.coalesce(func.sum(PointsHistory.points), 0))
        .filter(PointsHistory.user_id == user_id)
        .scalar()
    )
    return int(balance or 0)


def get_available_points(db: Session, user_id) -> int:
    """Spendable points, derived from the ledger at read time and never negative."""
    return max(0, get_points_balance(db, user_id))


def get_lifetime_points(db: Session, user_id) -> int:
    earned = (
        db.query(func.coalesce(func.sum(PointsHistory.points), 0))
        .filter(PointsHistory.user_id == user_id, PointsHistory.points > 0)
        .scalar()
    )
    return int(earned or 0)


def add_points_entry(db: Session, user_id, points: int, description: str, deal_id=None, reward_id=None):
    entry = PointsHistory(
        user_id=user_id,
        deal_id=deal_id,
        reward_id=reward_id,
        points=points,
        description=description,
    )
    db.add(entry)
    db.flush()
    return entry
