import logging
import uuid
from datetime import datetime

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.deal import Deal
from app.models.grand_prize_criteria import GrandPrizeCriteria
from app.models.grand_prize_winner import GrandPrizeWinner
from app.models.user import User


logger = logging.getLogger(__name__)


def get_criteria_or_404(db: Session, criteria_id) -> GrandPrizeCriteria:
    criteria = db.query(GrandPrizeCriteria).filter(GrandPrizeCriteria.id == criteria_id).first()
    if not criteria:
        raise HTTPException(status_code=404, detail="Criteria not found")
    return criteria


def deactivate_other_criteria(db: Session, criteria: GrandPrizeCriteria):
    """Only one active criteria per region scope."""
    (
        db.query(GrandPrizeCriteria)
        .filter(GrandPrizeCriteria.id != criteria.id)
        .filter(GrandPrizeCriteria.region == criteria.region)
        .filter(GrandPrizeCriteria.is_active.is_(True))
        .update({GrandPrizeCriteria.is_active: False}, synchronize_session=False)
    )
    db.flush()


def _score(criteria: GrandPrizeCriteria, row: dict, max_points: int, max_deals: int) -> float:
    if criteria.criteria_type == "points":
        return float(row["points"])
    if criteria.criteria_type == "deals":
        return float(row["deals"])
    if criteria.criteria_type == "top_goals":
        return float(row["goals"])

    # combined: both sides normalized to 0..100 over the qualifying set
    norm_points = (row["points"] / max_points * 100) if max_points else 0.0
    norm_deals = (row["deals"] / max_deals * 100) if max_deals else 0.0
    score = criteria.points_weight / 100 * norm_points + criteria.deals_weight / 100 * norm_deals
    return round(score, 4)


def compute_ranking(db: Session, criteria: GrandPrizeCriteria) -> list[dict]:
    stats = (
        db.query(
            Deal.user_id,
            func.coalesce(func.sum(Deal.points_earned), 0),
            func.count(Deal.id),
            func.coalesce(func.sum(Deal.goals_earned), 0),
        )
        .filter(Deal.status == "approved")
        .filter(Deal.approved_at >= criteria.start_date)
        .filter(Deal.approved_at <= criteria.end_date)
        .group_by(Deal.user_id)
        .all()
    )
    if not stats:
        return []

    users = {u.id: u for u in db.query(User).filter(User.id.in_([s[0] for s in stats])).all()}

    rows = []
    for user_id, points, deals, goals in stats:
        user = users.get(user_id)
        if not user:
            continue
        if criteria.region and criteria.region != "all" and user.region != criteria.region:
            continue
        if criteria.market_segment and user.region_category != criteria.market_segment:
            continue
        if criteria.subregion and user.region_subcategory != criteria.subregion:
            continue
        points = int(points or 0)
        deals = int(deals or 0)
        if criteria.min_points and points < criteria.min_points:
            continue
        if criteria.min_deals and deals < criteria.min_deals:
            continue
        rows.append({"user": user, "points": points, "deals": deals, "goals": round(float(goals or 0), 2)})

    max_points = max((r["points"] for r in rows), default=0)
    max_deals = max((r["deals"] for r in rows), default=0)
    for r in rows:
        r["score"] = _score(criteria, r, max_points, max_deals)

    rows.sort(key=lambda r: (-r["score"], -r["points"], -r["deals"], r["user"].created_at or datetime.min))

    ranking = []
    for position, r in enumerate(rows, start=1):
        user = r["user"]
        ranking.append(
            {
                "rank": position,
                "user_id": user.id,
                "username": user.username,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "region": user.region,
                "points": r["points"],
                "deals": r["deals"],
                "goals": r["goals"],
                "score": r["score"],
            }
        )
    return ranking


def run_criteria(db: Session, criteria: GrandPrizeCriteria) -> list[GrandPrizeWinner]:
    """Persist the current top-N as a new, immutable snapshot set."""
    ranking = compute_ranking(db, criteria)
    run_id = uuid.uuid4()
    awarded_at = datetime.utcnow()

    winners = []
    for entry in ranking[: criteria.top_n]:
        winner = GrandPrizeWinner(
            criteria_id=criteria.id,
            run_id=run_id,
            user_id=entry["user_id"],
            points=entry["points"],
            deals=entry["deals"],
            goals=entry["goals"],
            score=entry["score"],
            rank=entry["rank"],
            awarded_at=awarded_at,
        )
        db.add(winner)
        winners.append(winner)
    db.flush()

    logger.info(
        "grand prize run",
        extra={
            "criteria_id": str(criteria.id),
            "run_id": str(run_id),
            "ranked": len(ranking),
            "winners": len(winners),
        },
    )
    return winners


def latest_winners(db: Session, criteria_id) -> list[GrandPrizeWinner]:
    last = (
        db.query(GrandPrizeWinner)
        .filter(GrandPrizeWinner.criteria_id == criteria_id)
        .order_by(GrandPrizeWinner.awarded_at.desc())
        .first()
    )
    if not last:
        return []
    return (
        db.query(GrandPrizeWinner)
        .filter(GrandPrizeWinner.run_id == last.run_id)
        .order_by(GrandPrizeWinner.rank.asc())
        .all()
    )
