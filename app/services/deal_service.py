import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.deal import Deal
from app.models.goals_history import GoalsHistory
from app.models.points_history import PointsHistory
from app.models.region_config import RegionConfig
from app.models.user import User
from app.services.notification_service import notify
from app.services.region_service import (
    default_goal_rate_for,
    find_config_for_segment,
    is_config_active,
    points_rate_for,
)
from app.services.wallet_service import add_points_entry


logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def compute_goals(deal_value, goal_rate) -> Decimal:
    value = Decimal(str(deal_value))
    return (value / Decimal(goal_rate)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def compute_points(deal_value, points_rate) -> int:
    value = Decimal(str(deal_value))
    return int(value // Decimal(points_rate))


def resolve_goal_rate(db: Session, deal: Deal, owner: User):
    """Goal rate for a deal and the config it came from (None when a default applied)."""
    config = None
    if deal.region_config_id:
        config = db.query(RegionConfig).filter(RegionConfig.id == deal.region_config_id).first()
        if config and not is_config_active(config):
            config = None
    if config is None:
        config = find_config_for_segment(db, owner.region, owner.region_category, owner.region_subcategory)

    if config is not None:
        rate = config.renewal_goal_rate if deal.deal_type == "renewal" else config.new_customer_goal_rate
        return rate, config
    return default_goal_rate_for(db, owner.region, deal.deal_type), None


def get_deal_or_404(db: Session, deal_id) -> Deal:
    deal = db.query(Deal).filter(Deal.id == deal_id).first()
    if not deal:
        raise HTTPException(status_code=404, detail="Deal not found")
    return deal


def approve_deal(db: Session, deal: Deal, approver_id) -> Deal:
    if deal.status != "pending":
        raise HTTPException(status_code=400, detail="Deal is not pending")

    owner = db.query(User).filter(User.id == deal.user_id).first()
    if not owner:
        raise HTTPException(status_code=404, detail="Deal owner not found")

    goal_rate, config = resolve_goal_rate(db, deal, owner)
    goals = compute_goals(deal.deal_value, goal_rate)
    points = compute_points(deal.deal_value, points_rate_for(db, owner.region, deal.deal_type))

    now = datetime.utcnow()
    deal.status = "approved"
    deal.goals_earned = goals
    deal.points_earned = points
    deal.approved_by = approver_id
    deal.approved_at = now

    if points > 0:
        add_points_entry(
            db,
            owner.id,
            points,
            f"Points earned for deal: {deal.product_name}",
            deal_id=deal.id,
        )

    if goals > 0:
        db.add(
            GoalsHistory(
                user_id=owner.id,
                deal_id=deal.id,
                region_config_id=config.id if config else None,
                goals=goals,
                month=now.month,
                year=now.year,
                description=f"Goals earned for deal: {deal.product_name}",
            )
        )

    notify(
        db,
        owner.id,
        "Deal approved",
        f"Your deal {deal.product_name} was approved: {goals} goals, {points} points.",
        "success",
    )
    db.flush()

    logger.info(
        "deal approved",
        extra={
            "deal_id": str(deal.id),
            "goal_rate": goal_rate,
            "goals": str(goals),
            "points": points,
            "region_config_id": str(config.id) if config else None,
        },
    )
    return deal


def reject_deal(db: Session, deal: Deal, approver_id) -> Deal:
    if deal.status != "pending":
        raise HTTPException(status_code=400, detail="Deal is not pending")

    deal.status = "rejected"
    notify(db, deal.user_id, "Deal rejected", f"Your deal {deal.product_name} was rejected.", "warning")
    db.flush()

    logger.info("deal rejected", extra={"deal_id": str(deal.id), "by": str(approver_id)})
    return deal


def delete_deal_records(db: Session, deal: Deal):
    db.query(PointsHistory).filter(PointsHistory.deal_id == deal.id).delete(synchronize_session=False)
    db.query(GoalsHistory).filter(GoalsHistory.deal_id == deal.id).delete(synchronize_session=False)
    db.delete(deal)
    db.flush()


def deal_snapshot(deal: Deal) -> dict:
    return {
        "id": str(deal.id),
        "user_id": str(deal.user_id),
        "product_type": deal.product_type,
        "product_name": deal.product_name,
        "deal_value": str(deal.deal_value),
        "deal_type": deal.deal_type,
        "status": deal.status,
        "points_earned": deal.points_earned,
        "goals_earned": str(deal.goals_earned),
        "license_agreement_number": deal.license_agreement_number,
        "close_date": deal.close_date.isoformat() if deal.close_date else None,
    }


def recalculate_all_points(db: Session) -> dict:
    """Rewrite points of every approved deal with current rates; clear points on other deals."""
    updated = 0
    errors = 0
    for deal in db.query(Deal).all():
        try:
            if deal.status != "approved":
                if deal.points_earned:
                    deal.points_earned = 0
                    db.query(PointsHistory).filter(PointsHistory.deal_id == deal.id).delete(
                        synchronize_session=False
                    )
                    updated += 1
                continue

            owner = db.query(User).filter(User.id == deal.user_id).first()
            if not owner:
                errors += 1
                continue

            points = compute_points(deal.deal_value, points_rate_for(db, owner.region, deal.deal_type))
            if points == deal.points_earned:
                continue

            deal.points_earned = points
            db.query(PointsHistory).filter(PointsHistory.deal_id == deal.id).delete(synchronize_session=False)
            if points > 0:
                add_points_entry(
                    db,
                    owner.id,
                    points,
                    f"Points recalculated for deal: {deal.product_name}",
                    deal_id=deal.id,
                )
            updated += 1
        except ArithmeticError:
            logger.exception("points recalculation failed", extra={"deal_id": str(deal.id)})
            errors += 1

    db.flush()
    logger.info("recalculated deal points", extra={"updated": updated, "errors": errors})
    return {"updated": updated, "errors": errors}
