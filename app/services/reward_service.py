import logging
from datetime import datetime

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.reward import Reward
from app.models.user import User
from app.models.user_reward import UserReward
from app.services.notification_service import notify, notify_admins_of_region
from app.services.wallet_service import add_points_entry, get_available_points


logger = logging.getLogger(__name__)

OPEN_STATUSES = ("pending", "approved")
SHIPMENT_STEPS = {"pending": "shipped", "shipped": "delivered"}


# ============================================================
# REDEEM REWARD
# ============================================================
def redeem_reward(db: Session, user: User, reward_id, delivery_address: str | None = None) -> UserReward:
    reward = db.query(Reward).filter(Reward.id == reward_id, Reward.is_active.is_(True)).first()
    if not reward:
        raise HTTPException(status_code=404, detail="Reward not found")

    if reward.region and reward.region != user.region:
        raise HTTPException(status_code=403, detail="Reward is not available in your region")

    if reward.stock_quantity is not None and reward.stock_quantity <= 0:
        raise HTTPException(status_code=400, detail="Out of stock")

    # check-then-insert without a lock: two concurrent requests can both pass
    existing = (
        db.query(UserReward.id)
        .filter(
            UserReward.user_id == user.id,
            UserReward.reward_id == reward.id,
            UserReward.status.in_(OPEN_STATUSES),
        )
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="You already have a pending redemption for this reward")

    available = get_available_points(db, user.id)
    if available < reward.points_cost:
        raise HTTPException(status_code=400, detail="Insufficient points")

    user_reward = UserReward(
        user_id=user.id,
        reward_id=reward.id,
        status="pending",
        shipment_status="pending",
        delivery_address=delivery_address,
    )
    db.add(user_reward)
    db.flush()

    notify(db, user.id, "Redemption requested", f"Your request for {reward.name} is awaiting approval.")
    notify_admins_of_region(
        db,
        user.region,
        "New reward redemption",
        f"{user.first_name} {user.last_name} requested {reward.name}.",
    )

    logger.info(
        "reward redemption requested",
        extra={"user_id": str(user.id), "reward_id": str(reward.id), "available": available},
    )
    return user_reward


def get_redemption_or_404(db: Session, redemption_id) -> UserReward:
    user_reward = db.query(UserReward).filter(UserReward.id == redemption_id).first()
    if not user_reward:
        raise HTTPException(status_code=404, detail="Redemption not found")
    return user_reward


# ============================================================
# APPROVE / REJECT
# ============================================================
def approve_redemption(db: Session, user_reward: UserReward, approver_id) -> UserReward:
    if user_reward.status != "pending":
        raise HTTPException(status_code=400, detail="Redemption is not pending")

    reward = db.query(Reward).filter(Reward.id == user_reward.reward_id).first()
    if not reward:
        raise HTTPException(status_code=404, detail="Reward not found")

    # several requests can be pending for the last unit
    if reward.stock_quantity is not None and reward.stock_quantity <= 0:
        raise HTTPException(status_code=400, detail="Out of stock")

    user_reward.status = "approved"
    user_reward.approved_by = approver_id
    user_reward.approved_at = datetime.utcnow()

    # consumption is the negative ledger row
    add_points_entry(
        db,
        user_reward.user_id,
        -reward.points_cost,
        f"Reward redeemed: {reward.name}",
        reward_id=reward.id,
    )
    if reward.stock_quantity is not None:
        reward.stock_quantity -= 1

    notify(db, user_reward.user_id, "Redemption approved", f"Your redemption of {reward.name} was approved.", "success")
    db.flush()

    logger.info(
        "reward redemption approved",
        extra={"redemption_id": str(user_reward.id), "points": -reward.points_cost},
    )
    return user_reward


def reject_redemption(db: Session, user_reward: UserReward, approver_id, reason: str | None = None) -> UserReward:
    if user_reward.status != "pending":
        raise HTTPException(status_code=400, detail="Redemption is not pending")

    user_reward.status = "rejected"
    user_reward.approved_by = approver_id
    user_reward.approved_at = datetime.utcnow()
    user_reward.rejection_reason = reason

    message = "Your redemption was rejected."
    if reason:
        message = f"Your redemption was rejected: {reason}"
    notify(db, user_reward.user_id, "Redemption rejected", message, "warning")
    db.flush()

    logger.info("reward redemption rejected", extra={"redemption_id": str(user_reward.id)})
    return user_reward


# ============================================================
# SHIPMENT
# ============================================================
def update_shipment(db: Session, user_reward: UserReward, new_status: str, actor_id) -> UserReward:
    if user_reward.status != "approved":
        raise HTTPException(status_code=400, detail="Redemption must be approved before shipment")

    expected = SHIPMENT_STEPS.get(user_reward.shipment_status)
    if new_status != expected:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid shipment transition: {user_reward.shipment_status} -> {new_status}",
        )

    now = datetime.utcnow()
    user_reward.shipment_status = new_status
    if new_status == "shipped":
        user_reward.shipped_at = now
        user_reward.shipped_by = actor_id
        notify(db, user_reward.user_id, "Reward shipped", "Your reward is on its way.")
    else:
        user_reward.delivered_at = now
        user_reward.status = "delivered"
        notify(db, user_reward.user_id, "Reward delivered", "Your reward was delivered.", "success")

    db.flush()
    logger.info(
        "reward shipment updated",
        extra={"redemption_id": str(user_reward.id), "shipment_status": new_status},
    )
    return user_reward
