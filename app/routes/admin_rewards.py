from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, filter_by_region, require_admin
from app.models.region_config import RegionConfig
from app.models.reward import Reward
from app.models.user import User
from app.models.user_reward import UserReward
from app.schemas.reward import (
    RedemptionRejectIn,
    RewardCreate,
    RewardOut,
    RewardUpdate,
    ShipmentUpdateIn,
    UserRewardDetailOut,
    UserRewardOut,
)
from app.services.reward_service import (
    approve_redemption,
    get_redemption_or_404,
    reject_redemption,
    update_shipment,
)


router = APIRouter(prefix="/api/admin/rewards", tags=["admin-rewards"])


def _redemption_rows(db: Session, ctx: AuthContext, status: str | None = None):
    q = (
        db.query(UserReward, User, Reward)
        .join(User, UserReward.user_id == User.id)
        .join(Reward, UserReward.reward_id == Reward.id)
    )
    q = filter_by_region(q, User.region, ctx.scope_region())
    if status:
        q = q.filter(UserReward.status == status)

    result = []
    for user_reward, user, reward in q.order_by(UserReward.redeemed_at.desc()).all():
        out = UserRewardDetailOut.model_validate(user_reward)
        out.reward_name = reward.name
        out.points_cost = reward.points_cost
        out.image_url = reward.image_url
        out.username = user.username
        out.user_first_name = user.first_name
        out.user_last_name = user.last_name
        out.user_email = user.email
        out.user_region = user.region
        result.append(out)
    return result


def _redemption_in_scope(db: Session, ctx: AuthContext, redemption_id: UUID) -> UserReward:
    user_reward = get_redemption_or_404(db, redemption_id)
    if ctx.is_regional_admin:
        owner_region = db.query(User.region).filter(User.id == user_reward.user_id).scalar()
        if not ctx.can_access_region(owner_region):
            raise HTTPException(status_code=403, detail="Redemption is outside your region")
    return user_reward


def _get_reward_or_404(db: Session, reward_id: UUID) -> Reward:
    reward = db.query(Reward).filter(Reward.id == reward_id).first()
    if not reward:
        raise HTTPException(status_code=404, detail="Reward not found")
    return reward


# ─── redemptions ─────────────────────────────────────────────────
@router.get("/pending", response_model=list[UserRewardDetailOut])
def list_pending_redemptions(ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    return _redemption_rows(db, ctx, "pending")


@router.get("/redemptions", response_model=list[UserRewardDetailOut])
def list_redemptions(
    status: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _redemption_rows(db, ctx, status)


@router.post("/{redemption_id}/approve", response_model=UserRewardOut)
def post_approve_redemption(
    redemption_id: UUID,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user_reward = _redemption_in_scope(db, ctx, redemption_id)
    approve_redemption(db, user_reward, ctx.user_id)
    db.commit()
    db.refresh(user_reward)
    return user_reward


@router.post("/{redemption_id}/reject", response_model=UserRewardOut)
def post_reject_redemption(
    redemption_id: UUID,
    payload: RedemptionRejectIn | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user_reward = _redemption_in_scope(db, ctx, redemption_id)
    reject_redemption(db, user_reward, ctx.user_id, payload.reason if payload else None)
    db.commit()
    db.refresh(user_reward)
    return user_reward


@router.put("/{redemption_id}/shipment", response_model=UserRewardOut)
def put_shipment_status(
    redemption_id: UUID,
    payload: ShipmentUpdateIn,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user_reward = _redemption_in_scope(db, ctx, redemption_id)
    update_shipment(db, user_reward, payload.shipment_status, ctx.user_id)
    db.commit()
    db.refresh(user_reward)
    return user_reward


# ─── catalog ─────────────────────────────────────────────────────
@router.get("", response_model=list[RewardOut])
def list_all_rewards(
    active: bool | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Reward)
    if active is not None:
        q = q.filter(Reward.is_active.is_(active))
    return q.order_by(Reward.created_at.desc()).all()


@router.post("", response_model=RewardOut)
def create_reward(payload: RewardCreate, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    if ctx.is_regional_admin and payload.region != ctx.region:
        raise HTTPException(status_code=403, detail="Regional admins can only create rewards for their region")
    reward = Reward(**payload.model_dump())
    db.add(reward)
    db.commit()
    db.refresh(reward)
    return reward


@router.patch("/{reward_id}", response_model=RewardOut)
def update_reward(
    reward_id: UUID,
    payload: RewardUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    reward = _get_reward_or_404(db, reward_id)
    if ctx.is_regional_admin and reward.region != ctx.region:
        raise HTTPException(status_code=403, detail="Reward is outside your region")

    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(reward, k, v)

    db.commit()
    db.refresh(reward)
    return reward


@router.delete("/{reward_id}")
def delete_reward(reward_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    reward = _get_reward_or_404(db, reward_id)
    if ctx.is_regional_admin and reward.region != ctx.region:
        raise HTTPException(status_code=403, detail="Reward is outside your region")
    if db.query(UserReward.id).filter(UserReward.reward_id == reward.id).first():
        raise HTTPException(status_code=409, detail="Reward has redemptions; deactivate it instead")

    db.query(RegionConfig).filter(RegionConfig.reward_id == reward.id).update(
        {RegionConfig.reward_id: None}, synchronize_session=False
    )
    db.delete(reward)
    db.commit()
    return {"deleted": True}
