from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context, get_current_user
from app.models.reward import Reward
from app.models.user import User
from app.models.user_reward import UserReward
from app.schemas.reward import RedeemIn, RewardOut, UserRewardDetailOut, UserRewardOut
from app.services.reward_service import redeem_reward


router = APIRouter(prefix="/api", tags=["rewards"])


@router.get("/rewards", response_model=list[RewardOut])
def list_rewards(
    response: Response,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    response.headers["Cache-Control"] = "no-store"
    q = db.query(Reward).filter(Reward.is_active.is_(True))
    if ctx.role in ("user", "regional-admin"):
        q = q.filter(or_(Reward.region.is_(None), Reward.region == ctx.region))
    return q.order_by(Reward.points_cost.asc()).all()


@router.post("/rewards/{reward_id}/redeem", response_model=UserRewardOut)
def post_redeem_reward(
    reward_id: UUID,
    payload: RedeemIn | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_reward = redeem_reward(db, user, reward_id, payload.delivery_address if payload else None)
    db.commit()
    db.refresh(user_reward)
    return user_reward


@router.get("/user-rewards", response_model=list[UserRewardDetailOut])
def list_my_rewards(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    rows = (
        db.query(UserReward, Reward)
        .join(Reward, UserReward.reward_id == Reward.id)
        .filter(UserReward.user_id == ctx.user_id)
        .order_by(UserReward.redeemed_at.desc())
        .all()
    )
    result = []
    for user_reward, reward in rows:
        out = UserRewardDetailOut.model_validate(user_reward)
        out.reward_name = reward.name
        out.points_cost = reward.points_cost
        out.image_url = reward.image_url
        result.append(out)
    return result
