from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import PatchModel


class PointsHistoryOut(BaseModel):
    id: UUID
    user_id: UUID
    deal_id: Optional[UUID] = None
    reward_id: Optional[UUID] = None
    points: int
    description: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PointsConfigUpdate(PatchModel):
    new_customer_rate: Optional[int] = Field(default=None, gt=0)
    renewal_rate: Optional[int] = Field(default=None, gt=0)
    default_new_customer_goal_rate: Optional[int] = Field(default=None, gt=0)
    default_renewal_goal_rate: Optional[int] = Field(default=None, gt=0)
    grand_prize_threshold: Optional[int] = Field(default=None, ge=0)


class PointsConfigOut(BaseModel):
    id: Optional[UUID] = None
    region: str
    new_customer_rate: int
    renewal_rate: int
    default_new_customer_goal_rate: int
    default_renewal_goal_rate: int
    grand_prize_threshold: int
    updated_by: Optional[UUID] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserStatsOut(BaseModel):
    total_points: int
    available_points: int
    total_deals: int
    pending_deals: int
    redeemed_rewards: int
