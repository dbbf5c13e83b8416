from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import PatchModel
from app.schemas.user import Region


class RewardCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    points_cost: int = Field(gt=0)
    category: str
    region: Optional[Region] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    estimated_delivery_days: int = Field(default=15, ge=0)
    is_active: bool = True


class RewardUpdate(PatchModel):
    nullable_fields = frozenset({"description", "region", "stock_quantity", "image_url"})

    name: Optional[str] = None
    description: Optional[str] = None
    points_cost: Optional[int] = Field(default=None, gt=0)
    category: Optional[str] = None
    region: Optional[Region] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    estimated_delivery_days: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class RewardOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    points_cost: int
    category: str
    region: Optional[str] = None
    stock_quantity: Optional[int] = None
    image_url: Optional[str] = None
    estimated_delivery_days: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RedeemIn(BaseModel):
    delivery_address: Optional[str] = None


class RedemptionRejectIn(BaseModel):
    reason: Optional[str] = None


class ShipmentUpdateIn(BaseModel):
    shipment_status: Literal["pending", "shipped", "delivered"]


class UserRewardOut(BaseModel):
    id: UUID
    user_id: UUID
    reward_id: UUID
    status: str
    shipment_status: str
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    delivery_address: Optional[str] = None
    shipped_by: Optional[UUID] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    redeemed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserRewardDetailOut(UserRewardOut):
    reward_name: Optional[str] = None
    points_cost: Optional[int] = None
    image_url: Optional[str] = None
    username: Optional[str] = None
    user_first_name: Optional[str] = None
    user_last_name: Optional[str] = None
    user_email: Optional[str] = None
    user_region: Optional[str] = None
