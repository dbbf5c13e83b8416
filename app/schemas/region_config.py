from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import PatchModel, UtcDatetime
from app.schemas.user import Region


class RegionConfigCreate(BaseModel):
    region: Region
    category: str = Field(min_length=1)
    subcategory: Optional[str] = None
    name: Optional[str] = None
    reward_id: Optional[UUID] = None
    new_customer_goal_rate: Optional[int] = Field(default=None, gt=0)
    renewal_goal_rate: Optional[int] = Field(default=None, gt=0)
    monthly_goal_target: int = Field(default=10, ge=0)
    is_active: bool = True
    expiration_date: Optional[UtcDatetime] = None

    @field_validator("subcategory", "reward_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class RegionConfigUpdate(PatchModel):
    nullable_fields = frozenset({"subcategory", "name", "reward_id", "expiration_date"})

    category: Optional[str] = None
    subcategory: Optional[str] = None
    name: Optional[str] = None
    reward_id: Optional[UUID] = None
    new_customer_goal_rate: Optional[int] = Field(default=None, gt=0)
    renewal_goal_rate: Optional[int] = Field(default=None, gt=0)
    monthly_goal_target: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    expiration_date: Optional[UtcDatetime] = None

    @field_validator("subcategory", "reward_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class RegionConfigOut(BaseModel):
    id: UUID
    region: str
    category: str
    subcategory: Optional[str] = None
    name: str
    reward_id: Optional[UUID] = None
    new_customer_goal_rate: int
    renewal_goal_rate: int
    monthly_goal_target: int
    is_active: bool
    expiration_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubcategoryIn(BaseModel):
    region: Region
    level: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
