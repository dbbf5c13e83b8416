from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import PatchModel, UtcDatetime


class MonthlyPrizeCreate(BaseModel):
    region_config_id: UUID
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000)
    rank: int = Field(default=1, ge=1)
    prize_name: str = Field(min_length=1)
    prize_description: Optional[str] = None
    prize_value: Optional[int] = Field(default=None, ge=0)
    goal_target: int = Field(default=0, ge=0)
    redemption_start_date: Optional[UtcDatetime] = None
    redemption_end_date: Optional[UtcDatetime] = None
    is_active: bool = True


class MonthlyPrizeUpdate(PatchModel):
    nullable_fields = frozenset({"prize_description", "prize_value", "redemption_start_date", "redemption_end_date"})

    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=2000)
    rank: Optional[int] = Field(default=None, ge=1)
    prize_name: Optional[str] = None
    prize_description: Optional[str] = None
    prize_value: Optional[int] = Field(default=None, ge=0)
    goal_target: Optional[int] = Field(default=None, ge=0)
    redemption_start_date: Optional[UtcDatetime] = None
    redemption_end_date: Optional[UtcDatetime] = None
    is_active: Optional[bool] = None


class MonthlyPrizeOut(BaseModel):
    id: UUID
    region_config_id: UUID
    month: int
    year: int
    rank: int
    prize_name: str
    prize_description: Optional[str] = None
    prize_value: Optional[int] = None
    goal_target: int
    redemption_start_date: Optional[datetime] = None
    redemption_end_date: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MonthlyStandingOut(BaseModel):
    position: int
    user_id: UUID
    username: str
    first_name: str
    last_name: str
    goals: float
    qualified: bool
