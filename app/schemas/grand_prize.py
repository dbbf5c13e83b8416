from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.schemas.common import PatchModel, UtcDatetime


CriteriaType = Literal["points", "deals", "combined", "top_goals"]


class GrandPrizeCriteriaCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    prize_description: Optional[str] = None
    criteria_type: CriteriaType = "combined"
    min_points: Optional[int] = Field(default=None, ge=0)
    min_deals: Optional[int] = Field(default=None, ge=0)
    points_weight: int = Field(default=60, ge=0, le=100)
    deals_weight: int = Field(default=40, ge=0, le=100)
    top_n: int = Field(default=1, ge=1)
    region: str = "all"
    market_segment: Optional[str] = None
    subregion: Optional[str] = None
    start_date: UtcDatetime
    end_date: UtcDatetime
    redemption_start_date: Optional[UtcDatetime] = None
    redemption_end_date: Optional[UtcDatetime] = None
    is_active: bool = True

    @model_validator(mode="after")
    def check_window_and_weights(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be after start_date")
        if self.criteria_type == "combined" and self.points_weight + self.deals_weight != 100:
            raise ValueError("points_weight + deals_weight must equal 100")
        return self


class GrandPrizeCriteriaUpdate(PatchModel):
    nullable_fields = frozenset({
        "description", "prize_description", "min_points", "min_deals",
        "market_segment", "subregion", "redemption_start_date", "redemption_end_date",
    })

    name: Optional[str] = None
    description: Optional[str] = None
    prize_description: Optional[str] = None
    criteria_type: Optional[CriteriaType] = None
    min_points: Optional[int] = Field(default=None, ge=0)
    min_deals: Optional[int] = Field(default=None, ge=0)
    points_weight: Optional[int] = Field(default=None, ge=0, le=100)
    deals_weight: Optional[int] = Field(default=None, ge=0, le=100)
    top_n: Optional[int] = Field(default=None, ge=1)
    region: Optional[str] = None
    market_segment: Optional[str] = None
    subregion: Optional[str] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    redemption_start_date: Optional[UtcDatetime] = None
    redemption_end_date: Optional[UtcDatetime] = None
    is_active: Optional[bool] = None


class GrandPrizeCriteriaOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    prize_description: Optional[str] = None
    criteria_type: str
    min_points: Optional[int] = None
    min_deals: Optional[int] = None
    points_weight: int
    deals_weight: int
    top_n: int
    region: str
    market_segment: Optional[str] = None
    subregion: Optional[str] = None
    start_date: datetime
    end_date: datetime
    redemption_start_date: Optional[datetime] = None
    redemption_end_date: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RankingEntry(BaseModel):
    rank: int
    user_id: UUID
    username: str
    first_name: str
    last_name: str
    region: Optional[str] = None
    points: int
    deals: int
    goals: float
    score: float


class GrandPrizeWinnerOut(BaseModel):
    id: UUID
    criteria_id: UUID
    run_id: UUID
    user_id: UUID
    points: int
    deals: int
    goals: float
    score: float
    rank: int
    awarded_at: Optional[datetime] = None

    class Config:
        from_attributes = True
