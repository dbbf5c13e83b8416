from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import PatchModel, UtcDatetime


ProductType = Literal["software", "hardware", "equipment"]
DealType = Literal["new_customer", "renewal"]


class DealCreate(BaseModel):
    product_type: ProductType
    product_name: str = Field(min_length=1)
    deal_value: float = Field(gt=0)
    deal_type: DealType = "new_customer"
    quantity: int = Field(default=1, ge=1)
    close_date: UtcDatetime
    client_info: Optional[str] = None
    license_agreement_number: Optional[str] = None
    region_config_id: Optional[UUID] = None


class DealUpdate(PatchModel):
    nullable_fields = frozenset({"client_info", "license_agreement_number", "region_config_id"})

    product_type: Optional[ProductType] = None
    product_name: Optional[str] = None
    deal_value: Optional[float] = Field(default=None, gt=0)
    deal_type: Optional[DealType] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    close_date: Optional[UtcDatetime] = None
    client_info: Optional[str] = None
    license_agreement_number: Optional[str] = None
    region_config_id: Optional[UUID] = None


class DealOut(BaseModel):
    id: UUID
    user_id: UUID
    region_config_id: Optional[UUID] = None
    product_type: str
    product_name: str
    deal_value: float
    deal_type: str
    quantity: int
    close_date: datetime
    client_info: Optional[str] = None
    license_agreement_number: Optional[str] = None
    status: str
    points_earned: int
    goals_earned: float
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminDealOut(DealOut):
    username: Optional[str] = None
    user_first_name: Optional[str] = None
    user_last_name: Optional[str] = None
    user_region: Optional[str] = None


class AdminDealPage(BaseModel):
    deals: list[AdminDealOut]
    total: int
