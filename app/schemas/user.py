from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, EmailStr

from app.schemas.common import PatchModel


Role = Literal["user", "admin", "regional-admin", "super-admin"]
Region = Literal["NOLA", "SOLA", "BRASIL", "MEXICO"]


class UserCreate(BaseModel):
    username: str
    email: EmailStr
    password: Optional[str] = None
    first_name: str
    last_name: str
    company_name: Optional[str] = None
    country: str
    role: Role = "user"
    region: Optional[Region] = None
    region_category: Optional[str] = None
    region_subcategory: Optional[str] = None
    admin_region_id: Optional[UUID] = None
    is_passwordless: bool = False
    is_approved: bool = True


class UserUpdate(PatchModel):
    nullable_fields = frozenset({"password", "company_name", "region", "region_category", "region_subcategory"})

    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    country: Optional[str] = None
    region: Optional[Region] = None
    region_category: Optional[str] = None
    region_subcategory: Optional[str] = None
    is_active: Optional[bool] = None
    is_passwordless: Optional[bool] = None


class UserRoleUpdate(BaseModel):
    role: Role
    admin_region_id: Optional[UUID] = None


class UserOut(BaseModel):
    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    company_name: Optional[str] = None
    country: str
    role: str
    region: Optional[str] = None
    region_category: Optional[str] = None
    region_subcategory: Optional[str] = None
    admin_region_id: Optional[UUID] = None
    is_active: bool
    is_approved: bool
    is_passwordless: bool
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LeaderboardEntry(BaseModel):
    user_id: UUID
    username: str
    first_name: str
    last_name: str
    region: Optional[str] = None
    total_points: int
