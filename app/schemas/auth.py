from typing import Optional

from pydantic import BaseModel, EmailStr

from app.schemas.user import Region


class CheckUserRoleIn(BaseModel):
    email: Optional[str] = None
    region: Optional[Region] = None


class PasswordlessRegisterIn(BaseModel):
    email: EmailStr
    first_name: str
    last_name: str
    company_name: Optional[str] = None
    country: str
    region: Region
    category: str
    subcategory: Optional[str] = None


class MagicLinkRequestIn(BaseModel):
    email: EmailStr
    region: Optional[Region] = None
