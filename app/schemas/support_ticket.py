from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import PatchModel


TicketStatus = Literal["open", "in_progress", "resolved", "closed"]
TicketPriority = Literal["low", "medium", "high"]


class SupportTicketCreate(BaseModel):
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)
    priority: TicketPriority = "medium"


class SupportTicketAdminUpdate(PatchModel):
    nullable_fields = frozenset({"assigned_to", "admin_response"})

    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    assigned_to: Optional[UUID] = None
    admin_response: Optional[str] = None


class SupportTicketOut(BaseModel):
    id: UUID
    user_id: UUID
    subject: str
    message: str
    status: str
    priority: str
    assigned_to: Optional[UUID] = None
    admin_response: Optional[str] = None
    responded_by: Optional[UUID] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
