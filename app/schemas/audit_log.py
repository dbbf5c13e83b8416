from datetime import datetime
from typing import Any, Optional

from uuid import UUID

from pydantic import BaseModel


class AuditLogOut(BaseModel):
    id: UUID
    action: str
    entity_type: str
    entity_id: UUID
    entity_data: Optional[Any] = None
    performed_by_user_id: UUID
    performed_by_username: Optional[str] = None
    performed_by_email: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    performed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
