import uuid
from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class SupportTicket(Base):
    __tablename__ = "support_tickets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    status = Column(String(20), nullable=False, default="open")
    # open | in_progress | resolved | closed
    priority = Column(String(10), nullable=False, default="medium")
    # low | medium | high

    assigned_to = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    admin_response = Column(Text, nullable=True)
    responded_by = Column(UUID(as_uuid=True), nullable=True)
    responded_at = Column(TIMESTAMP, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
