import uuid
from sqlalchemy import Column, String, JSON, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    action = Column(String(50), nullable=False)
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(UUID(as_uuid=True), nullable=False)
    entity_data = Column(JSON, nullable=True)

    # copied at write time so the entry survives user deletion
    performed_by_user_id = Column(UUID(as_uuid=True), nullable=False)
    performed_by_username = Column(String(100), nullable=True)
    performed_by_email = Column(String(255), nullable=True)

    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)

    performed_at = Column(TIMESTAMP, server_default=func.now())
