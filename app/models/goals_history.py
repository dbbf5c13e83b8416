import uuid
from sqlalchemy import Column, String, Integer, Numeric, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class GoalsHistory(Base):
    __tablename__ = "goals_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    deal_id = Column(UUID(as_uuid=True), ForeignKey("deals.id"), nullable=True)
    region_config_id = Column(UUID(as_uuid=True), ForeignKey("region_configs.id"), nullable=True)

    goals = Column(Numeric(10, 2), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    description = Column(String(255), nullable=False)

    created_at = Column(TIMESTAMP, server_default=func.now())
