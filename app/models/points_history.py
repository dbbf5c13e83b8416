import uuid
from sqlalchemy import Column, String, Integer, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class PointsHistory(Base):
    __tablename__ = "points_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    deal_id = Column(UUID(as_uuid=True), ForeignKey("deals.id"), nullable=True)
    reward_id = Column(UUID(as_uuid=True), ForeignKey("rewards.id"), nullable=True)

    # >0 earned from a deal, <0 consumed by an approved redemption
    points = Column(Integer, nullable=False)
    description = Column(String(255), nullable=False)

    created_at = Column(TIMESTAMP, server_default=func.now())
