import uuid
from sqlalchemy import Column, String, Integer, Boolean, Text, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class Reward(Base):
    __tablename__ = "rewards"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False)
    description = Column(Text)
    points_cost = Column(Integer, nullable=False)
    category = Column(String(100), nullable=False)

    # NULL = available in every region
    region = Column(String(20), nullable=True)

    # NULL = unlimited
    stock_quantity = Column(Integer, nullable=True)
    image_url = Column(String(500), nullable=True)
    estimated_delivery_days = Column(Integer, nullable=False, default=15)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
