import uuid
from sqlalchemy import Column, String, Integer, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class PointsConfig(Base):
    __tablename__ = "points_configs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    region = Column(String(20), nullable=False, unique=True)

    # USD per point
    new_customer_rate = Column(Integer, nullable=False, default=1000)
    renewal_rate = Column(Integer, nullable=False, default=2000)

    # USD per goal, prefilled into new region configs
    default_new_customer_goal_rate = Column(Integer, nullable=False, default=1000)
    default_renewal_goal_rate = Column(Integer, nullable=False, default=2000)

    grand_prize_threshold = Column(Integer, nullable=False, default=50000)

    updated_by = Column(UUID(as_uuid=True), nullable=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
