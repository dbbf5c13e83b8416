import uuid
from sqlalchemy import Column, String, Integer, Boolean, Text, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class GrandPrizeCriteria(Base):
    __tablename__ = "grand_prize_criteria"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    prize_description = Column(Text, nullable=True)

    criteria_type = Column(String(20), nullable=False, default="combined")
    # points | deals | combined | top_goals

    min_points = Column(Integer, nullable=True)
    min_deals = Column(Integer, nullable=True)
    points_weight = Column(Integer, nullable=False, default=60)
    deals_weight = Column(Integer, nullable=False, default=40)
    top_n = Column(Integer, nullable=False, default=1)

    # "all" or a region code
    region = Column(String(20), nullable=False, default="all")
    market_segment = Column(String(50), nullable=True)
    subregion = Column(String(100), nullable=True)

    start_date = Column(TIMESTAMP, nullable=False)
    end_date = Column(TIMESTAMP, nullable=False)
    redemption_start_date = Column(TIMESTAMP, nullable=True)
    redemption_end_date = Column(TIMESTAMP, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
