import uuid
from sqlalchemy import Column, String, Integer, Boolean, Text, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class MonthlyRegionPrize(Base):
    __tablename__ = "monthly_region_prizes"
    __table_args__ = (
        UniqueConstraint(
            "region_config_id", "month", "year", "rank", name="uq_monthly_region_prizes_period_rank"
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    region_config_id = Column(UUID(as_uuid=True), ForeignKey("region_configs.id"), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    rank = Column(Integer, nullable=False)

    prize_name = Column(String(200), nullable=False)
    prize_description = Column(Text, nullable=True)
    prize_value = Column(Integer, nullable=True)
    goal_target = Column(Integer, nullable=False, default=0)

    redemption_start_date = Column(TIMESTAMP, nullable=True)
    redemption_end_date = Column(TIMESTAMP, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
