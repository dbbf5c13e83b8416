import uuid
from sqlalchemy import Column, String, Integer, Boolean, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class RegionConfig(Base):
    __tablename__ = "region_configs"
    __table_args__ = (
        UniqueConstraint("region", "category", "subcategory", name="uq_region_configs_triple"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    region = Column(String(20), nullable=False)
    # stored by value, master data changes never cascade here
    category = Column(String(50), nullable=False)
    subcategory = Column(String(100), nullable=True)
    name = Column(String(255), nullable=False)

    reward_id = Column(UUID(as_uuid=True), ForeignKey("rewards.id"), nullable=True)

    # USD per goal
    new_customer_goal_rate = Column(Integer, nullable=False, default=1000)
    renewal_goal_rate = Column(Integer, nullable=False, default=2000)
    monthly_goal_target = Column(Integer, nullable=False, default=10)

    is_active = Column(Boolean, nullable=False, default=True)
    # NULL = permanent
    expiration_date = Column(TIMESTAMP, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
