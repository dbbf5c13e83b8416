import uuid
from sqlalchemy import Column, String, Integer, Numeric, Text, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class Deal(Base):
    __tablename__ = "deals"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    region_config_id = Column(UUID(as_uuid=True), ForeignKey("region_configs.id"), nullable=True)

    product_type = Column(String(20), nullable=False)
    # software | hardware | equipment
    product_name = Column(String(200), nullable=False)
    deal_value = Column(Numeric(12, 2), nullable=False)
    deal_type = Column(String(20), nullable=False, default="new_customer")
    # new_customer | renewal
    quantity = Column(Integer, nullable=False, default=1)
    close_date = Column(TIMESTAMP, nullable=False)
    client_info = Column(Text, nullable=True)
    license_agreement_number = Column(String(100), nullable=True, unique=True)

    status = Column(String(20), nullable=False, default="pending")
    # pending | approved | rejected

    # derived at approval time, never recomputed on edit
    points_earned = Column(Integer, nullable=False, default=0)
    goals_earned = Column(Numeric(10, 2), nullable=False, default=0)

    approved_by = Column(UUID(as_uuid=True), nullable=True)
    approved_at = Column(TIMESTAMP, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
