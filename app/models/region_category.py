import uuid
from sqlalchemy import Column, String, Boolean, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class RegionCategory(Base):
    __tablename__ = "region_categories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    region = Column(String(20), nullable=False)
    category = Column(String(50), nullable=False)
    subcategory = Column(String(100), nullable=True)
    # partner level, MEXICO only (PLATINUM, GOLD...)
    level = Column(String(50), nullable=True)

    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
