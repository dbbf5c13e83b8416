import uuid
from sqlalchemy import Column, String, Boolean, Text, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class PrizeTemplate(Base):
    __tablename__ = "prize_templates"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    # JSON document or free text
    prize_rule = Column(Text, nullable=True)
    prize_rule_kind = Column(String(20), nullable=True)
    # structured | text
    size = Column(String(50), nullable=True)

    valid_from = Column(TIMESTAMP, nullable=True)
    valid_to = Column(TIMESTAMP, nullable=True)

    type = Column(String(20), nullable=False, default="recurring")
    # recurring | grand

    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
