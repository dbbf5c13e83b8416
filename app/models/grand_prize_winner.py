import uuid
from sqlalchemy import Column, Integer, Float, Numeric, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class GrandPrizeWinner(Base):
    """Ranking snapshot written by a criteria run. Rows are never updated."""

    __tablename__ = "grand_prize_winners"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    criteria_id = Column(UUID(as_uuid=True), ForeignKey("grand_prize_criteria.id"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    run_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    points = Column(Integer, nullable=False, default=0)
    deals = Column(Integer, nullable=False, default=0)
    goals = Column(Numeric(12, 2), nullable=False, default=0)
    score = Column(Float, nullable=False)
    rank = Column(Integer, nullable=False)

    awarded_at = Column(TIMESTAMP, server_default=func.now())
