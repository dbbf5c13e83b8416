import uuid
from sqlalchemy import Column, String, Boolean, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        # same email may register once per region
        UniqueConstraint("email", "region", name="uq_users_email_region"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    username = Column(String(100), nullable=False, unique=True)
    email = Column(String(255), nullable=False)
    # NULL for passwordless accounts
    password_hash = Column(String(255), nullable=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    company_name = Column(String(200), nullable=True)
    country = Column(String(100), nullable=False)

    role = Column(String(20), nullable=False, default="user")
    # user | admin | regional-admin | super-admin

    region = Column(String(20), nullable=True)
    region_category = Column(String(50), nullable=True)
    region_subcategory = Column(String(100), nullable=True)
    admin_region_id = Column(UUID(as_uuid=True), ForeignKey("region_configs.id"), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    is_passwordless = Column(Boolean, nullable=False, default=False)
    approved_by = Column(UUID(as_uuid=True), nullable=True)
    approved_at = Column(TIMESTAMP, nullable=True)

    login_token = Column(String(64), nullable=True, unique=True)
    login_token_expiry = Column(TIMESTAMP, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
